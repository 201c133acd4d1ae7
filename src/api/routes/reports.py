"""Admin dashboard aggregates."""

from fastapi import APIRouter, Depends

from api.dependencies import get_deposit_repo, get_user_repo
from api.models import StatsEnvelope, StatsResponse, UserWithDepositsListEnvelope, UserWithDepositsResponse
from api.security import require_admin
from port.deposit_repository import DepositRepository
from port.user_repository import UserRepository
from services import report_service

router = APIRouter(prefix="/api", tags=["reports"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=StatsEnvelope)
def get_stats(
    users: UserRepository = Depends(get_user_repo),
    deposits: DepositRepository = Depends(get_deposit_repo),
):
    """Active member count, all-time deposit total and this month's total."""
    stats = report_service.get_dashboard_stats(users, deposits)
    return StatsEnvelope(stats=StatsResponse.from_domain(stats))


@router.get("/users-with-deposits", response_model=UserWithDepositsListEnvelope)
def users_with_deposits(users: UserRepository = Depends(get_user_repo)):
    rows = report_service.list_users_with_deposits(users)
    return UserWithDepositsListEnvelope(users=[UserWithDepositsResponse.from_joined(r) for r in rows])
