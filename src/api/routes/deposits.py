"""Deposit routes.

- POST /api/deposits: post or accumulate a monthly deposit (admin)
- GET /api/deposits: all deposits with their members (admin)
- GET /api/deposits/user/{userId}: one member's deposits (admin or that member)
- PUT /api/deposits/{id}: overwrite amount (admin)
- DELETE /api/deposits/{id}: hard delete (admin)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_deposit_repo, get_user_repo
from api.models import (
    DepositCreateRequest,
    DepositEnvelope,
    DepositListEnvelope,
    DepositResponse,
    DepositUpdateRequest,
    DepositWithUserListEnvelope,
    DepositWithUserResponse,
    MessageResponse,
)
from api.security import require_admin, require_self_or_admin
from domain.model.errors import NotFoundError, ValidationError
from port.deposit_repository import DepositRepository
from port.user_repository import UserRepository
from services import deposit_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/deposits", tags=["deposits"])


@router.get("", response_model=DepositWithUserListEnvelope, dependencies=[Depends(require_admin)])
def list_deposits(repo: DepositRepository = Depends(get_deposit_repo)):
    rows = deposit_service.list_deposits(repo)
    return DepositWithUserListEnvelope(deposits=[DepositWithUserResponse.from_joined(r) for r in rows])


@router.get("/user/{user_id}", response_model=DepositListEnvelope, dependencies=[Depends(require_self_or_admin)])
def list_user_deposits(user_id: str, repo: DepositRepository = Depends(get_deposit_repo)):
    deposits = deposit_service.list_user_deposits(repo, user_id)
    return DepositListEnvelope(deposits=[DepositResponse.from_domain(d) for d in deposits])


@router.post(
    "",
    response_model=DepositEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def add_deposit(
    request: DepositCreateRequest,
    response: Response,
    deposits: DepositRepository = Depends(get_deposit_repo),
    users: UserRepository = Depends(get_user_repo),
):
    """Post a deposit. Returns 201 for a new month, 200 when added to an existing one."""
    try:
        deposit, created = deposit_service.add_deposit(
            deposits, users, user_id=request.user_id, amount=request.amount, month=request.month,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if created:
        return DepositEnvelope(deposit=DepositResponse.from_domain(deposit))

    response.status_code = status.HTTP_200_OK
    return DepositEnvelope(deposit=DepositResponse.from_domain(deposit), message="Deposit updated")


@router.put("/{deposit_id}", response_model=DepositEnvelope, dependencies=[Depends(require_admin)])
def update_deposit(
    deposit_id: str,
    request: DepositUpdateRequest,
    repo: DepositRepository = Depends(get_deposit_repo),
):
    try:
        deposit = deposit_service.update_deposit(repo, deposit_id, request.amount)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return DepositEnvelope(deposit=DepositResponse.from_domain(deposit))


@router.delete("/{deposit_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_deposit(deposit_id: str, repo: DepositRepository = Depends(get_deposit_repo)):
    try:
        deposit_service.delete_deposit(repo, deposit_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="Deposit deleted successfully")
