"""Report service: aggregate figures for the admin dashboard."""

from datetime import datetime

from domain.model.deposit import current_month
from domain.model.report import DashboardStats, UserWithDeposits
from port.deposit_repository import DepositRepository
from port.user_repository import UserRepository


def get_dashboard_stats(
    users: UserRepository,
    deposits: DepositRepository,
    now: datetime | None = None,
) -> DashboardStats:
    month = current_month(now)
    return DashboardStats(
        total_users=users.count_active(),
        total_deposits=deposits.sum_amount(),
        this_month_deposits=deposits.sum_amount(month=month),
        current_month=month,
    )


def list_users_with_deposits(users: UserRepository) -> list[UserWithDeposits]:
    return users.list_active_with_deposits()
