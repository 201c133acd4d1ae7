"""Read models for the admin dashboard."""

from dataclasses import dataclass, field

from domain.model.deposit import Deposit
from domain.model.user import User


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_deposits: float
    this_month_deposits: float
    current_month: str


@dataclass
class UserWithDeposits:
    """An active user joined with every deposit recorded under their userId."""
    user: User
    deposits: list[Deposit] = field(default_factory=list)

    @property
    def total_deposits(self) -> float:
        return sum(d.amount for d in self.deposits)

    @property
    def deposits_count(self) -> int:
        return len(self.deposits)


@dataclass
class DepositWithUser:
    """A deposit with a best-effort join to its owning user."""
    deposit: Deposit
    user: User | None = None
