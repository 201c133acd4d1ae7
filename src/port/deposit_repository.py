from typing import Protocol

from domain.model.deposit import Deposit
from domain.model.report import DepositWithUser


class DepositRepository(Protocol):
    """Protocol defining the interface for deposit data access."""

    def add_or_accumulate(self, deposit: Deposit) -> tuple[Deposit, bool]:
        """Atomically insert the deposit, or add its amount to the existing
        record for the same (user_id, month).

        Returns the stored Deposit and True if a new record was created.
        """
        ...

    def list_all_with_users(self) -> list[DepositWithUser]:
        """All deposits, newest first, joined to their user where one exists."""
        ...

    def list_by_user(self, user_id: str) -> list[Deposit]:
        """Deposits for a user ordered by year then month, both descending."""
        ...

    def update_amount(self, deposit_id: str, amount: float) -> Deposit | None:
        """Overwrite the amount. Return updated Deposit or None if not found."""
        ...

    def delete(self, deposit_id: str) -> bool:
        """Hard delete. Return True if a record was removed."""
        ...

    def sum_amount(self, month: str | None = None) -> float:
        """Sum of amounts over all deposits, or over one month when given."""
        ...
