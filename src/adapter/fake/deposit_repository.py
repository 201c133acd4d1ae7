"""In-memory implementation of DepositRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from domain.model.deposit import Deposit
from domain.model.report import DepositWithUser


class FakeDepositRepository:
    def __init__(self):
        self.store: dict[str, Deposit] = {}
        # Set by tests that need the user join in list_all_with_users.
        self.user_repo = None

    # ── write operations ─────────────────────────────────────

    def add_or_accumulate(self, deposit: Deposit) -> tuple[Deposit, bool]:
        for existing in self.store.values():
            if existing.user_id == deposit.user_id and existing.month == deposit.month:
                existing.amount += deposit.amount
                existing.updated_at = datetime.now(timezone.utc)
                return replace(existing), False

        self.store[deposit.id] = replace(deposit)
        return replace(deposit), True

    def update_amount(self, deposit_id: str, amount: float) -> Deposit | None:
        deposit = self.store.get(deposit_id)
        if not deposit:
            return None
        deposit.amount = amount
        deposit.updated_at = datetime.now(timezone.utc)
        return replace(deposit)

    def delete(self, deposit_id: str) -> bool:
        return self.store.pop(deposit_id, None) is not None

    # ── read operations ──────────────────────────────────────

    def list_all_with_users(self) -> list[DepositWithUser]:
        deposits = sorted(self.store.values(), key=lambda d: d.created_at, reverse=True)
        return [
            DepositWithUser(
                deposit=replace(d),
                user=self.user_repo.get_by_user_id(d.user_id, active_only=False) if self.user_repo else None,
            )
            for d in deposits
        ]

    def list_by_user(self, user_id: str) -> list[Deposit]:
        deposits = [replace(d) for d in self.store.values() if d.user_id == user_id]
        return sorted(deposits, key=lambda d: (d.year, d.month), reverse=True)

    def sum_amount(self, month: str | None = None) -> float:
        return sum(d.amount for d in self.store.values() if month is None or d.month == month)
