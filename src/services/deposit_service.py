"""Deposit service: monthly deposit bookkeeping."""

import logging

from domain.model.deposit import Deposit, validate_amount
from domain.model.errors import NotFoundError
from domain.model.report import DepositWithUser
from port.deposit_repository import DepositRepository
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


def add_deposit(
    deposits: DepositRepository,
    users: UserRepository,
    user_id: str,
    amount: float,
    month: str,
) -> tuple[Deposit, bool]:
    """Record a deposit for an active member.

    A second posting for the same (userId, month) adds to the existing amount.
    Returns the stored deposit and whether a new record was created.

    Raises:
        NotFoundError: no active user with that userId
        ValidationError: malformed month, negative or non-finite amount
    """
    if not users.get_by_user_id(user_id):
        raise NotFoundError("User not found")

    deposit = Deposit.create(user_id=user_id, amount=amount, month=month)
    return deposits.add_or_accumulate(deposit)


def list_deposits(deposits: DepositRepository) -> list[DepositWithUser]:
    return deposits.list_all_with_users()


def list_user_deposits(deposits: DepositRepository, user_id: str) -> list[Deposit]:
    return deposits.list_by_user(user_id)


def update_deposit(deposits: DepositRepository, deposit_id: str, amount: float) -> Deposit:
    validate_amount(amount)
    deposit = deposits.update_amount(deposit_id, float(amount))
    if not deposit:
        raise NotFoundError("Deposit not found")
    logger.info("Deposit amount overwritten", extra={"depositId": deposit_id, "amount": amount})
    return deposit


def delete_deposit(deposits: DepositRepository, deposit_id: str) -> None:
    if not deposits.delete(deposit_id):
        raise NotFoundError("Deposit not found")
    logger.info("Deposit deleted", extra={"depositId": deposit_id})
