"""Unit tests for deposit_service module."""

import unittest

from adapter.fake.deposit_repository import FakeDepositRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import NotFoundError, ValidationError
from services import deposit_service, user_service


class DepositServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.deposits = FakeDepositRepository()
        self.users = FakeUserRepository(deposit_repo=self.deposits)
        self.deposits.user_repo = self.users
        self.user = user_service.create_user(self.users, name="A", email="a@x.com", contact="1")


class TestAddDeposit(DepositServiceTestCase):

    def test_first_deposit_creates_record(self):
        deposit, created = deposit_service.add_deposit(
            self.deposits, self.users, user_id=self.user.user_id, amount=100, month="2024-01",
        )

        self.assertTrue(created)
        self.assertEqual(deposit.amount, 100)
        self.assertEqual(deposit.year, 2024)
        self.assertEqual(deposit.month_name, "January")

    def test_same_month_accumulates(self):
        first, _ = deposit_service.add_deposit(
            self.deposits, self.users, user_id=self.user.user_id, amount=100, month="2024-01",
        )
        second, created = deposit_service.add_deposit(
            self.deposits, self.users, user_id=self.user.user_id, amount=100, month="2024-01",
        )

        self.assertFalse(created)
        self.assertEqual(second.id, first.id)
        self.assertEqual(second.amount, 200)
        self.assertEqual(len(self.deposits.store), 1)

    def test_different_month_is_separate_record(self):
        deposit_service.add_deposit(self.deposits, self.users, user_id=self.user.user_id, amount=1, month="2024-01")
        _, created = deposit_service.add_deposit(
            self.deposits, self.users, user_id=self.user.user_id, amount=1, month="2024-02",
        )

        self.assertTrue(created)
        self.assertEqual(len(self.deposits.store), 2)

    def test_unknown_user(self):
        with self.assertRaises(NotFoundError):
            deposit_service.add_deposit(self.deposits, self.users, user_id="nope", amount=1, month="2024-01")

    def test_deleted_user(self):
        user_service.delete_user(self.users, self.user.user_id)
        with self.assertRaises(NotFoundError):
            deposit_service.add_deposit(
                self.deposits, self.users, user_id=self.user.user_id, amount=1, month="2024-01",
            )

    def test_malformed_month(self):
        with self.assertRaises(ValidationError):
            deposit_service.add_deposit(
                self.deposits, self.users, user_id=self.user.user_id, amount=1, month="Jan 2024",
            )

    def test_out_of_range_month_has_no_name(self):
        deposit, _ = deposit_service.add_deposit(
            self.deposits, self.users, user_id=self.user.user_id, amount=1, month="2024-13",
        )
        self.assertIsNone(deposit.month_name)


class TestListDeposits(DepositServiceTestCase):

    def test_list_by_user_sorted_newest_period_first(self):
        for month in ["2023-12", "2024-02", "2024-01"]:
            deposit_service.add_deposit(self.deposits, self.users, user_id=self.user.user_id, amount=1, month=month)

        deposits = deposit_service.list_user_deposits(self.deposits, self.user.user_id)

        self.assertEqual([d.month for d in deposits], ["2024-02", "2024-01", "2023-12"])

    def test_list_by_user_excludes_others(self):
        other = user_service.create_user(self.users, name="B", email="b@x.com", contact="2")
        deposit_service.add_deposit(self.deposits, self.users, user_id=other.user_id, amount=1, month="2024-01")

        self.assertEqual(deposit_service.list_user_deposits(self.deposits, self.user.user_id), [])

    def test_list_all_joins_user(self):
        deposit_service.add_deposit(self.deposits, self.users, user_id=self.user.user_id, amount=5, month="2024-01")

        rows = deposit_service.list_deposits(self.deposits)

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].user.user_id, self.user.user_id)


class TestUpdateAndDeleteDeposit(DepositServiceTestCase):

    def setUp(self):
        super().setUp()
        self.deposit, _ = deposit_service.add_deposit(
            self.deposits, self.users, user_id=self.user.user_id, amount=100, month="2024-01",
        )

    def test_update_overwrites_amount(self):
        updated = deposit_service.update_deposit(self.deposits, self.deposit.id, 42)
        self.assertEqual(updated.amount, 42)

    def test_update_missing(self):
        with self.assertRaises(NotFoundError):
            deposit_service.update_deposit(self.deposits, "missing", 1)

    def test_update_negative(self):
        with self.assertRaises(ValidationError):
            deposit_service.update_deposit(self.deposits, self.deposit.id, -1)

    def test_update_non_finite(self):
        with self.assertRaises(ValidationError):
            deposit_service.update_deposit(self.deposits, self.deposit.id, float("inf"))
        self.assertEqual(self.deposits.store[self.deposit.id].amount, self.deposit.amount)

    def test_delete(self):
        deposit_service.delete_deposit(self.deposits, self.deposit.id)
        self.assertNotIn(self.deposit.id, self.deposits.store)

    def test_delete_missing(self):
        with self.assertRaises(NotFoundError):
            deposit_service.delete_deposit(self.deposits, "missing")
