"""Unit tests for Deposit domain model and month helpers."""

import unittest
from datetime import datetime, timedelta, timezone

from domain.model.deposit import MONTH_NAMES, Deposit, current_month, parse_month
from domain.model.errors import ValidationError
from domain.model.report import UserWithDeposits
from domain.model.user import User


class TestParseMonth(unittest.TestCase):

    def test_every_month_maps_to_english_name(self):
        for number, name in enumerate(MONTH_NAMES, start=1):
            year, month_name = parse_month(f"2024-{number:02d}")
            self.assertEqual(year, 2024)
            self.assertEqual(month_name, name)

    def test_out_of_range_month_yields_none(self):
        self.assertEqual(parse_month("2024-13"), (2024, None))
        self.assertEqual(parse_month("2024-00"), (2024, None))

    def test_rejects_malformed_month(self):
        for bad in ["2024-1", "24-01", "2024/01", "January", "", "2024-01-05"]:
            with self.subTest(month=bad):
                with self.assertRaises(ValidationError):
                    parse_month(bad)

    def test_rejects_non_string(self):
        with self.assertRaises(ValidationError):
            parse_month(202401)


class TestCurrentMonth(unittest.TestCase):

    def test_formats_given_datetime(self):
        self.assertEqual(current_month(datetime(2026, 3, 9, tzinfo=timezone.utc)), "2026-03")

    def test_defaults_to_now(self):
        self.assertEqual(current_month(), datetime.now(timezone.utc).strftime("%Y-%m"))


class TestDepositCreate(unittest.TestCase):

    def test_derives_year_and_month_name(self):
        deposit = Deposit.create(user_id="123456", amount=100, month="2024-01")

        self.assertEqual(deposit.year, 2024)
        self.assertEqual(deposit.month_name, "January")
        self.assertEqual(deposit.amount, 100.0)
        self.assertIsInstance(deposit.amount, float)
        self.assertEqual(deposit.added_by, "admin")
        self.assertEqual(deposit.created_at, deposit.updated_at)
        self.assertTrue(deposit.id)

    def test_ids_are_unique(self):
        a = Deposit.create(user_id="1", amount=1, month="2024-01")
        b = Deposit.create(user_id="1", amount=1, month="2024-01")
        self.assertNotEqual(a.id, b.id)

    def test_negative_amount_rejected(self):
        with self.assertRaises(ValidationError):
            Deposit.create(user_id="1", amount=-5, month="2024-01")

    def test_non_finite_amount_rejected(self):
        for amount in (float("inf"), float("nan")):
            with self.subTest(amount=amount), self.assertRaises(ValidationError):
                Deposit.create(user_id="1", amount=amount, month="2024-01")

    def test_zero_amount_allowed(self):
        self.assertEqual(Deposit.create(user_id="1", amount=0, month="2024-01").amount, 0.0)


class TestUserWithDeposits(unittest.TestCase):

    def test_totals(self):
        now = datetime.now(timezone.utc)
        user = User(id="x", user_id="1", name="A", email="a@x.com", contact="1", created_at=now, updated_at=now)
        deposits = [
            Deposit.create(user_id="1", amount=100, month="2024-01"),
            Deposit.create(user_id="1", amount=50.5, month="2024-02"),
        ]
        row = UserWithDeposits(user=user, deposits=deposits)

        self.assertEqual(row.total_deposits, 150.5)
        self.assertEqual(row.deposits_count, 2)

    def test_empty(self):
        now = datetime.now(timezone.utc) - timedelta(days=1)
        user = User(id="x", user_id="1", name="A", email="a@x.com", contact="1", created_at=now, updated_at=now)
        row = UserWithDeposits(user=user)

        self.assertEqual(row.total_deposits, 0)
        self.assertEqual(row.deposits_count, 0)
