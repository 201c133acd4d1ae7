"""Domain model for monthly deposits."""

import math
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from domain.model.errors import ValidationError

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

_MONTH_PATTERN = re.compile(r'^\d{4}-\d{2}$')


def validate_amount(amount: float) -> None:
    """Amounts are finite and non-negative; anything else cannot be summed."""
    if not math.isfinite(amount):
        raise ValidationError("Amount must be a finite number")
    if amount < 0:
        raise ValidationError("Amount must be greater than or equal to 0")


def parse_month(month: str) -> tuple[int, str | None]:
    """Split a ``YYYY-MM`` string into its year and English month name.

    An out-of-range month number (``00``, ``13``..) yields ``None`` for the
    name rather than an error.

    Raises:
        ValidationError: month is not shaped like ``YYYY-MM``
    """
    if not isinstance(month, str) or not _MONTH_PATTERN.match(month):
        raise ValidationError("Month must be in YYYY-MM format")

    year_part, month_part = month.split('-')
    month_number = int(month_part)
    month_name = MONTH_NAMES[month_number - 1] if 1 <= month_number <= 12 else None
    return int(year_part), month_name


def current_month(now: datetime | None = None) -> str:
    """Return the current UTC calendar month as ``YYYY-MM``."""
    now = now or datetime.now(timezone.utc)
    return now.strftime('%Y-%m')


@dataclass
class Deposit:
    """A member's accumulated deposit for one calendar month (Entity)."""
    id: str
    user_id: str
    amount: float
    month: str
    year: int
    month_name: str | None
    created_at: datetime
    updated_at: datetime
    added_by: str = 'admin'

    @classmethod
    def create(cls, user_id: str, amount: float, month: str, added_by: str = 'admin') -> 'Deposit':
        """Build a new deposit, deriving year and month name from ``month``."""
        validate_amount(amount)
        year, month_name = parse_month(month)
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4().hex,
            user_id=user_id,
            amount=float(amount),
            month=month,
            year=year,
            month_name=month_name,
            created_at=now,
            updated_at=now,
            added_by=added_by,
        )
