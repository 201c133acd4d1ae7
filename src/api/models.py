"""Pydantic models for API request/response.

Wire format is camelCase (``userId``, ``monthName``); Python attributes stay
snake_case through the alias generator.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from domain.model.deposit import Deposit
from domain.model.report import DashboardStats, DepositWithUser, UserWithDeposits
from domain.model.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _user_id_as_str(v):
    """Clients may send the numeric-looking userId as a JSON number."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


# ── requests ─────────────────────────────────────────────────


class AdminLoginRequest(BaseModel):
    """Request model for admin login."""
    password: str


class UserLoginRequest(CamelModel):
    """Request model for member login."""
    user_id: str = Field(..., min_length=1, description="Public member ID")

    @field_validator('user_id', mode='before')
    @classmethod
    def normalize_user_id(cls, v):
        return _user_id_as_str(v)


class UserCreateRequest(BaseModel):
    """Request model for member registration. ``image`` is accepted but ignored."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    contact: str = Field(..., min_length=1)
    image: Optional[str] = None


class UserUpdateRequest(BaseModel):
    """Request model for replacing a member's profile."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    contact: str = Field(..., min_length=1)
    image: Optional[str] = None


class DepositCreateRequest(CamelModel):
    """Request model for posting a monthly deposit."""
    user_id: str = Field(..., min_length=1, description="Public member ID")
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    month: str = Field(..., description="Month in YYYY-MM format")

    @field_validator('user_id', mode='before')
    @classmethod
    def normalize_user_id(cls, v):
        return _user_id_as_str(v)


class DepositUpdateRequest(BaseModel):
    amount: float = Field(..., ge=0, allow_inf_nan=False)


# ── responses ────────────────────────────────────────────────


class UserResponse(CamelModel):
    """Response model for a member record."""
    id: str = Field(..., description="Internal record ID")
    user_id: str = Field(..., description="Public member ID")
    name: str
    email: str
    contact: str
    image: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            contact=user.contact,
            image=user.image,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class DepositResponse(CamelModel):
    """Response model for a deposit record."""
    id: str = Field(..., description="Internal record ID")
    user_id: str
    amount: float
    month: str
    year: int
    month_name: Optional[str] = Field(None, description="English month name, null when the month number is out of range")
    added_by: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, deposit: Deposit) -> 'DepositResponse':
        return cls(
            id=deposit.id,
            user_id=deposit.user_id,
            amount=deposit.amount,
            month=deposit.month,
            year=deposit.year,
            month_name=deposit.month_name,
            added_by=deposit.added_by,
            created_at=deposit.created_at,
            updated_at=deposit.updated_at,
        )


class DepositWithUserResponse(DepositResponse):
    user: Optional[UserResponse] = Field(None, description="Joined member, null if no longer present")

    @classmethod
    def from_joined(cls, row: DepositWithUser) -> 'DepositWithUserResponse':
        base = DepositResponse.from_domain(row.deposit)
        return cls(
            **base.model_dump(),
            user=UserResponse.from_domain(row.user) if row.user else None,
        )


class UserWithDepositsResponse(UserResponse):
    deposits: list[DepositResponse]
    total_deposits: float
    deposits_count: int

    @classmethod
    def from_joined(cls, row: UserWithDeposits) -> 'UserWithDepositsResponse':
        base = UserResponse.from_domain(row.user)
        return cls(
            **base.model_dump(),
            deposits=[DepositResponse.from_domain(d) for d in row.deposits],
            total_deposits=row.total_deposits,
            deposits_count=row.deposits_count,
        )


class StatsResponse(CamelModel):
    total_users: int
    total_deposits: float
    this_month_deposits: float
    current_month: str = Field(..., description="YYYY-MM at request time (UTC)")

    @classmethod
    def from_domain(cls, stats: DashboardStats) -> 'StatsResponse':
        return cls(
            total_users=stats.total_users,
            total_deposits=stats.total_deposits,
            this_month_deposits=stats.this_month_deposits,
            current_month=stats.current_month,
        )


# ── envelopes ────────────────────────────────────────────────


class AuthResponse(BaseModel):
    """Response model for authentication."""
    success: bool = True
    token: str
    user: dict


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class UserListEnvelope(BaseModel):
    success: bool = True
    users: list[UserResponse]


class UserWithDepositsListEnvelope(BaseModel):
    success: bool = True
    users: list[UserWithDepositsResponse]


class DepositEnvelope(BaseModel):
    success: bool = True
    deposit: DepositResponse
    message: Optional[str] = None


class DepositListEnvelope(BaseModel):
    success: bool = True
    deposits: list[DepositResponse]


class DepositWithUserListEnvelope(BaseModel):
    success: bool = True
    deposits: list[DepositWithUserResponse]


class StatsEnvelope(BaseModel):
    success: bool = True
    stats: StatsResponse


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    database: str
