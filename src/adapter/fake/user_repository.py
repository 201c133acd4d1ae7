"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateError
from domain.model.report import UserWithDeposits
from domain.model.user import User


class FakeUserRepository:
    def __init__(self, deposit_repo=None):
        self.store: dict[str, User] = {}
        # Shared with a FakeDepositRepository to serve the deposits join.
        self.deposit_repo = deposit_repo

    # ── write operations ─────────────────────────────────────

    def create(self, user_id: str, name: str, email: str, contact: str, image: str) -> User:
        if self.exists_user_id(user_id):
            raise DuplicateError("User ID already exists", key='user_id')
        if self.get_active_by_email(email):
            raise DuplicateError("Email already exists", key='email')

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            email=email,
            contact=contact,
            image=image,
            created_at=now,
            updated_at=now,
        )
        self.store[user.id] = user
        return replace(user)

    def update(self, user_id: str, name: str, email: str, contact: str, image: str) -> User | None:
        user = self._find_active(user_id)
        if not user:
            return None
        other = self.get_active_by_email(email)
        if other and other.id != user.id:
            raise DuplicateError("Email already exists", key='email')

        user.name = name
        user.email = email
        user.contact = contact
        user.image = image
        user.updated_at = datetime.now(timezone.utc)
        return replace(user)

    def deactivate(self, user_id: str) -> bool:
        user = self._find_active(user_id)
        if not user:
            return False
        user.is_active = False
        user.updated_at = datetime.now(timezone.utc)
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_user_id(self, user_id: str, active_only: bool = True) -> User | None:
        for user in self.store.values():
            if user.user_id == user_id and (user.is_active or not active_only):
                return replace(user)
        return None

    def get_active_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.is_active and user.email == email:
                return replace(user)
        return None

    def exists_user_id(self, user_id: str) -> bool:
        return any(u.user_id == user_id for u in self.store.values())

    def list_active(self) -> list[User]:
        active = [replace(u) for u in self.store.values() if u.is_active]
        return sorted(active, key=lambda u: u.created_at, reverse=True)

    def count_active(self) -> int:
        return sum(1 for u in self.store.values() if u.is_active)

    def list_active_with_deposits(self) -> list[UserWithDeposits]:
        return [
            UserWithDeposits(
                user=user,
                deposits=self.deposit_repo.list_by_user(user.user_id) if self.deposit_repo else [],
            )
            for user in self.list_active()
        ]

    def _find_active(self, user_id: str) -> User | None:
        for user in self.store.values():
            if user.user_id == user_id and user.is_active:
                return user
        return None
