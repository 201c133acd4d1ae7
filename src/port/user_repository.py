from typing import Protocol

from domain.model.report import UserWithDeposits
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for member data access."""

    def create(self, user_id: str, name: str, email: str, contact: str, image: str) -> User:
        """Insert a new active user.

        Raises DuplicateError if the user_id or the email of an active user is taken.
        """
        ...

    def get_by_user_id(self, user_id: str, active_only: bool = True) -> User | None:
        """Find a user by public userId. Return User or None if not found."""
        ...

    def get_active_by_email(self, email: str) -> User | None:
        """Find an active user by normalized email."""
        ...

    def exists_user_id(self, user_id: str) -> bool:
        """Return True if any user, active or not, holds this userId."""
        ...

    def list_active(self) -> list[User]:
        """Active users, newest first."""
        ...

    def update(self, user_id: str, name: str, email: str, contact: str, image: str) -> User | None:
        """Replace profile fields on an active user. Return updated User or None if not found.

        Raises DuplicateError if the email belongs to another active user.
        """
        ...

    def deactivate(self, user_id: str) -> bool:
        """Soft delete an active user. Return True if a record was changed."""
        ...

    def count_active(self) -> int:
        ...

    def list_active_with_deposits(self) -> list[UserWithDeposits]:
        """Active users (newest first) joined with their deposits."""
        ...
