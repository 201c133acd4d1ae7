"""Auth service: admin and member authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import hmac

from domain.model.errors import AuthenticationError
from domain.model.user import User
from port.user_repository import UserRepository


def authenticate_admin(password: str, admin_password: str | None) -> None:
    """Check the shared admin secret.

    Raises:
        AuthenticationError: secret not configured or password mismatch
    """
    if not admin_password or not password:
        raise AuthenticationError("Invalid credentials")
    if not hmac.compare_digest(password.encode("utf-8"), admin_password.encode("utf-8")):
        raise AuthenticationError("Invalid credentials")


def authenticate_user(repo: UserRepository, user_id: str) -> User:
    """Members log in with their userId alone; it must belong to an active user.

    Raises:
        AuthenticationError: no active user with that userId
    """
    user = repo.get_by_user_id(user_id.strip()) if user_id else None
    if not user:
        raise AuthenticationError("Invalid user ID")
    return user
