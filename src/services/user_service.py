"""User service: member registration, profile updates and removal."""

import logging
import secrets

from domain.model.errors import DomainError, DuplicateError, NotFoundError
from domain.model.user import DEFAULT_IMAGE_URL, User, normalize_email
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

USER_ID_UPPER_BOUND = 1_000_000
MAX_USER_ID_ATTEMPTS = 10


def generate_user_id() -> str:
    return str(secrets.randbelow(USER_ID_UPPER_BOUND))


def list_users(repo: UserRepository) -> list[User]:
    return repo.list_active()


def get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_user_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(repo: UserRepository, name: str, email: str, contact: str) -> User:
    """Register a member under a freshly generated userId.

    The avatar is always the default placeholder. A generated userId that is
    already taken, either on the pre-check or on the unique index at insert
    time, is replaced and the insert retried.

    Raises:
        DuplicateError: an active user already has this email
        DomainError: no free userId found within MAX_USER_ID_ATTEMPTS
    """
    email = normalize_email(email)
    if repo.get_active_by_email(email):
        raise DuplicateError("Email already exists", key='email')

    for attempt in range(1, MAX_USER_ID_ATTEMPTS + 1):
        user_id = generate_user_id()
        if repo.exists_user_id(user_id):
            logger.debug("Generated userId already taken", extra={"userId": user_id, "attempt": attempt})
            continue
        try:
            return repo.create(
                user_id=user_id,
                name=name.strip(),
                email=email,
                contact=contact.strip(),
                image=DEFAULT_IMAGE_URL,
            )
        except DuplicateError as e:
            if e.key != 'user_id':
                raise
            logger.debug("userId collided on insert", extra={"userId": user_id, "attempt": attempt})

    logger.error("Could not allocate a unique userId", extra={"attempts": MAX_USER_ID_ATTEMPTS})
    raise DomainError("Failed to allocate a unique user ID")


def update_user(
    repo: UserRepository,
    user_id: str,
    name: str,
    email: str,
    contact: str,
    image: str | None = None,
) -> User:
    """Replace a member's profile fields. A missing image keeps the current one."""
    current = get_user(repo, user_id)
    user = repo.update(
        user_id,
        name=name.strip(),
        email=normalize_email(email),
        contact=contact.strip(),
        image=image or current.image,
    )
    if not user:
        raise NotFoundError("User not found")
    logger.info("User updated", extra={"userId": user_id})
    return user


def delete_user(repo: UserRepository, user_id: str) -> None:
    """Soft delete: the record stays but drops out of every active lookup."""
    if not repo.deactivate(user_id):
        raise NotFoundError("User not found")
    logger.info("User deactivated", extra={"userId": user_id})
