"""Member CRUD routes.

- POST /api/users: register a member (open)
- GET /api/users: list active members (admin)
- GET /api/users/{userId}: one member (admin or that member)
- PUT /api/users/{userId}: replace profile (admin)
- DELETE /api/users/{userId}: soft delete (admin)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_repo
from api.models import (
    MessageResponse,
    UserCreateRequest,
    UserEnvelope,
    UserListEnvelope,
    UserResponse,
    UserUpdateRequest,
)
from api.security import require_admin, require_self_or_admin
from domain.model.errors import DuplicateError, NotFoundError
from port.user_repository import UserRepository
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserListEnvelope, dependencies=[Depends(require_admin)])
def list_users(repo: UserRepository = Depends(get_user_repo)):
    users = user_service.list_users(repo)
    return UserListEnvelope(users=[UserResponse.from_domain(u) for u in users])


@router.get("/{user_id}", response_model=UserEnvelope, dependencies=[Depends(require_self_or_admin)])
def get_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    try:
        user = user_service.get_user(repo, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return UserEnvelope(user=UserResponse.from_domain(user))


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(request: UserCreateRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a member. The userId is generated server-side."""
    try:
        user = user_service.create_user(repo, name=request.name, email=request.email, contact=request.contact)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("User registered", extra={"userId": user.user_id})
    return UserEnvelope(user=UserResponse.from_domain(user))


@router.put("/{user_id}", response_model=UserEnvelope, dependencies=[Depends(require_admin)])
def update_user(user_id: str, request: UserUpdateRequest, repo: UserRepository = Depends(get_user_repo)):
    try:
        user = user_service.update_user(
            repo,
            user_id,
            name=request.name,
            email=request.email,
            contact=request.contact,
            image=request.image,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return UserEnvelope(user=UserResponse.from_domain(user))


@router.delete("/{user_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    try:
        user_service.delete_user(repo, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="User deleted successfully")
