"""Authentication routes (admin login, member login)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api import security
from api.dependencies import get_user_repo
from api.models import AdminLoginRequest, AuthResponse, UserLoginRequest
from api.security import create_admin_token, create_user_token
from domain.model.errors import AuthenticationError
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/admin/login", response_model=AuthResponse)
async def admin_login(request: AdminLoginRequest):
    """Exchange the shared admin password for a 24h admin token.

    Raises:
        HTTPException: 401 if the password does not match
    """
    try:
        auth_service.authenticate_admin(request.password, security.ADMIN_PASSWORD)
    except AuthenticationError as e:
        logger.warning("Admin login rejected")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    logger.info("Admin logged in")
    return AuthResponse(token=create_admin_token(), user={"name": "Admin", "role": "admin"})


@router.post("/user/login", response_model=AuthResponse)
def user_login(request: UserLoginRequest, repo: UserRepository = Depends(get_user_repo)):
    """Log a member in by userId alone and return their public profile.

    Raises:
        HTTPException: 401 if no active member has that userId
    """
    try:
        user = auth_service.authenticate_user(repo, request.user_id)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    logger.info("User logged in", extra={"userId": user.user_id})
    return AuthResponse(token=create_user_token(user.user_id), user=user.public_profile())
