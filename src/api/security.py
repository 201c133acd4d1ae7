"""JWT authentication and security dependencies.

Two token kinds share one signing key:
- admin tokens carry ``isAdmin: true`` and gate every admin route
- member tokens carry ``userId`` and ``isUser: true`` and open the
  member-scoped reads for that one member
"""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24

# Shared admin secret; admin login is refused while unset
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
if not ADMIN_PASSWORD:
    logger.warning("ADMIN_PASSWORD is not set; admin login is disabled")

security = HTTPBearer(auto_error=False)


def _encode(claims: dict) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_admin_token() -> str:
    return _encode({"isAdmin": True})


def create_user_token(user_id: str) -> str:
    return _encode({"sub": user_id, "userId": user_id, "isUser": True})


def decode_token(token: str) -> Optional[dict]:
    """Verify signature and expiry. Returns the claims, or None if invalid."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None


def _require_claims(credentials: Optional[HTTPAuthorizationCredentials]) -> dict:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid token.",
        )
    return claims


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Admin gate. 401 without a token, 400 for a bad or expired one, 403 for a member token."""
    claims = _require_claims(credentials)
    if not claims.get("isAdmin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return claims


def require_self_or_admin(
    user_id: str,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Member-scoped gate: an admin token, or a member token for the same userId.

    ``user_id`` is bound from the route's path parameter.
    """
    claims = _require_claims(credentials)
    if claims.get("isAdmin"):
        return claims
    if claims.get("isUser") and claims.get("userId") == user_id:
        return claims

    logger.info("Member token used for another member", extra={"userId": claims.get("userId"), "requested": user_id})
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied",
    )
