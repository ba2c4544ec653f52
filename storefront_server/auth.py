# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication: password hashing, session JWTs and the access-token dependency."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront_server.config import settings
from storefront_server.models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_TOKEN_TTL = timedelta(minutes=settings.access_token_expire_minutes)
REFRESH_TOKEN_TTL = timedelta(days=settings.refresh_token_expire_days)


def hash_password(password: str) -> str:
    """Hash a password (or one-time token) for storage."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password (or one-time token) against its hash."""
    return pwd_context.verify(plain, hashed)


def _encode(user_id: uuid.UUID, secret: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + ttl,
        # Two logins within the same second must still yield distinct tokens
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: uuid.UUID) -> str:
    """Create a short-lived JWT access token."""
    return _encode(user_id, settings.access_token_secret, ACCESS_TOKEN_TTL)


def create_refresh_token(user_id: uuid.UUID) -> str:
    """Create a long-lived JWT refresh token, signed with its own secret."""
    return _encode(user_id, settings.refresh_token_secret, REFRESH_TOKEN_TTL)


def issue_session_tokens(user_id: uuid.UUID) -> tuple[str, str]:
    """Return (access_token, refresh_token) for a user. No side effects."""
    return create_access_token(user_id), create_refresh_token(user_id)


def revoke_session(user: User) -> None:
    """Drop the stored refresh token so no refresh token validates for this user."""
    user.refresh_token = None


def _decode(token: str, secret: str) -> dict[str, Any] | None:
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token."""
    return _decode(token, settings.access_token_secret)


def decode_refresh_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a refresh token's signature and expiry."""
    return _decode(token, settings.refresh_token_secret)


def refresh_token_is_valid(user: User, token: str) -> bool:
    """True when ``token`` is the user's stored refresh token, correctly signed and unexpired."""
    if not user.refresh_token or user.refresh_token != token:
        return False
    payload = decode_refresh_token(token)
    return bool(payload) and payload.get("sub") == str(user.id)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> uuid.UUID:
    """Extract and validate user ID from the Bearer access token. Raises 401 if invalid."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
