# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication API routes."""

import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_server.api.schemas import (
    AccessTokenResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
    StatusResponse,
    UserResponse,
    VerifyEmailRequest,
)
from storefront_server.auth import REFRESH_TOKEN_TTL, get_current_user_id
from storefront_server.config import settings
from storefront_server.database import get_db
from storefront_server.models import User
from storefront_server.rate_limit import rate_limit_auth_dep
from storefront_server.services import accounts

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.refresh_cookie_name,
        token,
        max_age=int(REFRESH_TOKEN_TTL.total_seconds()),
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="strict",
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.refresh_cookie_name,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="strict",
    )


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(rate_limit_auth_dep)])
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate, set the refresh cookie and return an access token."""
    access_token, refresh_token, user = await accounts.login(db, data.email, data.password)
    _set_refresh_cookie(response, refresh_token)
    return LoginResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """End the current session. Always 204, even without a valid session."""
    token = request.cookies.get(settings.refresh_cookie_name)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    if not token:
        return response
    await accounts.logout(db, token)
    _clear_refresh_cookie(response)
    return response


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AccessTokenResponse:
    """Issue a new access token from the refresh cookie."""
    token = request.cookies.get(settings.refresh_cookie_name)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return AccessTokenResponse(access_token=await accounts.refresh_access_token(db, token))


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit_auth_dep)],
)
async def signup(
    data: SignupRequest,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
) -> SignupResponse:
    """Create an account. A verification code is emailed to the new address."""
    user = await accounts.signup(
        db,
        background,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
    )
    return SignupResponse(message=f"New user {user.email} created!", user_id=user.id)


@router.post(
    "/verify-email",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(rate_limit_auth_dep)],
)
async def verify_email(
    data: VerifyEmailRequest,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    """Verify email with the one-time code."""
    await accounts.verify_email(db, background, data.user_id, data.otp)
    return StatusResponse()


@router.post("/forgot-password", response_model=StatusResponse, dependencies=[Depends(rate_limit_auth_dep)])
async def forgot_password(
    data: ForgotPasswordRequest,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    """Request a password reset link by email."""
    await accounts.forgot_password(db, background, data.email)
    return StatusResponse(message="Password reset link is sent to your email")


@router.post("/reset-password", response_model=StatusResponse, dependencies=[Depends(rate_limit_auth_dep)])
async def reset_password(
    data: ResetPasswordRequest,
    background: BackgroundTasks,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    """Set a new password for the signed-in user."""
    await accounts.reset_password(db, background, user_id, data.password)
    return StatusResponse(message="Password Reset Successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Get current user profile."""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(user)
