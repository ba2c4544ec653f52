# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Account flows: login, logout, refresh, signup, email verification, password reset.

Every flow raises a ``storefront_server.errors`` domain error on failure and
commits its own writes. Emails are queued on the caller's ``BackgroundTasks``
and sent after the response.
"""

import logging
import uuid
from urllib.parse import urlencode

from fastapi import BackgroundTasks
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_server.auth import (
    create_access_token,
    hash_password,
    issue_session_tokens,
    refresh_token_is_valid,
    revoke_session,
    verify_password,
)
from storefront_server.config import settings
from storefront_server.errors import (
    INCORRECT_EMAIL,
    INCORRECT_PASSWORD,
    AuthError,
    BadRequestError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
)
from storefront_server.models import ResetToken, User, VerificationToken
from storefront_server.services import one_time_tokens
from storefront_server.services.customer_records import create_cart, init_address
from storefront_server.services.email import (
    forgot_password_template,
    otp_template,
    password_reset_template,
    send_email,
    verified_template,
)
from storefront_server.services.password_policy import validate_password

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "This email has already been registered"


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_refresh_token(db: AsyncSession, token: str) -> User | None:
    result = await db.execute(select(User).where(User.refresh_token == token))
    return result.scalar_one_or_none()


async def login(db: AsyncSession, email: str, password: str) -> tuple[str, str, User]:
    """Check credentials and start a new session, replacing any previous one.

    Returns (access_token, refresh_token, user). The refresh token is stored on
    the user, so the refresh token of every earlier login stops validating.
    """
    user = await get_user_by_email(db, email)
    if not user:
        raise AuthError(INCORRECT_EMAIL)
    if not verify_password(password, user.password_hash):
        raise AuthError(INCORRECT_PASSWORD)
    access_token, refresh_token = issue_session_tokens(user.id)
    user.refresh_token = refresh_token
    await db.commit()
    logger.info("User %s logged in", user.id)
    return access_token, refresh_token, user


async def logout(db: AsyncSession, refresh_token: str | None) -> None:
    """End the session owning ``refresh_token``. Unknown or missing tokens are already logged out."""
    if not refresh_token:
        return
    user = await get_user_by_refresh_token(db, refresh_token)
    if not user:
        return
    revoke_session(user)
    await db.commit()
    logger.info("User %s logged out", user.id)


async def refresh_access_token(db: AsyncSession, refresh_token: str) -> str:
    """Exchange the current refresh token for a new access token."""
    user = await get_user_by_refresh_token(db, refresh_token)
    if not user or not refresh_token_is_valid(user, refresh_token):
        raise ForbiddenError("Invalid or expired session")
    return create_access_token(user.id)


async def signup(
    db: AsyncSession,
    background: BackgroundTasks,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    phone_number: str,
) -> User:
    """Create an unverified account, its cart, address and verification OTP.

    All rows are written in the request's single transaction: if any of them
    fails, none are committed.
    """
    violations = validate_password(password)
    if violations:
        raise BadRequestError(violations)
    if await get_user_by_email(db, email):
        raise BadRequestError({"message": DUPLICATE_EMAIL_MESSAGE})

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        email_verified=False,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        await db.rollback()
        raise BadRequestError({"message": DUPLICATE_EMAIL_MESSAGE})

    if not await create_cart(db, user.id):
        raise InternalServerError("Something goes wrong while create cart, please try again")
    if not await init_address(db, user.id):
        raise InternalServerError("Something goes wrong while init address, please try again")

    otp = one_time_tokens.generate_otp()
    one_time_tokens.issue_token(db, VerificationToken, user.id, otp)
    await db.commit()
    logger.info("User %s signed up", user.id)

    background.add_task(send_email, user.email, "Verify your email account", otp_template(otp))
    return user


async def verify_email(
    db: AsyncSession,
    background: BackgroundTasks,
    user_id: str | None,
    otp: str | None,
) -> None:
    """Mark the user's email verified if ``otp`` matches the outstanding verification code."""
    if not user_id or not otp or not otp.strip():
        raise BadRequestError("otp and userId required!")
    try:
        owner_id = uuid.UUID(user_id)
    except ValueError:
        raise BadRequestError("invalid userId!")

    user = await db.get(User, owner_id)
    if not user:
        raise NotFoundError("User not found!")
    if user.email_verified:
        raise BadRequestError("This email is already verified!")

    token = await one_time_tokens.find_token(db, VerificationToken, user.id)
    if not token:
        # Reported as a missing user, not a missing token; clients rely on this
        raise NotFoundError("User not found!")
    if not one_time_tokens.token_matches(token, otp.strip()):
        raise BadRequestError("Please provide a valid OTP!")

    user.email_verified = True
    await one_time_tokens.delete_tokens(db, VerificationToken, user.id)
    await db.commit()
    logger.info("User %s verified email", user.id)

    background.add_task(send_email, user.email, "Verify your email account success", verified_template())


def _reset_link(raw_token: str, user_id: uuid.UUID) -> str:
    base = settings.frontend_base_url.rstrip("/")
    return f"{base}/reset-password?{urlencode({'token': raw_token, 'id': str(user_id)})}"


async def forgot_password(db: AsyncSession, background: BackgroundTasks, email: str | None) -> None:
    """Mail a password reset link, unless one is already outstanding for this account."""
    if not email:
        raise BadRequestError("Please provide a valid email!")
    user = await get_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found, invalid request")

    if await one_time_tokens.find_token(db, ResetToken, user.id):
        raise ForbiddenError("Only after one hour you can request for another token!")

    raw = one_time_tokens.create_random_bytes()
    one_time_tokens.issue_token(db, ResetToken, user.id, raw)
    await db.commit()
    logger.info("Password reset requested for user %s", user.id)

    background.add_task(send_email, user.email, "Password Reset", forgot_password_template(_reset_link(raw, user.id)))


async def reset_password(
    db: AsyncSession,
    background: BackgroundTasks,
    user_id: uuid.UUID,
    password: str,
) -> None:
    """Set a new password for the already authenticated ``user_id`` and drop its reset token."""
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found!")
    if verify_password(password, user.password_hash):
        raise BadRequestError("New password must be different from the old one!")

    new_password = password.strip()
    violations = validate_password(new_password)
    if violations:
        raise BadRequestError(violations)

    user.password_hash = hash_password(new_password)
    await one_time_tokens.delete_tokens(db, ResetToken, user.id)
    await db.commit()
    logger.info("User %s reset password", user.id)

    background.add_task(send_email, user.email, "Password Reset Successfully", password_reset_template())
