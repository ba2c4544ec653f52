# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""One-time token store shared by email verification and password reset.

Tokens are bcrypt-hashed at rest; the raw value exists only in the email sent
to the owner. At most one token of each kind is kept per owner: callers check
``find_token`` before ``issue_token``.
"""

import secrets
import uuid
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_server.auth import hash_password, verify_password
from storefront_server.config import settings
from storefront_server.models import ResetToken, VerificationToken

TokenModel = type[VerificationToken] | type[ResetToken]


def generate_otp(length: int | None = None) -> str:
    """Numeric verification code."""
    return "".join(secrets.choice("0123456789") for _ in range(length or settings.otp_length))


def create_random_bytes(size: int | None = None) -> str:
    """Hex-encoded random reset token."""
    return secrets.token_hex(size or settings.reset_token_bytes)


async def find_token(db: AsyncSession, model: TokenModel, owner_id: uuid.UUID):
    """Return the owner's outstanding token of this kind, or None."""
    result = await db.execute(select(model).where(model.owner_id == owner_id).limit(1))
    return result.scalar_one_or_none()


def issue_token(db: AsyncSession, model: TokenModel, owner_id: uuid.UUID, raw: str):
    """Add a new token row holding the hash of ``raw``. Caller commits."""
    token = model(owner_id=owner_id, token_hash=hash_password(raw))
    db.add(token)
    return token


def token_matches(token: VerificationToken | ResetToken, raw: str) -> bool:
    return verify_password(raw, token.token_hash)


async def delete_tokens(db: AsyncSession, model: TokenModel, owner_id: uuid.UUID) -> None:
    """Delete every token of this kind owned by ``owner_id``."""
    await db.execute(delete(model).where(model.owner_id == owner_id))


async def purge_tokens_before(db: AsyncSession, cutoff: datetime) -> dict[str, int]:
    """Delete tokens of both kinds created before ``cutoff``. Returns deleted counts per table."""
    counts = {}
    for model in (VerificationToken, ResetToken):
        result = await db.execute(delete(model).where(model.created_at < cutoff))
        counts[model.__tablename__] = result.rowcount or 0
    return counts
