# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Single-use tokens: email verification OTPs and password reset tokens."""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront_server.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class OneTimeTokenMixin:
    """Columns shared by both token kinds. Only the bcrypt hash of the token is stored."""

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash: Mapped[str] = mapped_column(String(255), nullable=False)


class VerificationToken(UUIDPrimaryKeyMixin, OneTimeTokenMixin, TimestampMixin, Base):
    """Numeric OTP proving ownership of the signup email address."""

    __tablename__ = "verification_tokens"


class ResetToken(UUIDPrimaryKeyMixin, OneTimeTokenMixin, TimestampMixin, Base):
    """Random token mailed in the password reset link."""

    __tablename__ = "reset_tokens"
