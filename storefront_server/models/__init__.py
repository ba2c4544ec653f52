# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database models."""

from storefront_server.models.base import Base
from storefront_server.models.user import User
from storefront_server.models.one_time_token import ResetToken, VerificationToken
from storefront_server.models.cart import Cart
from storefront_server.models.address import Address

__all__ = [
    "Base",
    "User",
    "ResetToken",
    "VerificationToken",
    "Cart",
    "Address",
]
