# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Default cart and address created for every new account."""

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_server.models import Address, Cart

logger = logging.getLogger(__name__)


async def create_cart(db: AsyncSession, owner_id: uuid.UUID) -> Cart | None:
    """Create an empty cart for ``owner_id``. Returns None if it could not be written."""
    cart = Cart(owner_id=owner_id)
    db.add(cart)
    try:
        await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to create cart for user %s", owner_id)
        return None
    return cart


async def init_address(db: AsyncSession, owner_id: uuid.UUID) -> Address | None:
    """Create the blank default address for ``owner_id``. Returns None if it could not be written."""
    address = Address(owner_id=owner_id, is_default=True)
    db.add(address)
    try:
        await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to create address for user %s", owner_id)
        return None
    return address
