# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Create users, one-time token, cart and address tables.

Revision ID: 0001_initial_accounts
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_accounts"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _owner_id(unique: bool = False) -> sa.Column:
    return sa.Column(
        "owner_id",
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=unique,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_refresh_token", "users", ["refresh_token"])

    for table in ("verification_tokens", "reset_tokens"):
        op.create_table(
            table,
            sa.Column("id", sa.Uuid(), primary_key=True),
            _owner_id(),
            sa.Column("token_hash", sa.String(255), nullable=False),
            _created_at(),
        )
        op.create_index(f"ix_{table}_owner_id", table, ["owner_id"])

    op.create_table(
        "carts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner_id(unique=True),
        sa.Column("items", sa.Text(), nullable=False, server_default="[]"),
        _created_at(),
    )
    op.create_table(
        "addresses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner_id(),
        sa.Column("line1", sa.String(255), nullable=False, server_default=""),
        sa.Column("line2", sa.String(255), nullable=False, server_default=""),
        sa.Column("city", sa.String(100), nullable=False, server_default=""),
        sa.Column("postal_code", sa.String(20), nullable=False, server_default=""),
        sa.Column("country", sa.String(100), nullable=False, server_default=""),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index("ix_addresses_owner_id", "addresses", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_addresses_owner_id", table_name="addresses")
    op.drop_table("addresses")
    op.drop_table("carts")
    for table in ("reset_tokens", "verification_tokens"):
        op.drop_index(f"ix_{table}_owner_id", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_users_refresh_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
