# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Session JWTs and the one-time token store."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from storefront_server.auth import (
    decode_access_token,
    decode_refresh_token,
    issue_session_tokens,
    refresh_token_is_valid,
    revoke_session,
)
from storefront_server.database import async_session_maker
from storefront_server.models import ResetToken, User, VerificationToken
from storefront_server.services import one_time_tokens


def test_session_tokens_use_independent_secrets():
    user_id = uuid.uuid4()
    access, refresh = issue_session_tokens(user_id)
    assert decode_access_token(access)["sub"] == str(user_id)
    assert decode_refresh_token(refresh)["sub"] == str(user_id)
    assert decode_access_token(refresh) is None
    assert decode_refresh_token(access) is None


def test_session_token_expiries():
    access, refresh = issue_session_tokens(uuid.uuid4())
    a = decode_access_token(access)
    r = decode_refresh_token(refresh)
    assert a["exp"] - a["iat"] == 3600
    assert r["exp"] - r["iat"] == 180 * 24 * 3600


def test_refresh_token_validity_follows_stored_value():
    user = User(email="a@b.com", password_hash="x", first_name="A", last_name="B", phone_number="1")
    _, refresh = issue_session_tokens(user.id)
    assert not refresh_token_is_valid(user, refresh)
    user.refresh_token = refresh
    assert refresh_token_is_valid(user, refresh)
    _, other_users_token = issue_session_tokens(uuid.uuid4())
    user.refresh_token = other_users_token
    assert not refresh_token_is_valid(user, other_users_token)
    revoke_session(user)
    assert user.refresh_token is None
    assert not refresh_token_is_valid(user, refresh)


def test_generated_values():
    otp = one_time_tokens.generate_otp(6)
    assert len(otp) == 6 and otp.isdigit()
    raw = one_time_tokens.create_random_bytes(30)
    assert len(raw) == 60
    int(raw, 16)


@pytest.mark.anyio
async def test_token_store_hashes_and_purges(db_tables):
    async with async_session_maker() as db:
        user = User(email="a@b.com", password_hash="x", first_name="A", last_name="B", phone_number="1")
        db.add(user)
        await db.flush()
        token = one_time_tokens.issue_token(db, ResetToken, user.id, "secret-value")
        one_time_tokens.issue_token(db, VerificationToken, user.id, "1234")
        await db.commit()

        assert token.token_hash != "secret-value"
        found = await one_time_tokens.find_token(db, ResetToken, user.id)
        assert one_time_tokens.token_matches(found, "secret-value")
        assert not one_time_tokens.token_matches(found, "other-value")

        counts = await one_time_tokens.purge_tokens_before(db, datetime.now(timezone.utc) - timedelta(hours=1))
        await db.commit()
        assert counts == {"verification_tokens": 0, "reset_tokens": 0}

        counts = await one_time_tokens.purge_tokens_before(db, datetime.now(timezone.utc) + timedelta(minutes=1))
        await db.commit()
        assert counts == {"verification_tokens": 1, "reset_tokens": 1}
        assert await db.scalar(select(func.count()).select_from(ResetToken)) == 0


@pytest.mark.anyio
async def test_purge_script_releases_reset_cooldown(db_tables):
    from storefront_server.scripts import purge_tokens

    async with async_session_maker() as db:
        user = User(email="a@b.com", password_hash="x", first_name="A", last_name="B", phone_number="1")
        db.add(user)
        await db.flush()
        one_time_tokens.issue_token(db, ResetToken, user.id, "secret-value")
        await db.commit()

    counts = await purge_tokens.main(max_age_minutes=-1)
    assert counts["reset_tokens"] == 1
    async with async_session_maker() as db:
        assert await one_time_tokens.find_token(db, ResetToken, user.id) is None
