# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest fixtures. Tests run against a throwaway SQLite file unless DATABASE_URL is set."""

import os
import re
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_tmpdir}/test.db")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("SMTP_HOST", "")

import pytest
from httpx import ASGITransport, AsyncClient

from storefront_server import rate_limit
from storefront_server.database import engine
from storefront_server.main import app
from storefront_server.models import Base
from storefront_server.services import accounts


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    rate_limit.reset_limits()
    yield
    rate_limit.reset_limits()


@pytest.fixture
async def db_tables(anyio_backend):
    """Fresh schema per test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


class Mailbox:
    """Collects emails queued by the account flows instead of sending them."""

    def __init__(self):
        self.messages: list[dict] = []

    async def send(self, to: str, subject: str, body: tuple[str, str]) -> None:
        plain, html = body
        self.messages.append({"to": to, "subject": subject, "plain": plain, "html": html})

    def last_to(self, to: str) -> dict:
        matching = [m for m in self.messages if m["to"] == to]
        assert matching, f"no email sent to {to}"
        return matching[-1]

    def otp_for(self, to: str) -> str:
        match = re.search(r"code is: (\d+)", self.last_to(to)["plain"])
        assert match, "no verification code in email"
        return match.group(1)

    def reset_token_for(self, to: str) -> str:
        match = re.search(r"token=([0-9a-f]+)", self.last_to(to)["plain"])
        assert match, "no reset link in email"
        return match.group(1)


@pytest.fixture
def mailbox(monkeypatch):
    box = Mailbox()
    monkeypatch.setattr(accounts, "send_email", box.send)
    return box


@pytest.fixture
async def client(db_tables, mailbox):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
