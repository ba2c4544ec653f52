# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""App-level routes and error mapping."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio


async def test_root_and_health(client: AsyncClient):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["api"] == "/api/v1"
    r = await client.get("/api/v1/health")
    assert r.json() == {"status": "ok"}


async def test_malformed_body_is_bad_request(client: AsyncClient):
    r = await client.post("/api/v1/auth/login", json={"email": "a@b.com"})
    assert r.status_code == 400
    assert r.json()["detail"][0]["loc"] == ["body", "password"]
