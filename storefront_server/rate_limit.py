# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""In-memory rate limiting for auth endpoints (brute-force and mail-bombing protection)."""

import time
from collections import defaultdict

from fastapi import HTTPException, Request

# (client_key, endpoint) -> list of request timestamps in window
_buckets: defaultdict[tuple[str, str], list[float]] = defaultdict(list)
# Window seconds; max requests per window per endpoint
WINDOW = 60
LIMITS: dict[str, int] = {
    "/api/v1/auth/login": 10,
    "/api/v1/auth/signup": 5,
    "/api/v1/auth/forgot-password": 5,
    "/api/v1/auth/verify-email": 10,
    "/api/v1/auth/reset-password": 10,
}


def _client_key(request: Request) -> str:
    """Prefer X-Forwarded-For when behind a proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host or "unknown"
    return "unknown"


def _clean_old(bucket: list[float], now: float) -> None:
    cutoff = now - WINDOW
    while bucket and bucket[0] < cutoff:
        bucket.pop(0)


def reset_limits() -> None:
    """Forget all recorded requests."""
    _buckets.clear()


def check_rate_limit(request: Request, path: str) -> None:
    """Raise 429 if the client has exceeded the limit for this path."""
    limit = LIMITS.get(path)
    if limit is None:
        return
    now = time.monotonic()
    bucket = _buckets[(_client_key(request), path)]
    _clean_old(bucket, now)
    if len(bucket) >= limit:
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please try again later.",
        )
    bucket.append(now)


async def rate_limit_auth_dep(request: Request) -> None:
    """FastAPI dependency: rate limit auth endpoints listed in LIMITS."""
    check_rate_limit(request, request.url.path.rstrip("/"))
