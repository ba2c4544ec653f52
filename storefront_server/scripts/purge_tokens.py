#!/usr/bin/env python3
# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Delete stale verification and reset tokens. Run: python -m storefront_server.scripts.purge_tokens [minutes]

An outstanding reset token blocks new forgot-password requests until it is
used or removed; schedule this (e.g. hourly cron) to release those accounts.
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone

from storefront_server.database import async_session_maker, init_db
from storefront_server.services.one_time_tokens import purge_tokens_before

DEFAULT_MAX_AGE_MINUTES = 60


async def main(max_age_minutes: int = DEFAULT_MAX_AGE_MINUTES) -> dict[str, int]:
    await init_db()
    cutoff = datetime.now(timezone.utc) - timedelta(minutes=max_age_minutes)
    async with async_session_maker() as session:
        counts = await purge_tokens_before(session, cutoff)
        await session.commit()
    for table, count in counts.items():
        print(f"{table}: deleted {count}")
    return counts


if __name__ == "__main__":
    minutes = DEFAULT_MAX_AGE_MINUTES
    if len(sys.argv) > 1:
        try:
            minutes = int(sys.argv[1])
        except ValueError:
            print("Usage: purge_tokens [minutes]")
            sys.exit(1)
    asyncio.run(main(minutes))
