# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Redis Connection Factory — connection pool for the token store.

The pool is created explicitly by whoever owns the widget process and
passed into TokenStore; there is no module-level pool.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as aioredis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry
from redis.exceptions import (
    ConnectionError,
    TimeoutError,
    BusyLoadingError,
)

from auth_widget.core.config import settings

_RETRY = Retry(ExponentialBackoff(cap=2, base=0.1), retries=3)
_RETRY_ERRORS = [ConnectionError, TimeoutError, BusyLoadingError, OSError]


def create_redis(url: Optional[str] = None) -> aioredis.Redis:
    """
    Create an async Redis client for persisted tokens.

    Reads the connection URL from WidgetSettings unless one is given.
    Uses retry-on-error so stale pool connections are transparently reconnected.
    """
    return aioredis.from_url(
        url or settings.REDIS_URL,
        decode_responses=True,
        max_connections=10,
        health_check_interval=15,
        retry_on_timeout=True,
        retry_on_error=_RETRY_ERRORS,
        retry=_RETRY,
        socket_connect_timeout=5,
        socket_timeout=10,
        socket_keepalive=True,
    )


async def close_redis(client: aioredis.Redis) -> None:
    """Gracefully close a client created by create_redis()."""
    await client.aclose()
