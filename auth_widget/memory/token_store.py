# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Token Store — durable client-side storage for issued tokens.

Keys are fixed and process-wide:
    {prefix}:storage:auth_token
    {prefix}:storage:refresh_token
    {prefix}:storage:user_data   (JSON)

No TTL is set; expiry management belongs to whoever consumes the tokens.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis

from auth_widget.kernel.namespace import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    USER_DATA_KEY,
    get_storage_key,
)

logger = logging.getLogger("widget.token_store")


class TokenStore:
    """Redis-backed key/value store for the tokens of the last login."""

    def __init__(self, redis: aioredis.Redis, prefix: str = "widget") -> None:
        self._redis = redis
        self._prefix = prefix

    def _key(self, name: str) -> str:
        return get_storage_key(self._prefix, name)

    async def save(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        user: Any = None,
    ) -> None:
        """Write all token keys in one transaction."""
        pipe = self._redis.pipeline(transaction=True)
        pipe.set(self._key(ACCESS_TOKEN_KEY), access_token)
        if refresh_token:
            pipe.set(self._key(REFRESH_TOKEN_KEY), refresh_token)
        else:
            pipe.delete(self._key(REFRESH_TOKEN_KEY))
        pipe.set(self._key(USER_DATA_KEY), json.dumps(user, ensure_ascii=False))
        await pipe.execute()
        logger.info("Tokens persisted under prefix '%s'", self._prefix)

    async def load(self) -> Dict[str, Any]:
        """Return the stored tokens; missing keys come back as None."""
        access, refresh, user_raw = await self._redis.mget(
            self._key(ACCESS_TOKEN_KEY),
            self._key(REFRESH_TOKEN_KEY),
            self._key(USER_DATA_KEY),
        )
        user = json.loads(user_raw) if user_raw is not None else None
        return {
            ACCESS_TOKEN_KEY: access,
            REFRESH_TOKEN_KEY: refresh,
            USER_DATA_KEY: user,
        }

    async def clear(self) -> None:
        await self._redis.delete(
            self._key(ACCESS_TOKEN_KEY),
            self._key(REFRESH_TOKEN_KEY),
            self._key(USER_DATA_KEY),
        )
