# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Auth Widget Process Entry Point.

The host owns the process-wide resources (logging, the Redis client
behind the token store) and opens one WidgetSession per embedded form.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

import redis.asyncio as aioredis

from auth_widget.controller.redirect import Navigator
from auth_widget.controller.session import WidgetSession
from auth_widget.core.config import WidgetSettings, settings as default_settings
from auth_widget.core.logging import setup_logging
from auth_widget.kernel.redis_client import close_redis, create_redis
from auth_widget.memory.token_store import TokenStore

logger = logging.getLogger("widget.main")


class WidgetHost:
    """Process-wide resources shared by every widget session."""

    def __init__(
        self,
        redis: aioredis.Redis,
        config: Optional[WidgetSettings] = None,
    ) -> None:
        self.config = config or default_settings
        self.redis = redis
        self.token_store = TokenStore(redis, prefix=self.config.TOKEN_KEY_PREFIX)

    def open_session(
        self,
        query: Mapping[str, str],
        form_type: str,
        navigator: Optional[Navigator] = None,
        **kwargs: Any,
    ) -> WidgetSession:
        """New session for one form, wired to the shared token store."""
        return WidgetSession.from_settings(
            query,
            form_type,
            token_store=self.token_store,
            navigator=navigator,
            config=self.config,
            **kwargs,
        )


@asynccontextmanager
async def widget_host(
    config: Optional[WidgetSettings] = None,
    redis: Optional[aioredis.Redis] = None,
) -> AsyncIterator[WidgetHost]:
    """Manage startup/shutdown of process resources."""
    cfg = config or default_settings
    # Startup
    setup_logging(cfg.LOG_LEVEL)
    owns_redis = redis is None
    client = redis if redis is not None else create_redis(cfg.REDIS_URL)
    logger.info("[AuthWidget] Ready (env=%s, api=%s)", cfg.WIDGET_ENV, cfg.AUTH_API_URL)
    try:
        yield WidgetHost(client, cfg)
    finally:
        # Shutdown
        if owns_redis:
            await close_redis(client)
        logger.info("[AuthWidget] Shutdown complete")
