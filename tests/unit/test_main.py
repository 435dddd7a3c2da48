# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.
"""Unit tests for the process entry point."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from auth_widget.core.config import WidgetSettings
from auth_widget.core.logging import StructuredFormatter
from auth_widget.kernel.redis_client import create_redis
from auth_widget.main import widget_host
from auth_widget.protocols.schema import FormType


@pytest.fixture
def config():
    return WidgetSettings(
        _env_file=None,
        AUTH_API_URL="http://fake:54321",
        TOKEN_KEY_PREFIX="embed",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestWidgetHost:
    @pytest.mark.asyncio
    async def test_injected_redis(self, config, mock_redis):
        async with widget_host(config, redis=mock_redis) as host:
            await host.token_store.save("acc")
            assert await mock_redis.get("embed:storage:auth_token") == "acc"
            root = logging.getLogger()
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert root.level == logging.DEBUG

    @pytest.mark.asyncio
    async def test_open_session(self, config, mock_redis):
        async with widget_host(config, redis=mock_redis) as host:
            session = host.open_session({"app_id": "a1"}, "register")
            assert session.form_type == FormType.REGISTER
            assert session.controller._token_store is host.token_store
            await session.close()

    @pytest.mark.asyncio
    async def test_owned_redis_closed(self, config):
        client = MagicMock()
        with patch("auth_widget.main.create_redis", return_value=client) as factory, \
                patch("auth_widget.main.close_redis", new=AsyncMock()) as closer:
            async with widget_host(config):
                pass
        factory.assert_called_once_with(config.REDIS_URL)
        closer.assert_awaited_once_with(client)


class TestRedisFactory:
    def test_create_redis_from_url(self):
        client = create_redis("redis://example:6380/2")
        kwargs = client.connection_pool.connection_kwargs
        assert kwargs["host"] == "example"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 2
