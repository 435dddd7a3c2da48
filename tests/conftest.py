# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Shared test fixtures for all Auth Widget tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import fakeredis.aioredis

from auth_widget.core.metrics import widget_metrics
from auth_widget.core.tenant import TenantContext
from auth_widget.memory.token_store import TokenStore
from auth_widget.protocols.schema import GatewayData, GatewaySuccess


class FakeRedirects:
    """Records scheduled redirects instead of arming timers."""

    def __init__(self):
        self.scheduled = []
        self.cancelled = False

    def schedule(self, url, delay_ms, guard=None):
        self.scheduled.append((url, delay_ms))

    def cancel_all(self):
        self.cancelled = True


def make_response(json_data=None, status_code=200, json_error=None):
    """MagicMock shaped like an httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = json_data
    resp.raise_for_status = MagicMock()
    return resp


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture(autouse=True)
def reset_metrics():
    widget_metrics.reset()
    yield
    widget_metrics.reset()


@pytest.fixture
def mock_redis():
    """Provide a FakeRedis async instance."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def token_store(mock_redis):
    return TokenStore(mock_redis, prefix="test")


@pytest.fixture
def tenant() -> TenantContext:
    return TenantContext(
        external_id="app_ext_1",
        internal_id="11111111-2222-3333-4444-555555555555",
        display_name="Acme",
        api_key="ak_live_0123456789abcdefghij",
    )


@pytest.fixture
def redirects() -> FakeRedirects:
    return FakeRedirects()


@pytest.fixture
def ip_client():
    client = MagicMock()
    client.get_client_ip = AsyncMock(return_value="203.0.113.7")
    client.check_ip_status = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def gateway():
    client = MagicMock()
    client.submit = AsyncMock(return_value=GatewaySuccess(data=GatewayData()))
    client.close = AsyncMock()
    return client


@pytest.fixture
def data_client():
    client = MagicMock()
    client.get_application = AsyncMock(return_value={"id": "int-1", "name": "Acme"})
    client.get_branding = AsyncMock(return_value=None)
    client.get_roles = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client
