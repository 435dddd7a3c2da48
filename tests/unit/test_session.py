# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.
"""Unit tests for WidgetSession start-up and view selection."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from auth_widget.controller.session import WidgetSession
from auth_widget.controller.views import (
    BlockedView,
    ConfigErrorView,
    FormView,
    ResetSuccessView,
    UnavailableView,
)
from auth_widget.core.config import WidgetSettings
from auth_widget.core.errors import DataServiceError
from auth_widget.core.metrics import widget_metrics
from auth_widget.protocols import events
from auth_widget.protocols.schema import (
    BlockedInfo,
    FormType,
    IpStatusData,
    IpStatusResponse,
)

QUERY = {"app_id": "app_ext_1", "api_key": "ak_live_0123456789abcdefghij"}


def _allow(ip_client):
    ip_client.check_ip_status = AsyncMock(return_value=IpStatusResponse(
        success=True, data=IpStatusData(is_blocked=False, ip_address="203.0.113.7"),
    ))


def _block(ip_client):
    ip_client.check_ip_status = AsyncMock(return_value=IpStatusResponse(
        success=True,
        data=IpStatusData(is_blocked=True, blocked_info=BlockedInfo(reason="Abuse")),
    ))


def _session(data_client, ip_client, gateway, query=QUERY, form_type=FormType.LOGIN, **kwargs):
    return WidgetSession(query, form_type, data_client, ip_client, gateway, **kwargs)


class TestStartUp:
    @pytest.mark.asyncio
    async def test_ready(self, data_client, ip_client, gateway):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway)
        view = await session.start()
        assert isinstance(view, FormView)
        assert session.controller.state == events.STATE_READY
        assert session.controller.tenant.internal_id == "int-1"
        data_client.get_branding.assert_awaited_once_with("int-1")
        assert widget_metrics.get_gauge("sessions_active") == 1

    @pytest.mark.asyncio
    async def test_missing_app_id_makes_no_network_call(self, data_client, ip_client, gateway):
        session = _session(data_client, ip_client, gateway, query={})
        view = await session.start()
        assert isinstance(view, ConfigErrorView)
        assert "app_id" in view.message
        data_client.get_application.assert_not_called()
        ip_client.get_client_ip.assert_not_called()
        ip_client.check_ip_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_default_app_id(self, data_client, ip_client, gateway):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway, query={}, default_app_id="fallback")
        await session.start()
        data_client.get_application.assert_awaited_once_with("fallback")

    @pytest.mark.asyncio
    async def test_blocked_view_has_no_inputs(self, data_client, ip_client, gateway):
        _block(ip_client)
        session = _session(data_client, ip_client, gateway)
        view = await session.start()
        assert isinstance(view, BlockedView)
        assert view.inputs == []
        assert view.reason == "Abuse"
        assert session.set_field("email", "x") is False

    @pytest.mark.asyncio
    async def test_blocked_wins_over_missing_tenant(self, data_client, ip_client, gateway):
        _block(ip_client)
        data_client.get_application = AsyncMock(return_value=None)
        view = await _session(data_client, ip_client, gateway).start()
        assert isinstance(view, BlockedView)

    @pytest.mark.asyncio
    async def test_tenant_not_found(self, data_client, ip_client, gateway):
        _allow(ip_client)
        data_client.get_application = AsyncMock(return_value=None)
        session = _session(data_client, ip_client, gateway)
        view = await session.start()
        assert isinstance(view, UnavailableView)
        data_client.get_branding.assert_not_called()

    @pytest.mark.asyncio
    async def test_tenant_lookup_failed(self, data_client, ip_client, gateway):
        _allow(ip_client)
        data_client.get_application = AsyncMock(
            side_effect=DataServiceError("applications", "refused")
        )
        view = await _session(data_client, ip_client, gateway).start()
        assert isinstance(view, UnavailableView)

    @pytest.mark.asyncio
    async def test_start_runs_once(self, data_client, ip_client, gateway):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway)
        await asyncio.gather(session.start(), session.start())
        data_client.get_application.assert_awaited_once()
        ip_client.check_ip_status.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gate_runs_alongside_tenant_lookup(self, data_client, ip_client, gateway):
        _allow(ip_client)
        gate_started = asyncio.Event()

        async def slow_ip():
            gate_started.set()
            return "203.0.113.7"

        async def lookup(external_id):
            await asyncio.wait_for(gate_started.wait(), timeout=1)
            return {"id": "int-1", "name": "Acme"}

        ip_client.get_client_ip = AsyncMock(side_effect=slow_ip)
        data_client.get_application = AsyncMock(side_effect=lookup)
        view = await _session(data_client, ip_client, gateway).start()
        assert isinstance(view, FormView)


class TestClose:
    @pytest.mark.asyncio
    async def test_close_during_start_drops_results(self, data_client, ip_client, gateway):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway)

        async def lookup(external_id):
            await session.close()
            return {"id": "int-1", "name": "Acme"}

        data_client.get_application = AsyncMock(side_effect=lookup)
        await session.start()
        assert session.controller.tenant is None
        assert session.controller.state == events.STATE_LOADING

    @pytest.mark.asyncio
    async def test_close_cancels_redirects(self, data_client, ip_client, gateway, redirects):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway, redirects=redirects)
        await session.start()
        await session.close()
        assert redirects.cancelled is True
        assert session.is_alive() is False
        assert widget_metrics.get_gauge("sessions_active") == 0

    @pytest.mark.asyncio
    async def test_owned_clients_closed(self, data_client, ip_client, gateway):
        _allow(ip_client)
        async with _session(data_client, ip_client, gateway, owns_clients=True):
            pass
        data_client.close.assert_awaited_once()
        ip_client.close.assert_awaited_once()
        gateway.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_injected_clients_left_open(self, data_client, ip_client, gateway):
        _allow(ip_client)
        async with _session(data_client, ip_client, gateway):
            pass
        data_client.close.assert_not_called()


class TestSubmitViews:
    @pytest.mark.asyncio
    async def test_reset_success_view(self, data_client, ip_client, gateway):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway, form_type=FormType.RESET_PASSWORD)
        await session.start()
        session.set_field("email", "user@example.com")
        await session.submit()
        view = session.view()
        assert isinstance(view, ResetSuccessView)
        assert view.message.text.startswith("If the user is registered")

    @pytest.mark.asyncio
    async def test_login_success_keeps_form(self, data_client, ip_client, gateway):
        _allow(ip_client)
        session = _session(data_client, ip_client, gateway)
        await session.start()
        session.set_field("email", "user@example.com")
        session.set_field("password", "pw")
        await session.submit()
        view = session.view()
        assert isinstance(view, FormView)
        assert view.message.text == "Welcome!"


class TestFromSettings:
    def test_builds_clients(self):
        cfg = WidgetSettings(_env_file=None, AUTH_API_URL="http://fake:54321", DEFAULT_APP_ID="dflt")
        session = WidgetSession.from_settings({}, "reset-password", config=cfg, navigator=print)
        assert session.form_type == FormType.RESET_PASSWORD
        assert session.app_id == "dflt"
        assert session._redirects is not None
