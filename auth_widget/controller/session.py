# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Widget Session — one embedded form, from URL parameters to submit.

start() runs the start-up loads exactly once:
  - the access check is started immediately,
  - the tenant is resolved alongside it,
  - the render config is loaded as soon as the tenant id is known.
No form view is produced before both paths have settled.

close() marks the session dead. Late results from in-flight work and
pending redirects are dropped from then on.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable, Mapping, Optional

from auth_widget.controller.form_controller import FormController, SubmitOutcome
from auth_widget.controller.redirect import Navigator, RedirectScheduler
from auth_widget.controller.views import (
    ConfigErrorView,
    LoadingView,
    UnavailableView,
    View,
    blocked_view,
    form_view,
    reset_success_view,
)
from auth_widget.core.config import WidgetSettings, settings as default_settings
from auth_widget.core.errors import ConfigurationError, TenantUnavailableError
from auth_widget.core.metrics import widget_metrics
from auth_widget.memory.token_store import TokenStore
from auth_widget.protocols import events
from auth_widget.protocols.schema import AccessVerdict, FormType
from auth_widget.runtime.data_client import DataClient
from auth_widget.runtime.gateway import AuthGatewayClient
from auth_widget.runtime.ip_client import IpClient
from auth_widget.services.access_gate import AccessGate
from auth_widget.services.render_config import RenderConfigLoader
from auth_widget.services.tenant_resolver import TenantResolver

logger = logging.getLogger("widget.session")


class WidgetSession:
    """
    Orchestrates TenantResolver, AccessGate, RenderConfigLoader and the
    FormController of one form session.

    Usage:
        session = WidgetSession.from_settings(query, "login", token_store, navigator)
        view = await session.start()
        session.set_field("email", "a@b.c")
        outcome = await session.submit()
        await session.close()
    """

    def __init__(
        self,
        query: Mapping[str, str],
        form_type: FormType,
        data_client: DataClient,
        ip_client: IpClient,
        gateway: AuthGatewayClient,
        token_store: Optional[TokenStore] = None,
        redirects: Any = None,
        default_app_id: str = "",
        on_success: Optional[Callable[[dict], Any]] = None,
        on_error: Optional[Callable[[str], Any]] = None,
        owns_clients: bool = False,
    ) -> None:
        self.session_id = str(uuid.uuid4())
        self.query = dict(query)
        self.form_type = form_type
        self.app_id = self.query.get("app_id") or default_app_id
        self.api_key = self.query.get("api_key") or None

        self._data_client = data_client
        self._ip_client = ip_client
        self._gateway = gateway
        self._owns_clients = owns_clients

        self._resolver = TenantResolver(data_client)
        self._gate = AccessGate(ip_client)
        self._loader = RenderConfigLoader(data_client)
        self._redirects = redirects

        self._alive = True
        self._start_task: Optional[asyncio.Task] = None
        self._config_error: Optional[ConfigurationError] = None
        self._tenant_error: Optional[TenantUnavailableError] = None
        self.verdict: Optional[AccessVerdict] = None

        self.controller = FormController(
            form_type=form_type,
            gateway=gateway,
            ip_client=ip_client,
            query=self.query,
            token_store=token_store,
            redirects=redirects,
            is_alive=self.is_alive,
            on_success=on_success,
            on_error=on_error,
        )

    @classmethod
    def from_settings(
        cls,
        query: Mapping[str, str],
        form_type: str | FormType,
        token_store: Optional[TokenStore] = None,
        navigator: Optional[Navigator] = None,
        config: Optional[WidgetSettings] = None,
        **kwargs: Any,
    ) -> WidgetSession:
        """Build a session with its own HTTP clients, configured from settings."""
        cfg = config or default_settings
        return cls(
            query=query,
            form_type=FormType.parse(form_type),
            data_client=DataClient(cfg.AUTH_API_URL, cfg.AUTH_API_ANON_KEY, cfg.HTTP_TIMEOUT),
            ip_client=IpClient(
                cfg.AUTH_API_URL,
                cfg.AUTH_API_ANON_KEY,
                echo_url=cfg.IP_ECHO_URL,
                timeout=cfg.HTTP_TIMEOUT,
            ),
            gateway=AuthGatewayClient(
                cfg.AUTH_API_URL,
                cfg.AUTH_API_ANON_KEY,
                client_info=cfg.CLIENT_INFO,
                timeout=cfg.HTTP_TIMEOUT,
            ),
            token_store=token_store,
            redirects=RedirectScheduler(navigator) if navigator else None,
            default_app_id=cfg.DEFAULT_APP_ID,
            owns_clients=True,
            **kwargs,
        )

    # ── Liveness ────────────────────────────────────────────────

    def is_alive(self) -> bool:
        return self._alive

    async def close(self) -> None:
        """End the session: drop late results and pending redirects."""
        if not self._alive:
            return
        self._alive = False
        if self._redirects is not None:
            self._redirects.cancel_all()
        if self._start_task is not None:
            widget_metrics.add_gauge("sessions_active", -1)
        if self._owns_clients:
            await self._data_client.close()
            await self._ip_client.close()
            await self._gateway.close()
        logger.info("Session closed", extra=self._log_context())

    async def __aenter__(self) -> WidgetSession:
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    # ── Start-up ────────────────────────────────────────────────

    async def start(self) -> View:
        """Run the start-up loads (once) and return the resulting view."""
        if self._start_task is None:
            widget_metrics.add_gauge("sessions_active", 1)
            self._start_task = asyncio.ensure_future(self._initialize())
        await self._start_task
        return self.view()

    async def _initialize(self) -> None:
        if not self.app_id:
            self._config_error = ConfigurationError(
                "The app_id parameter is required in the URL"
            )
            logger.error("No app_id in URL", extra=self._log_context())
            return

        self.controller.begin_loading()
        logger.info("Loading application data for %s", self.app_id, extra=self._log_context())

        gate_task = asyncio.create_task(self._gate.check())
        tenant = None
        render_config = None
        tenant_error = None
        try:
            try:
                tenant = await self._resolver.resolve(self.app_id, self.api_key)
                render_config = await self._loader.load(tenant.internal_id, self.form_type)
            except TenantUnavailableError as e:
                tenant_error = e
            verdict = await gate_task
        finally:
            if not gate_task.done():
                gate_task.cancel()

        if not self._alive:
            logger.info("Session closed during start-up; results dropped", extra=self._log_context())
            return

        self.verdict = verdict
        if verdict.blocked:
            self.controller.mark_blocked()
        elif tenant_error is not None:
            self._tenant_error = tenant_error
            self.controller.mark_unavailable()
        else:
            self.controller.attach(tenant, render_config)

    # ── Input / submit ──────────────────────────────────────────

    def set_field(self, name: str, value: str) -> bool:
        return self.controller.set_field(name, value)

    def select_role(self, role_name: Optional[str]) -> bool:
        return self.controller.select_role(role_name)

    async def submit(self) -> SubmitOutcome:
        return await self.controller.submit()

    # ── View ────────────────────────────────────────────────────

    def view(self) -> View:
        if self._config_error is not None:
            return ConfigErrorView(message=self._config_error.message)

        state = self.controller.state
        if state in (events.STATE_INIT, events.STATE_LOADING):
            return LoadingView()
        if state == events.STATE_BLOCKED:
            return blocked_view(self.verdict)
        if state == events.STATE_UNAVAILABLE:
            return UnavailableView()

        ctrl = self.controller
        if self.form_type == FormType.RESET_PASSWORD and state == events.STATE_SUCCESS:
            return reset_success_view(ctrl.form, ctrl.render_config, ctrl.tenant, self.query)
        return form_view(
            ctrl.form,
            ctrl.render_config,
            ctrl.tenant,
            self.query,
            submitting=state == events.STATE_SUBMITTING,
        )

    def _log_context(self) -> dict:
        return {
            "session_id": self.session_id,
            "tenant_id": self.app_id,
            "form_type": self.form_type.value,
        }
