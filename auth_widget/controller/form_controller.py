# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Form Controller — field state, submission and response handling.

Lifecycle (see auth_widget/flows/*.yaml):
    init -> loading -> {blocked | unavailable | ready}
    ready -> submitting -> {success_displayed | error_displayed}
    error_displayed -> ready (edit) | submitting (retry)

Gateway responses are classified in a fixed priority order:
    1. transport / parse failure       -> generic error
    2. database error                  -> fixed "contact administrator" text
    3. email not verified              -> server text, redirect after 3 s
    4. any other failure               -> server text or generic fallback
    5. register, verification pending  -> "check your email", redirect after 3 s
    6. success                         -> success text, redirect after 2 s,
                                          or persist tokens when no callback
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from redis.exceptions import RedisError

from auth_widget.controller.form_session import (
    FormFields,
    FormMessage,
    FormSession,
    SubmissionState,
)
from auth_widget.controller.redirect import (
    REDIRECT_DELAY_MS,
    VERIFICATION_REDIRECT_DELAY_MS,
)
from auth_widget.core.errors import (
    ConfigurationError,
    EmailNotVerifiedError,
    LocalValidationError,
    SubmissionDatabaseError,
    SubmissionDomainError,
    SubmissionTransportError,
    WidgetError,
)
from auth_widget.core.metrics import widget_metrics
from auth_widget.core.tenant import TenantContext
from auth_widget.memory.fsm import FormFSM
from auth_widget.memory.token_store import TokenStore
from auth_widget.protocols import events
from auth_widget.protocols.schema import (
    FormType,
    GatewayFailure,
    GatewayPayload,
    GatewayResult,
    LoginPayload,
    RegisterPayload,
    RenderConfig,
    ResetPasswordPayload,
)
from auth_widget.runtime.gateway import AuthGatewayClient
from auth_widget.runtime.ip_client import IpClient
from auth_widget.services.navigation import callback_from_query

logger = logging.getLogger("widget.form_controller")

TRANSPORT_ERROR_TEXT = "Could not reach the authentication service. Please try again."
DATABASE_ERROR_TEXT = "Database error. Please contact the system administrator."
AUTH_FAILED_TEXT = "Authentication failed"
MISSING_API_KEY_TEXT = "API key not available for this application"
PASSWORD_MISMATCH_TEXT = "Passwords do not match"
MISSING_FIELDS_TEXT = "Please fill in all required fields"
VERIFY_EMAIL_TEXT = "Account created successfully. Check your email to verify your account."
LOGIN_SUCCESS_TEXT = "Welcome!"
REGISTER_SUCCESS_TEXT = "Account created successfully"
RESET_SUCCESS_TEXT = (
    "If the user is registered, they will receive an email "
    "with instructions to reset their password."
)


@dataclass
class Redirect:
    url: str
    delay_ms: int


@dataclass
class SubmitOutcome:
    """What one submit attempt produced."""

    kind: str
    message: FormMessage
    redirect: Optional[Redirect] = None
    data: Optional[dict] = None
    tokens: Optional[dict] = None
    error: Optional[WidgetError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _failure(error: WidgetError, text: str, kind: str, redirect: Optional[Redirect] = None) -> SubmitOutcome:
    return SubmitOutcome(
        kind=kind,
        message=FormMessage.error(text),
        redirect=redirect,
        error=error,
    )


def is_database_error(failure: GatewayFailure) -> bool:
    return failure.error_code == "DATABASE_ERROR" or "Database error" in (failure.message or "")


def classify(form_type: FormType, result: GatewayResult) -> SubmitOutcome:
    """Map a gateway result onto the message, redirect and tokens to apply."""
    if isinstance(result, GatewayFailure):
        if is_database_error(result):
            logger.error("Database error reported by gateway: %s", result.message)
            return _failure(
                SubmissionDatabaseError(result.message or ""),
                DATABASE_ERROR_TEXT,
                "database_error",
            )
        if result.error_code == "EMAIL_NOT_VERIFIED":
            text = result.message or AUTH_FAILED_TEXT
            redirect = None
            if result.callback_url:
                redirect = Redirect(result.callback_url, VERIFICATION_REDIRECT_DELAY_MS)
            return _failure(
                EmailNotVerifiedError(text, result.callback_url),
                text,
                "email_not_verified",
                redirect,
            )
        text = result.message or AUTH_FAILED_TEXT
        return _failure(
            SubmissionDomainError(result.error_code, text),
            text,
            "domain_error",
        )

    data = result.data
    payload = data.model_dump()

    if form_type == FormType.REGISTER and data.email_verification_required:
        redirect = None
        if data.callback_url:
            redirect = Redirect(data.callback_url, VERIFICATION_REDIRECT_DELAY_MS)
        return SubmitOutcome(
            kind="verification_pending",
            message=FormMessage.success(VERIFY_EMAIL_TEXT),
            redirect=redirect,
            data=payload,
        )

    if form_type == FormType.REGISTER:
        text = REGISTER_SUCCESS_TEXT
    elif form_type == FormType.RESET_PASSWORD:
        text = data.message or RESET_SUCCESS_TEXT
    else:
        text = LOGIN_SUCCESS_TEXT

    outcome = SubmitOutcome(kind="success", message=FormMessage.success(text), data=payload)
    if data.callback_url:
        outcome.redirect = Redirect(data.callback_url, REDIRECT_DELAY_MS)
    elif data.access_token:
        outcome.tokens = {
            "access_token": data.access_token,
            "refresh_token": data.refresh_token,
            "user": data.user,
        }
    return outcome


class FormController:
    """
    Owns one form: its FSM, field values and submit path.

    Start-up loading is driven from outside (WidgetSession) through
    begin_loading(), mark_blocked(), mark_unavailable() and attach().
    """

    def __init__(
        self,
        form_type: FormType,
        gateway: AuthGatewayClient,
        ip_client: IpClient,
        query: Optional[Mapping[str, str]] = None,
        token_store: Optional[TokenStore] = None,
        redirects: Any = None,
        is_alive: Callable[[], bool] = lambda: True,
        on_success: Optional[Callable[[dict], Any]] = None,
        on_error: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.form_type = form_type
        self.form = FormSession(form_type=form_type)
        self.fsm = FormFSM.for_form(form_type)
        self.tenant: Optional[TenantContext] = None
        self.render_config: Optional[RenderConfig] = None
        self._gateway = gateway
        self._ip_client = ip_client
        self._query = dict(query or {})
        self._token_store = token_store
        self._redirects = redirects
        self._is_alive = is_alive
        self._on_success = on_success
        self._on_error = on_error

    # ── Lifecycle driven by the session ─────────────────────────

    @property
    def state(self) -> str:
        return self.fsm.state

    @property
    def submission_state(self) -> SubmissionState:
        return {
            events.STATE_SUBMITTING: SubmissionState.SUBMITTING,
            events.STATE_SUCCESS: SubmissionState.SUCCEEDED,
            events.STATE_ERROR: SubmissionState.FAILED,
        }.get(self.fsm.state, SubmissionState.IDLE)

    def begin_loading(self) -> None:
        self.fsm.advance(events.SESSION_START)

    def mark_blocked(self) -> None:
        self.fsm.advance(events.ACCESS_BLOCKED)

    def mark_unavailable(self) -> None:
        self.fsm.advance(events.TENANT_UNAVAILABLE)

    def attach(self, tenant: TenantContext, render_config: RenderConfig) -> None:
        """Tenant and render config are known: the form becomes usable."""
        self.tenant = tenant
        self.render_config = render_config
        default_role = render_config.default_role
        if self.form_type == FormType.REGISTER and default_role is not None:
            self.form.selected_role = default_role.name
        self.fsm.advance(events.LOAD_COMPLETE)

    # ── User input ──────────────────────────────────────────────

    def set_field(self, name: str, value: str) -> bool:
        """
        Update one field. Returns False when the form takes no input
        (still loading, submitting, or in a terminal state).
        """
        if name not in FormFields.names():
            raise ValueError(f"Unknown field: '{name}'")
        if not self.fsm.can(events.FIELD_EDIT):
            return False
        setattr(self.form.fields, name, value)
        self.fsm.advance(events.FIELD_EDIT)
        return True

    def select_role(self, role_name: Optional[str]) -> bool:
        if not self.fsm.can(events.FIELD_EDIT):
            return False
        if role_name and self.render_config is not None:
            known = {role.name for role in self.render_config.roles}
            if role_name not in known:
                raise ValueError(f"Unknown role: '{role_name}'")
        self.form.selected_role = role_name or None
        self.fsm.advance(events.FIELD_EDIT)
        return True

    # ── Submission ──────────────────────────────────────────────

    async def submit(self) -> SubmitOutcome:
        """
        Run one submit attempt and apply its outcome.

        Raises InvalidTransitionError if the form cannot be submitted in
        its current state (loading, already submitting, terminal).
        """
        self.fsm.advance(events.SUBMIT)
        self.form.message = None
        widget_metrics.inc(f"submit:{self.form_type.value}")

        try:
            outcome = await self._attempt()
        except Exception:
            self.fsm.advance(events.SUBMIT_FAILED)
            raise

        if outcome.tokens is not None:
            await self._persist_tokens(outcome.tokens)

        if not self._is_alive():
            logger.info("Session closed during submit; outcome %s not applied", outcome.kind)
            return outcome

        self._apply(outcome)
        await self._notify(outcome)
        return outcome

    async def _attempt(self) -> SubmitOutcome:
        fields = self.form.fields

        missing = fields.missing(self.form_type)
        if missing:
            return _failure(
                LocalValidationError(MISSING_FIELDS_TEXT, missing),
                MISSING_FIELDS_TEXT,
                "validation_error",
            )

        tenant = self.tenant
        if tenant is None or not tenant.has_api_key:
            return _failure(
                ConfigurationError(MISSING_API_KEY_TEXT),
                MISSING_API_KEY_TEXT,
                "configuration_error",
            )

        if self.form_type == FormType.REGISTER and fields.password != fields.confirm_password:
            return _failure(
                LocalValidationError(PASSWORD_MISMATCH_TEXT, ["confirm_password"]),
                PASSWORD_MISMATCH_TEXT,
                "validation_error",
            )

        client_ip = await self._ip_client.get_client_ip()
        payload = self._build_payload(tenant, client_ip)

        try:
            result = await self._gateway.submit(self.form_type, payload)
        except SubmissionTransportError as e:
            logger.error("Submission failed: %s", e.message, extra=self._log_context())
            return _failure(e, TRANSPORT_ERROR_TEXT, "transport_error")

        return classify(self.form_type, result)

    def _build_payload(self, tenant: TenantContext, client_ip: str) -> GatewayPayload:
        fields = self.form.fields
        callback_url = callback_from_query(self._query)

        if self.form_type == FormType.LOGIN:
            return LoginPayload(
                email=fields.email,
                password=fields.password,
                application_id=tenant.external_id,
                api_key=tenant.api_key,
                callback_url=callback_url,
                client_ip=client_ip,
            )
        if self.form_type == FormType.REGISTER:
            return RegisterPayload(
                email=fields.email,
                password=fields.password,
                name=fields.name,
                application_id=tenant.external_id,
                api_key=tenant.api_key,
                callback_url=callback_url,
                role=self.form.selected_role,
                client_ip=client_ip,
            )
        return ResetPasswordPayload(
            email=fields.email,
            application_id=tenant.external_id,
            api_key=tenant.api_key,
            redirect_uri=callback_url,
            client_ip=client_ip,
        )

    def _apply(self, outcome: SubmitOutcome) -> None:
        self.form.message = outcome.message
        widget_metrics.inc(f"submit_outcome:{outcome.kind}")
        if outcome.ok:
            self.fsm.advance(events.SUBMIT_SUCCEEDED)
        else:
            self.fsm.advance(events.SUBMIT_FAILED)

        if outcome.redirect is not None and self._redirects is not None:
            self._redirects.schedule(
                outcome.redirect.url,
                outcome.redirect.delay_ms,
                guard=self._is_alive,
            )

    async def _persist_tokens(self, tokens: dict) -> None:
        if self._token_store is None:
            logger.warning("No token store configured; tokens not persisted")
            return
        try:
            await self._token_store.save(
                tokens["access_token"],
                tokens.get("refresh_token"),
                tokens.get("user"),
            )
        except RedisError as e:
            logger.error("Could not persist tokens: %s", e, extra=self._log_context())

    async def _notify(self, outcome: SubmitOutcome) -> None:
        if outcome.ok:
            callback, arg = self._on_success, outcome.data
        else:
            callback, arg = self._on_error, outcome.message.text
        if callback is None:
            return
        result = callback(arg)
        if inspect.isawaitable(result):
            await result

    def _log_context(self) -> dict:
        ctx = {"form_type": self.form_type.value}
        if self.tenant is not None:
            ctx["tenant_id"] = self.tenant.external_id
        return ctx
