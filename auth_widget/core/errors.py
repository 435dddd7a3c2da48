# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Widget Errors — Unified error structure.

Every failure the controller can classify is a WidgetError with a stable
``code``. Fatal errors end the session in a terminal view; recoverable
ones are shown as a form message and leave the fields intact.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class WidgetError(Exception):
    """Base widget error with structured payload."""

    recoverable = False

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ── Fatal ───────────────────────────────────────────────────────


class ConfigurationError(WidgetError):
    """Missing app_id or API key. Raised before any network call."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            details=details,
        )


class TenantUnavailableError(WidgetError):
    """Tenant cannot be used for this session (not found or lookup failed)."""


class TenantNotFoundError(TenantUnavailableError):
    def __init__(self, external_id: str):
        super().__init__(
            code="TENANT_NOT_FOUND",
            message=f"Application '{external_id}' not found",
            details={"app_id": external_id},
        )


class TenantLookupFailedError(TenantUnavailableError):
    def __init__(self, external_id: str, reason: str = ""):
        super().__init__(
            code="TENANT_LOOKUP_FAILED",
            message=f"Failed to load application '{external_id}'",
            details={"app_id": external_id, "reason": reason},
        )


# ── Collaborator transport ─────────────────────────────────────


class DataServiceError(WidgetError):
    """Transport or decoding failure talking to the tenant data service."""

    def __init__(self, resource: str, reason: str):
        super().__init__(
            code="DATA_SERVICE_ERROR",
            message=f"Data service request for '{resource}' failed: {reason}",
            details={"resource": resource},
        )


class ReputationCheckUnavailable(WidgetError):
    """
    The IP reputation service could not answer.

    Never propagated past AccessGate: the gate logs it and fails open.
    """

    def __init__(self, reason: str):
        super().__init__(
            code="REPUTATION_UNAVAILABLE",
            message=f"IP reputation check unavailable: {reason}",
        )


# ── Recoverable submission errors ──────────────────────────────


class SubmissionError(WidgetError):
    """A submission attempt failed; the user may retry."""

    recoverable = True


class SubmissionTransportError(SubmissionError):
    def __init__(self, reason: str):
        super().__init__(
            code="TRANSPORT_ERROR",
            message=f"Gateway request failed: {reason}",
        )


class SubmissionDatabaseError(SubmissionError):
    def __init__(self, raw_message: str = ""):
        # Raw backend detail stays in details, never in the user message.
        super().__init__(
            code="DATABASE_ERROR",
            message="Database error",
            details={"raw_message": raw_message},
        )


class SubmissionDomainError(SubmissionError):
    def __init__(self, code: str, message: str):
        super().__init__(code=code or "AUTH_ERROR", message=message)


class EmailNotVerifiedError(SubmissionError):
    def __init__(self, message: str, callback_url: Optional[str] = None):
        super().__init__(
            code="EMAIL_NOT_VERIFIED",
            message=message,
            details={"callback_url": callback_url},
        )
        self.callback_url = callback_url


class LocalValidationError(SubmissionError):
    """Form input rejected before any network call."""

    def __init__(self, message: str, fields: Optional[list] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            details={"fields": fields or []},
        )
