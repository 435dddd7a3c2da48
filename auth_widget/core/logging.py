# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Structured Logging — JSON format with tenant/session context.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

CONTEXT_KEYS = ("trace_id", "tenant_id", "session_id", "form_type")


class StructuredFormatter(logging.Formatter):
    """JSON log formatter with trace/tenant/session context."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        # Attach context if available
        for key in CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val:
                log_entry[key] = val

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the widget."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


def mask_secret(value: Optional[str], visible: int = 20) -> str:
    """
    Shorten a credential for log output.

    Keys are cut to their first ``visible`` characters; anything shorter
    than that is replaced entirely so it never appears in logs.
    """
    if not value:
        return "<none>"
    if len(value) <= visible:
        return "***"
    return value[:visible] + "..."


def redact_payload(payload: dict) -> dict:
    """Copy of a request payload that is safe to log."""
    safe = dict(payload)
    if "password" in safe:
        safe["password"] = "***"
    if "api_key" in safe:
        safe["api_key"] = mask_secret(safe["api_key"])
    return safe
