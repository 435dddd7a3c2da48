# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Access Gate — IP reputation check for one widget session.

Fail-open throughout: an unreachable IP echo service or reputation
service never blocks anyone. The verdict is fetched once per gate and
reused for the rest of the session, including submit retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from auth_widget.core.errors import ReputationCheckUnavailable
from auth_widget.core.metrics import widget_metrics
from auth_widget.protocols.schema import AccessVerdict
from auth_widget.runtime.ip_client import UNKNOWN_IP, IpClient

logger = logging.getLogger("widget.access_gate")


class AccessGate:
    """Produces the session's AccessVerdict. One instance per session."""

    def __init__(self, ip_client: IpClient) -> None:
        self._ip_client = ip_client
        self._verdict: Optional[AccessVerdict] = None
        self._lock = asyncio.Lock()

    @property
    def verdict(self) -> Optional[AccessVerdict]:
        return self._verdict

    async def check(self, ip: Optional[str] = None) -> AccessVerdict:
        """Return the verdict, querying the reputation service on first use."""
        async with self._lock:
            if self._verdict is None:
                self._verdict = await self._query(ip)
                widget_metrics.inc(
                    "access_verdict:blocked" if self._verdict.blocked else "access_verdict:allowed"
                )
        return self._verdict

    async def _query(self, ip: Optional[str]) -> AccessVerdict:
        ip_to_check = ip or await self._ip_client.get_client_ip()
        try:
            status = await self._ip_client.check_ip_status(ip_to_check)
        except ReputationCheckUnavailable as e:
            logger.error("%s; allowing access", e.message)
            return AccessVerdict.allowed(UNKNOWN_IP)

        if not status.success or status.data is None:
            logger.info("Reputation service gave no verdict for %s; allowing access", ip_to_check)
            return AccessVerdict.allowed(ip_to_check)

        data = status.data
        checked_ip = data.ip_address or ip_to_check
        if not data.is_blocked:
            logger.info("IP is not blocked: %s", checked_ip)
            return AccessVerdict.allowed(checked_ip)

        info = data.blocked_info
        logger.warning(
            "IP is blocked: %s (%s)", checked_ip, info.reason if info else "no reason given",
        )
        return AccessVerdict(
            blocked=True,
            reason=info.reason if info else None,
            blocked_at=info.blocked_at if info else None,
            expires_at=info.expires_at if info else None,
            ip=checked_ip,
        )
