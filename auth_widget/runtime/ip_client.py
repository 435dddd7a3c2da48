# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
IP HTTP Client — client IP discovery and reputation lookup.

get_client_ip() never raises: an unreachable echo service yields the
placeholder address 0.0.0.0. check_ip_status() raises
ReputationCheckUnavailable and leaves the fail-open decision to AccessGate.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from auth_widget.core.errors import ReputationCheckUnavailable
from auth_widget.protocols.schema import IpStatusResponse
from auth_widget.runtime.http import build_async_client, service_headers

logger = logging.getLogger("widget.ip_client")

UNKNOWN_IP = "0.0.0.0"

CHECK_IP_STATUS_PATH = "/functions/v1/check-ip-status"


class IpClient:
    """Client for the public IP echo service and the reputation endpoint."""

    def __init__(
        self,
        api_url: str,
        anon_key: str = "",
        echo_url: str = "https://api.ipify.org?format=json",
        timeout: float = 30.0,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._echo_url = echo_url
        self._headers = service_headers(anon_key)
        self._client = http or build_async_client(timeout=timeout)

    async def get_client_ip(self) -> str:
        """Public IP of this client as seen by the echo service."""
        try:
            resp = await self._client.get(self._echo_url)
            resp.raise_for_status()
            ip = resp.json()["ip"]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("Could not determine client IP, using %s: %s", UNKNOWN_IP, e)
            return UNKNOWN_IP
        logger.debug("Detected client IP: %s", ip)
        return ip

    async def check_ip_status(self, client_ip: str) -> IpStatusResponse:
        """Ask the reputation service about ``client_ip``."""
        try:
            resp = await self._client.post(
                self._api_url + CHECK_IP_STATUS_PATH,
                headers=self._headers,
                json={"client_ip": client_ip},
            )
            # Non-2xx bodies still carry {success: false, ...}
            return IpStatusResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise ReputationCheckUnavailable(str(e)) from e

    async def close(self) -> None:
        await self._client.aclose()
