# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Auth Gateway HTTP Client — submits forms to the remote auth API.

The gateway itself (password checks, token minting, email delivery) is an
external service. This client posts the form payload and turns whatever
comes back into a GatewayResult. Non-2xx responses are still decoded,
because the gateway reports domain errors in the body.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from auth_widget.core.errors import SubmissionTransportError
from auth_widget.core.logging import redact_payload
from auth_widget.core.metrics import widget_metrics
from auth_widget.protocols.schema import (
    FormType,
    GatewayPayload,
    GatewayResult,
    parse_gateway_response,
    payload_to_json,
)
from auth_widget.runtime.http import build_async_client, service_headers

logger = logging.getLogger("widget.gateway")

ENDPOINTS = {
    FormType.LOGIN: "/functions/v1/auth-login",
    FormType.REGISTER: "/functions/v1/auth-register",
    FormType.RESET_PASSWORD: "/functions/v1/auth-reset-password",
}


class AuthGatewayClient:
    """
    Auth API client.

    Usage:
        gateway = AuthGatewayClient("https://project.example.co", anon_key="...")
        result = await gateway.submit(FormType.LOGIN, payload)
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str = "",
        client_info: str = "authsystem-public-form/1.0",
        timeout: float = 30.0,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url
        self._client = http or build_async_client(
            base_url=base_url,
            headers=service_headers(anon_key, client_info),
            timeout=timeout,
        )

    async def submit(self, form_type: FormType, payload: GatewayPayload) -> GatewayResult:
        """
        POST the payload to the endpoint of ``form_type``.

        Raises SubmissionTransportError when the request fails or the body
        is not a gateway envelope.
        """
        endpoint = ENDPOINTS[form_type]
        body = payload_to_json(payload)
        logger.info(
            "Submitting %s form",
            form_type.value,
            extra={"form_type": form_type.value, "payload": redact_payload(body)},
        )

        start = time.time()
        try:
            resp = await self._client.post(endpoint, json=body)
            result = parse_gateway_response(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            widget_metrics.inc(f"gateway_error:{form_type.value}")
            raise SubmissionTransportError(str(e)) from e
        finally:
            widget_metrics.observe(
                f"gateway_latency:{form_type.value}",
                (time.time() - start) * 1000,
            )

        logger.info(
            "Gateway answered %s (status=%d)",
            result.kind, resp.status_code,
            extra={"form_type": form_type.value},
        )
        return result

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
