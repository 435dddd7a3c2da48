# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Tenant Data HTTP Client — lookups against the tenant data service.

The data service exposes PostgREST-style endpoints:
    GET /rest/v1/applications?application_id=eq.<external id>
    GET /rest/v1/branding_configs?application_id=eq.<internal id>
    GET /rest/v1/application_roles?application_id=eq.<internal id>&order=display_name

"No row" is returned as None / []; transport and decoding problems are
raised as DataServiceError so callers can tell them apart.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from auth_widget.core.errors import DataServiceError
from auth_widget.runtime.http import build_async_client, service_headers

logger = logging.getLogger("widget.data_client")


class DataClient:
    """
    Tenant data service client.

    Usage:
        client = DataClient("https://project.example.co", anon_key="...")
        app = await client.get_application("my-app")
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str = "",
        timeout: float = 30.0,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url
        self._client = http or build_async_client(
            base_url=base_url,
            headers=service_headers(anon_key),
            timeout=timeout,
        )

    async def _select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        try:
            resp = await self._client.get(
                f"/rest/v1/{table}",
                params={"select": "*", **params},
            )
            resp.raise_for_status()
            rows = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DataServiceError(table, str(e)) from e

        if not isinstance(rows, list):
            raise DataServiceError(table, "expected a JSON array")
        return rows

    # ── Lookups ───────────────────────────────────────────────

    async def get_application(self, external_id: str) -> Optional[Dict[str, Any]]:
        """Tenant application row by its public application id."""
        rows = await self._select(
            "applications",
            {"application_id": f"eq.{external_id}"},
        )
        return rows[0] if rows else None

    async def get_branding(self, internal_id: str) -> Optional[Dict[str, Any]]:
        """Branding row (colors, fonts, custom_texts) for a tenant."""
        rows = await self._select(
            "branding_configs",
            {"application_id": f"eq.{internal_id}"},
        )
        return rows[0] if rows else None

    async def get_roles(self, internal_id: str) -> List[Dict[str, Any]]:
        """All role rows of a tenant, ordered by display name."""
        return await self._select(
            "application_roles",
            {"application_id": f"eq.{internal_id}", "order": "display_name"},
        )

    # ── Lifecycle ─────────────────────────────────────────────

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
