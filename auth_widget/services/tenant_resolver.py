# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Tenant Resolver — app_id from the URL -> TenantContext.

The API key is taken from the query string as-is; it is not verified
here. A missing key does not fail resolution, it fails the first submit.
"""

from __future__ import annotations

import logging
from typing import Optional

from auth_widget.core.errors import (
    ConfigurationError,
    DataServiceError,
    TenantLookupFailedError,
    TenantNotFoundError,
)
from auth_widget.core.logging import mask_secret
from auth_widget.core.metrics import widget_metrics
from auth_widget.core.tenant import TenantContext
from auth_widget.runtime.data_client import DataClient

logger = logging.getLogger("widget.tenant_resolver")


class TenantResolver:
    """Looks up the tenant application record behind an external app id."""

    def __init__(self, data_client: DataClient) -> None:
        self._data = data_client

    async def resolve(
        self,
        external_id: Optional[str],
        api_key: Optional[str] = None,
    ) -> TenantContext:
        """
        Resolve ``external_id`` into a TenantContext.

        Raises:
            ConfigurationError: external_id is empty (no lookup is made)
            TenantNotFoundError: no application with that id
            TenantLookupFailedError: the data service could not be reached
        """
        if not external_id:
            raise ConfigurationError("The app_id parameter is required in the URL")

        try:
            record = await self._data.get_application(external_id)
        except DataServiceError as e:
            widget_metrics.inc("tenant_resolve:lookup_failed")
            logger.error(
                "Tenant lookup failed for %s: %s", external_id, e.message,
                extra={"tenant_id": external_id},
            )
            raise TenantLookupFailedError(external_id, e.message) from e

        if not record or not record.get("id"):
            widget_metrics.inc("tenant_resolve:not_found")
            logger.warning("Application not found: %s", external_id, extra={"tenant_id": external_id})
            raise TenantNotFoundError(external_id)

        if api_key:
            logger.info("API key from URL: %s", mask_secret(api_key), extra={"tenant_id": external_id})
        else:
            logger.warning("No API key in URL", extra={"tenant_id": external_id})

        widget_metrics.inc("tenant_resolve:ok")
        return TenantContext(
            external_id=external_id,
            internal_id=str(record["id"]),
            display_name=record.get("name") or "",
            api_key=api_key or None,
        )
