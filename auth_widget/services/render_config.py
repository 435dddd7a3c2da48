# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Render Config Loader — per-tenant branding, custom texts and roles.

Branding (which also carries the custom texts) and roles are fetched
concurrently. Each piece degrades on its own: a failed lookup yields the
defaults for that piece and never affects the other.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from auth_widget.core.errors import DataServiceError
from auth_widget.core.metrics import widget_metrics
from auth_widget.protocols.schema import (
    BrandingAttributes,
    FormType,
    RenderConfig,
    RoleOption,
)
from auth_widget.runtime.data_client import DataClient

logger = logging.getLogger("widget.render_config")

RESERVED_ROLE_NAME = "admin"
ELIGIBILITY_FLAG = "available_for_registration"


def is_registrable(role: Dict[str, Any]) -> bool:
    """
    Whether a role row may be offered on the registration form.

    Rows carrying the eligibility flag are included iff it is True.
    Older rows without the flag are included if they are the default
    role or are not named "admin".
    """
    if ELIGIBILITY_FLAG in role:
        return role[ELIGIBILITY_FLAG] is True
    return role.get("is_default") is True or role.get("name") != RESERVED_ROLE_NAME


def filter_registration_roles(rows: List[Dict[str, Any]]) -> List[RoleOption]:
    """Eligible roles as RoleOptions, keeping the service's ordering."""
    roles = []
    for row in rows:
        if not is_registrable(row):
            continue
        try:
            roles.append(RoleOption.model_validate(row))
        except ValidationError:
            logger.warning("Skipping malformed role row: %r", row.get("name"))
    return roles


def extract_custom_texts(branding: Optional[Dict[str, Any]]) -> Dict[str, str]:
    if not branding:
        return {}
    texts = branding.get("custom_texts") or {}
    if not isinstance(texts, dict):
        return {}
    return {k: v for k, v in texts.items() if isinstance(v, str)}


class RenderConfigLoader:
    """Builds the RenderConfig of one tenant for one form type."""

    def __init__(self, data_client: DataClient) -> None:
        self._data = data_client

    async def load(self, internal_id: str, form_type: FormType) -> RenderConfig:
        if form_type == FormType.REGISTER:
            (branding_row, texts), roles = await asyncio.gather(
                self._load_branding(internal_id),
                self._load_roles(internal_id),
            )
        else:
            branding_row, texts = await self._load_branding(internal_id)
            roles = []

        return RenderConfig(
            branding=BrandingAttributes.from_record(branding_row),
            custom_texts=texts,
            roles=roles,
        )

    async def _load_branding(
        self, internal_id: str
    ) -> Tuple[Optional[Dict[str, Any]], Dict[str, str]]:
        try:
            row = await self._data.get_branding(internal_id)
        except DataServiceError as e:
            widget_metrics.inc("render_config_degraded:branding")
            logger.warning("Could not load branding, using defaults: %s", e.message)
            return None, {}
        return row, extract_custom_texts(row)

    async def _load_roles(self, internal_id: str) -> List[RoleOption]:
        try:
            rows = await self._data.get_roles(internal_id)
        except DataServiceError as e:
            widget_metrics.inc("render_config_degraded:roles")
            logger.warning("Could not load roles for registration: %s", e.message)
            return []
        roles = filter_registration_roles(rows)
        logger.info("Roles for registration loaded: %s", [r.name for r in roles])
        return roles
