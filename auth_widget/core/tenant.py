# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Tenant Context — Multi-tenancy support.

Every widget session is scoped to one tenant application.
TenantContext carries the tenant identity and the session API key
through the submit path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TenantContext:
    """Immutable tenant identity for one widget session."""

    external_id: str
    internal_id: str
    display_name: str = ""
    api_key: Optional[str] = None

    def __post_init__(self):
        if not self.external_id:
            raise ValueError("external_id must not be empty")
        if not self.internal_id:
            raise ValueError("internal_id must not be empty")

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def initial(self) -> str:
        """First letter of the display name, used when no logo is set."""
        return self.display_name[:1] or "A"

    def __repr__(self) -> str:
        # api_key omitted
        return f"TenantContext(tenant={self.external_id!r}, internal={self.internal_id!r})"
