# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Namespace Helper — storage key layout.

Persisted client state lives under fixed keys: {prefix}:storage:{name}.
Tokens are process-wide, so the keys carry no tenant or session part.
"""

from __future__ import annotations

ACCESS_TOKEN_KEY = "auth_token"
REFRESH_TOKEN_KEY = "refresh_token"
USER_DATA_KEY = "user_data"


def get_storage_key(prefix: str, name: str) -> str:
    """
    Build a storage key.

    Examples:
        get_storage_key("widget", "auth_token") -> "widget:storage:auth_token"
    """
    return f"{prefix}:storage:{name}"
