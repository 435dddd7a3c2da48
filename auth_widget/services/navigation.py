# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Navigation URL builder — links between the login, register and
reset-password views that keep tenant context and callback intact.
"""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlencode

CALLBACK_PARAMS = ("callback_url", "redirect_uri")


def callback_from_query(query: Mapping[str, str]) -> Optional[str]:
    """The callback URL, accepting either parameter name (callback_url wins)."""
    for name in CALLBACK_PARAMS:
        value = query.get(name)
        if value:
            return value
    return None


def build_url(
    target_path: str,
    app_id: str,
    current_query: Mapping[str, str],
    api_key: Optional[str] = None,
) -> str:
    """
    Build ``target_path?app_id=...&api_key=...&redirect_uri=...``.

    ``api_key`` falls back to the one in ``current_query``; the callback
    is always re-emitted as ``redirect_uri``.
    """
    params = {"app_id": app_id}

    key = api_key or current_query.get("api_key")
    if key:
        params["api_key"] = key

    callback = callback_from_query(current_query)
    if callback:
        params["redirect_uri"] = callback

    return f"{target_path}?{urlencode(params)}"
