# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""Shared httpx plumbing for the outbound service clients."""

from __future__ import annotations

from typing import Dict, Optional

import httpx


def service_headers(anon_key: str, client_info: Optional[str] = None) -> Dict[str, str]:
    """Bearer + apikey headers expected by the auth API and its data endpoints."""
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {anon_key}",
        "apikey": anon_key,
    }
    if client_info:
        headers["X-Client-Info"] = client_info
    return headers


def build_async_client(
    base_url: str = "",
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30.0,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout)
