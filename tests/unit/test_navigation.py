# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.
"""Unit tests for navigation URL building."""

from urllib.parse import parse_qs, urlsplit

from auth_widget.services.navigation import build_url, callback_from_query


def _params(url):
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}


class TestBuildUrl:
    def test_all_params(self):
        url = build_url("/register", "A", {"callback_url": "https://x/cb"}, api_key="K")
        assert url.startswith("/register?")
        assert _params(url) == {"app_id": "A", "api_key": "K", "redirect_uri": "https://x/cb"}

    def test_api_key_from_query(self):
        url = build_url("/login", "A", {"api_key": "Q"})
        assert _params(url) == {"app_id": "A", "api_key": "Q"}

    def test_redirect_uri_is_carried(self):
        url = build_url("/login", "A", {"redirect_uri": "https://x/cb"})
        assert _params(url)["redirect_uri"] == "https://x/cb"

    def test_only_app_id(self):
        assert build_url("/reset-password", "A", {}) == "/reset-password?app_id=A"

    def test_callback_is_encoded(self):
        url = build_url("/login", "A", {"callback_url": "https://x/cb?a=1&b=2"})
        assert "a%3D1%26b%3D2" in url


class TestCallbackFromQuery:
    def test_callback_url_wins(self):
        assert callback_from_query({"callback_url": "a", "redirect_uri": "b"}) == "a"

    def test_redirect_uri(self):
        assert callback_from_query({"redirect_uri": "b"}) == "b"

    def test_none(self):
        assert callback_from_query({"callback_url": ""}) is None
