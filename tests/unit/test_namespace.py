# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.
"""Unit tests for storage key layout."""

from auth_widget.kernel.namespace import ACCESS_TOKEN_KEY, get_storage_key


def test_storage_key():
    assert get_storage_key("widget", ACCESS_TOKEN_KEY) == "widget:storage:auth_token"


def test_storage_key_custom_prefix():
    assert get_storage_key("embed", "user_data") == "embed:storage:user_data"
