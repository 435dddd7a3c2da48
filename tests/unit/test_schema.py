# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.
"""Unit tests for protocol schema models."""

import pytest
from pydantic import ValidationError

from auth_widget.protocols.schema import (
    BrandingAttributes,
    FormType,
    GatewayFailure,
    GatewaySuccess,
    LoginPayload,
    RegisterPayload,
    RenderConfig,
    RoleOption,
    parse_gateway_response,
    payload_to_json,
)


class TestFormType:
    def test_parse_known(self):
        assert FormType.parse("reset-password") is FormType.RESET_PASSWORD

    def test_parse_unknown_falls_back_to_login(self):
        assert FormType.parse("signup") is FormType.LOGIN
        assert FormType.parse(None) is FormType.LOGIN


class TestBranding:
    def test_no_record_gives_defaults(self):
        b = BrandingAttributes.from_record(None)
        assert b.primary_color == "#3B82F6"
        assert b.font_family == "Inter"
        assert b.border_radius == 8
        assert b.button_style == "rounded"

    def test_falsy_values_fall_back(self):
        b = BrandingAttributes.from_record({
            "primary_color": "#000000",
            "secondary_color": "",
            "border_radius": 0,
            "logo_url": None,
        })
        assert b.primary_color == "#000000"
        assert b.secondary_color == "#1E40AF"
        assert b.border_radius == 8
        assert b.logo_url == ""

    def test_invalid_record_gives_defaults(self):
        b = BrandingAttributes.from_record({"border_radius": "not-a-number"})
        assert b == BrandingAttributes()

    def test_invalid_field_keeps_valid_fields(self):
        b = BrandingAttributes.from_record({"primary_color": "#111111", "border_radius": "12px"})
        assert b.primary_color == "#111111"
        assert b.border_radius == 8

    def test_numeric_string_radius_is_coerced(self):
        b = BrandingAttributes.from_record({"border_radius": "12", "font_family": 42})
        assert b.border_radius == 12
        assert b.font_family == "Inter"

    def test_button_radius(self):
        assert BrandingAttributes(border_radius=12).button_radius == 12
        assert BrandingAttributes(border_radius=12, button_style="square").button_radius == 4


class TestRoles:
    def test_null_is_default(self):
        role = RoleOption(name="user", display_name="User", is_default=None)
        assert role.is_default is False

    def test_false_string_is_not_default(self):
        assert RoleOption(name="u", display_name="U", is_default="false").is_default is False
        assert RoleOption(name="u", display_name="U", is_default="true").is_default is True

    def test_unparseable_is_default_rejected(self):
        with pytest.raises(ValidationError):
            RoleOption(name="u", display_name="U", is_default="sometimes")

    def test_label(self):
        assert RoleOption(name="a", display_name="A", description="Desc").label == "A - Desc"
        assert RoleOption(name="a", display_name="A").label == "A"

    def test_default_role(self):
        cfg = RenderConfig(roles=[
            RoleOption(name="a", display_name="A"),
            RoleOption(name="b", display_name="B", is_default=True),
        ])
        assert cfg.default_role.name == "b"

    def test_text_fallback(self):
        cfg = RenderConfig(custom_texts={"login_title": "Hi", "login_subtitle": ""})
        assert cfg.text("login_title", "x") == "Hi"
        assert cfg.text("login_subtitle", "default") == "default"


class TestPayloads:
    def test_register_omits_empty_role(self):
        p = RegisterPayload(
            email="a@b.c", password="pw", name="A", application_id="app",
            api_key="k", client_ip="1.2.3.4",
        )
        assert "role" not in payload_to_json(p)

    def test_register_keeps_role(self):
        p = RegisterPayload(
            email="a@b.c", password="pw", name="A", application_id="app",
            api_key="k", client_ip="1.2.3.4", role="editor",
        )
        assert payload_to_json(p)["role"] == "editor"

    def test_login_includes_null_callback(self):
        p = LoginPayload(
            email="a@b.c", password="pw", application_id="app",
            api_key="k", client_ip="1.2.3.4",
        )
        body = payload_to_json(p)
        assert body["callback_url"] is None
        assert body["client_ip"] == "1.2.3.4"


class TestGatewayResponse:
    def test_success(self):
        result = parse_gateway_response({
            "success": True,
            "data": {"access_token": "t", "user": {"id": 1}, "extra_field": 1},
        })
        assert isinstance(result, GatewaySuccess)
        assert result.data.access_token == "t"

    def test_success_without_data(self):
        result = parse_gateway_response({"success": True})
        assert isinstance(result, GatewaySuccess)
        assert result.data.access_token is None

    def test_failure(self):
        result = parse_gateway_response({
            "success": False,
            "error": {"code": "EMAIL_NOT_VERIFIED", "message": "Verify", "callback_url": "https://x"},
        })
        assert isinstance(result, GatewayFailure)
        assert result.error_code == "EMAIL_NOT_VERIFIED"
        assert result.callback_url == "https://x"

    def test_malformed_raises(self):
        with pytest.raises(ValidationError):
            parse_gateway_response(["not", "an", "envelope"])

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_gateway_response({"data": {}})

    def test_numeric_error_code(self):
        result = parse_gateway_response({
            "success": False,
            "error": {"code": 401, "message": "Invalid email or password"},
        })
        assert isinstance(result, GatewayFailure)
        assert result.error_code == "401"
        assert result.message == "Invalid email or password"

    def test_bare_string_error(self):
        result = parse_gateway_response({"success": False, "error": "boom"})
        assert isinstance(result, GatewayFailure)
        assert result.error_code is None
        assert result.message is None

    def test_non_text_message_dropped(self):
        result = parse_gateway_response({
            "success": False,
            "error": {"code": "X", "message": {"detail": "nested"}},
        })
        assert result.message is None
