# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
View Models — what the widget shows, as plain data.

Rendering (HTML, styling) happens elsewhere; these objects only say which
screen is up, which inputs exist and which texts, colors and links go
with them. Every text goes through RenderConfig.text() so tenants can
override it by key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Mapping, Optional

from auth_widget.controller.form_session import FormMessage, FormSession
from auth_widget.core.tenant import TenantContext
from auth_widget.protocols.schema import (
    AccessVerdict,
    BrandingAttributes,
    FormType,
    RenderConfig,
)
from auth_widget.services.navigation import build_url

LOGIN_PATH = "/login"
REGISTER_PATH = "/register"
RESET_PASSWORD_PATH = "/reset-password"

DEFAULT_TEXTS = {
    "login_title": "Sign In",
    "register_title": "Create Account",
    "reset_title": "Reset Password",
    "login_subtitle": "Enter your credentials",
    "register_subtitle": "Sign up to get started",
    "reset_subtitle": "We will email you a link to reset your password",
    "register_name_label": "Full Name",
    "register_name_placeholder": "Your full name",
    "login_email_label": "Email",
    "register_email_label": "Email",
    "reset_email_label": "Email",
    "login_email_placeholder": "you@email.com",
    "register_email_placeholder": "you@email.com",
    "reset_email_placeholder": "you@email.com",
    "login_password_label": "Password",
    "register_password_label": "Password",
    "login_password_placeholder": "••••••••",
    "register_password_placeholder": "••••••••",
    "register_confirm_password_label": "Confirm Password",
    "register_confirm_password_placeholder": "••••••••",
    "role_selection_label": "User Type",
    "role_selection_placeholder": "Select a role",
    "role_selection_description": "Select the kind of access you need in the application",
    "login_forgot_password_text": "Forgot your password?",
    "login_register_link_text": "Don't have an account? Sign up here",
    "register_login_link_text": "Already have an account? Sign in",
    "reset_login_link_text": "Remembered your password? Sign in",
    "reset_back_to_login_text": "Back to sign in",
    "security_badge_text": "Protected by AuthSystem",
}

TITLE_KEYS = {
    FormType.LOGIN: ("login_title", "login_subtitle"),
    FormType.REGISTER: ("register_title", "register_subtitle"),
    FormType.RESET_PASSWORD: ("reset_title", "reset_subtitle"),
}


def _text(config: RenderConfig, key: str) -> str:
    return config.text(key, DEFAULT_TEXTS[key])


# ── View types ──────────────────────────────────────────────────


@dataclass
class View:
    kind: str = ""

    @property
    def inputs(self) -> List[str]:
        """Names of the interactive inputs this view renders."""
        return []


@dataclass
class LoadingView(View):
    kind: str = "loading"
    message: str = "Checking access..."


@dataclass
class ConfigErrorView(View):
    kind: str = "config_error"
    title: str = "Configuration Error"
    message: str = ""
    example: str = "/login?app_id=xxx"


@dataclass
class UnavailableView(View):
    kind: str = "unavailable"
    title: str = "Error"
    message: str = "Application not found"


@dataclass
class BlockedView(View):
    kind: str = "blocked"
    title: str = "Access Blocked"
    message: str = "Your IP address has been temporarily blocked for security reasons."
    reason: Optional[str] = None
    blocked_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    contact_hint: str = "If you believe this is a mistake, please contact the system administrator."


@dataclass
class FieldView:
    name: str
    input_type: str
    label: str
    placeholder: str
    value: str = ""
    required: bool = True


@dataclass
class RoleSelectView:
    label: str
    placeholder: str
    description: str
    options: List[tuple] = field(default_factory=list)
    selected: Optional[str] = None


@dataclass
class LinkView:
    prefix: str
    label: str
    href: str


@dataclass
class FormView(View):
    kind: str = "form"
    form_type: FormType = FormType.LOGIN
    title: str = ""
    subtitle: str = ""
    branding: BrandingAttributes = field(default_factory=BrandingAttributes)
    logo_initial: str = "A"
    fields: List[FieldView] = field(default_factory=list)
    role_select: Optional[RoleSelectView] = None
    submit_label: str = ""
    submitting: bool = False
    message: Optional[FormMessage] = None
    links: List[LinkView] = field(default_factory=list)
    badge_text: str = ""

    @property
    def inputs(self) -> List[str]:
        names = [f.name for f in self.fields]
        if self.role_select is not None:
            names.append("role")
        return names


@dataclass
class ResetSuccessView(View):
    """Reset-password after success: message plus a way back to login."""

    kind: str = "reset_success"
    title: str = ""
    branding: BrandingAttributes = field(default_factory=BrandingAttributes)
    message: Optional[FormMessage] = None
    back_link: Optional[LinkView] = None
    badge_text: str = ""


# ── Builders ────────────────────────────────────────────────────


def split_link_text(text: str, fallback_label: str) -> tuple:
    """
    Split "Question? Action" into ("Question? ", "Action").

    Texts without "? " render entirely as the link label.
    """
    if "? " in text:
        prefix, label = text.split("? ", 1)
        return prefix + "? ", label or fallback_label
    return "", text or fallback_label


def blocked_view(verdict: AccessVerdict) -> BlockedView:
    return BlockedView(
        reason=verdict.reason,
        blocked_at=verdict.blocked_at,
        expires_at=verdict.expires_at,
    )


def _build_fields(form: FormSession, config: RenderConfig) -> List[FieldView]:
    values = form.fields
    form_type = form.form_type
    result = []

    if form_type == FormType.REGISTER:
        result.append(FieldView(
            name="name",
            input_type="text",
            label=_text(config, "register_name_label"),
            placeholder=_text(config, "register_name_placeholder"),
            value=values.name,
        ))

    prefix = {
        FormType.LOGIN: "login",
        FormType.REGISTER: "register",
        FormType.RESET_PASSWORD: "reset",
    }[form_type]
    result.append(FieldView(
        name="email",
        input_type="email",
        label=_text(config, f"{prefix}_email_label"),
        placeholder=_text(config, f"{prefix}_email_placeholder"),
        value=values.email,
    ))

    if form_type != FormType.RESET_PASSWORD:
        result.append(FieldView(
            name="password",
            input_type="password",
            label=_text(config, f"{prefix}_password_label"),
            placeholder=_text(config, f"{prefix}_password_placeholder"),
            value=values.password,
        ))

    if form_type == FormType.REGISTER:
        result.append(FieldView(
            name="confirm_password",
            input_type="password",
            label=_text(config, "register_confirm_password_label"),
            placeholder=_text(config, "register_confirm_password_placeholder"),
            value=values.confirm_password,
        ))
    return result


def _build_links(
    form_type: FormType,
    config: RenderConfig,
    tenant: TenantContext,
    query: Mapping[str, str],
) -> List[LinkView]:
    def url(path: str) -> str:
        return build_url(path, tenant.external_id, query, api_key=tenant.api_key)

    if form_type == FormType.LOGIN:
        prefix, label = split_link_text(_text(config, "login_register_link_text"), "Sign up here")
        return [
            LinkView("", _text(config, "login_forgot_password_text"), url(RESET_PASSWORD_PATH)),
            LinkView(prefix, label, url(REGISTER_PATH)),
        ]
    if form_type == FormType.REGISTER:
        prefix, label = split_link_text(_text(config, "register_login_link_text"), "Sign in")
        return [LinkView(prefix, label, url(LOGIN_PATH))]
    prefix, label = split_link_text(_text(config, "reset_login_link_text"), "Sign in")
    return [LinkView(prefix, label, url(LOGIN_PATH))]


def form_view(
    form: FormSession,
    config: RenderConfig,
    tenant: TenantContext,
    query: Mapping[str, str],
    submitting: bool = False,
) -> FormView:
    title_key, subtitle_key = TITLE_KEYS[form.form_type]
    title = _text(config, title_key)

    role_select = None
    if form.form_type == FormType.REGISTER and config.roles:
        role_select = RoleSelectView(
            label=_text(config, "role_selection_label"),
            placeholder=_text(config, "role_selection_placeholder"),
            description=_text(config, "role_selection_description"),
            options=[(role.name, role.label) for role in config.roles],
            selected=form.selected_role,
        )

    return FormView(
        form_type=form.form_type,
        title=title,
        subtitle=_text(config, subtitle_key),
        branding=config.branding,
        logo_initial=tenant.initial,
        fields=_build_fields(form, config),
        role_select=role_select,
        submit_label=title,
        submitting=submitting,
        message=form.message,
        links=_build_links(form.form_type, config, tenant, query),
        badge_text=_text(config, "security_badge_text"),
    )


def reset_success_view(
    form: FormSession,
    config: RenderConfig,
    tenant: TenantContext,
    query: Mapping[str, str],
) -> ResetSuccessView:
    return ResetSuccessView(
        title=_text(config, "reset_title"),
        branding=config.branding,
        message=form.message,
        back_link=LinkView(
            "",
            _text(config, "reset_back_to_login_text"),
            build_url(LOGIN_PATH, tenant.external_id, query, api_key=tenant.api_key),
        ),
        badge_text=_text(config, "security_badge_text"),
    )
