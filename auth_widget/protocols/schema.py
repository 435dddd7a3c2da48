# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Auth Widget Protocol Schema — data crossing the widget boundary.

Defines the models exchanged with the external collaborators:
  - the tenant data service (branding + roles),
  - the IP reputation service (AccessVerdict),
  - the auth gateway (request payloads and the response envelope).

Gateway responses are validated here and turned into a tagged union
(GatewaySuccess | GatewayFailure) before the controller looks at them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class FormType(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    RESET_PASSWORD = "reset-password"

    @classmethod
    def parse(cls, value: Optional[str]) -> "FormType":
        """Map an incoming form type string; unknown values fall back to login."""
        try:
            return cls(value)
        except ValueError:
            return cls.LOGIN


# ── Branding / RenderConfig ─────────────────────────────────────


class BrandingAttributes(BaseModel):
    """Tenant visual branding. Every field has a hardcoded fallback."""

    model_config = ConfigDict(frozen=True)

    primary_color: str = "#3B82F6"
    secondary_color: str = "#1E40AF"
    accent_color: str = "#F59E0B"
    background_color: str = "#FFFFFF"
    text_color: str = "#1F2937"
    font_family: str = "Inter"
    logo_url: str = ""
    border_radius: int = 8
    button_style: str = "rounded"

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> "BrandingAttributes":
        """
        Build branding from a raw ``branding_configs`` row.

        Empty, falsy (``""``, ``0``, ``None``) or invalid remote values
        fall back to the default for that field only; the other fields of
        the row are kept.
        """
        if not record:
            return cls()
        values = {}
        for name in cls.model_fields:
            value = record.get(name)
            if not value:
                continue
            try:
                values[name] = getattr(cls.model_validate({name: value}), name)
            except ValidationError:
                continue
        return cls(**values)

    @property
    def button_radius(self) -> int:
        return self.border_radius if self.button_style == "rounded" else 4


class RoleOption(BaseModel):
    """A role the user may pick while registering."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    description: Optional[str] = None
    is_default: bool = False

    @field_validator("is_default", mode="before")
    @classmethod
    def _null_is_not_default(cls, v):
        return False if v is None else v

    @property
    def label(self) -> str:
        if self.description:
            return f"{self.display_name} - {self.description}"
        return self.display_name


class RenderConfig(BaseModel):
    """Everything needed to render one tenant's form."""

    model_config = ConfigDict(frozen=True)

    branding: BrandingAttributes = Field(default_factory=BrandingAttributes)
    custom_texts: Dict[str, str] = Field(default_factory=dict)
    roles: List[RoleOption] = Field(default_factory=list)

    def text(self, key: str, default: str) -> str:
        """Custom text for ``key`` if the tenant set a non-empty one."""
        return self.custom_texts.get(key) or default

    @property
    def default_role(self) -> Optional[RoleOption]:
        for role in self.roles:
            if role.is_default:
                return role
        return None


# ── Access verdict ──────────────────────────────────────────────


class AccessVerdict(BaseModel):
    """Reputation verdict for the caller's IP. Produced once per session."""

    model_config = ConfigDict(frozen=True)

    blocked: bool = False
    reason: Optional[str] = None
    blocked_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    ip: str = "0.0.0.0"

    @classmethod
    def allowed(cls, ip: str) -> "AccessVerdict":
        return cls(blocked=False, ip=ip)


class BlockedInfo(BaseModel):
    reason: Optional[str] = None
    blocked_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class IpStatusData(BaseModel):
    is_blocked: bool = False
    blocked_info: Optional[BlockedInfo] = None
    ip_address: Optional[str] = None


class IpStatusResponse(BaseModel):
    success: bool = False
    data: Optional[IpStatusData] = None


# ── Gateway requests ────────────────────────────────────────────


class LoginPayload(BaseModel):
    email: str
    password: str
    application_id: str
    api_key: str
    callback_url: Optional[str] = None
    client_ip: str


class RegisterPayload(BaseModel):
    email: str
    password: str
    name: str
    application_id: str
    api_key: str
    callback_url: Optional[str] = None
    role: Optional[str] = None
    client_ip: str

    def to_json(self) -> Dict[str, Any]:
        # An unselected role is omitted entirely rather than sent as null
        exclude = {"role"} if not self.role else set()
        return self.model_dump(exclude=exclude)


class ResetPasswordPayload(BaseModel):
    email: str
    application_id: str
    api_key: str
    redirect_uri: Optional[str] = None
    client_ip: str


GatewayPayload = Union[LoginPayload, RegisterPayload, ResetPasswordPayload]


def payload_to_json(payload: GatewayPayload) -> Dict[str, Any]:
    if isinstance(payload, RegisterPayload):
        return payload.to_json()
    return payload.model_dump()


# ── Gateway response ────────────────────────────────────────────


class GatewayData(BaseModel):
    model_config = ConfigDict(extra="allow")

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Optional[Any] = None
    email_verification_required: Optional[bool] = None
    callback_url: Optional[str] = None
    message: Optional[str] = None


class GatewayErrorBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: Optional[str] = None
    message: Optional[str] = None
    callback_url: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_text(cls, v):
        # Some endpoints send the HTTP status as a number
        return None if v is None else str(v)

    @field_validator("message", "callback_url", mode="before")
    @classmethod
    def _text_or_none(cls, v):
        return v if isinstance(v, str) else None


class GatewayEnvelope(BaseModel):
    """Raw response body as sent by every gateway endpoint."""

    success: bool
    data: Optional[GatewayData] = None
    error: Optional[GatewayErrorBody] = None

    @field_validator("error", mode="before")
    @classmethod
    def _malformed_error_is_empty(cls, v):
        # A bare string or list carries no code; classify it as a generic failure
        if v is None or isinstance(v, (dict, GatewayErrorBody)):
            return v
        return {}


class GatewaySuccess(BaseModel):
    kind: Literal["success"] = "success"
    data: GatewayData = Field(default_factory=GatewayData)


class GatewayFailure(BaseModel):
    kind: Literal["failure"] = "failure"
    error_code: Optional[str] = None
    message: Optional[str] = None
    callback_url: Optional[str] = None


GatewayResult = Union[GatewaySuccess, GatewayFailure]


def parse_gateway_response(body: Any) -> GatewayResult:
    """
    Validate a decoded gateway body into the tagged result.

    Raises pydantic.ValidationError if the body is not a gateway envelope.
    """
    envelope = GatewayEnvelope.model_validate(body)
    if envelope.success:
        return GatewaySuccess(data=envelope.data or GatewayData())
    error = envelope.error or GatewayErrorBody()
    return GatewayFailure(
        error_code=error.code,
        message=error.message,
        callback_url=error.callback_url,
    )
