# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Form Session State — fields, selected role and the displayed message.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields as dc_fields
from enum import Enum
from typing import List, Optional

from auth_widget.protocols.schema import FormType

REQUIRED_FIELDS = {
    FormType.LOGIN: ["email", "password"],
    FormType.REGISTER: ["name", "email", "password", "confirm_password"],
    FormType.RESET_PASSWORD: ["email"],
}


class MessageKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class FormMessage:
    kind: MessageKind
    text: str

    @classmethod
    def success(cls, text: str) -> FormMessage:
        return cls(MessageKind.SUCCESS, text)

    @classmethod
    def error(cls, text: str) -> FormMessage:
        return cls(MessageKind.ERROR, text)


@dataclass
class FormFields:
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    @classmethod
    def names(cls) -> List[str]:
        return [f.name for f in dc_fields(cls)]

    def missing(self, form_type: FormType) -> List[str]:
        return [
            name for name in REQUIRED_FIELDS[form_type]
            if not getattr(self, name).strip()
        ]

    def __repr__(self) -> str:
        return f"FormFields(name={self.name!r}, email={self.email!r}, password=***)"


@dataclass
class FormSession:
    """Mutable state of one form, owned by its FormController."""

    form_type: FormType
    fields: FormFields = field(default_factory=FormFields)
    selected_role: Optional[str] = None
    message: Optional[FormMessage] = None
