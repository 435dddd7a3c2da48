# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Form FSM Engine — lifecycle of one widget form.

A config-driven finite state machine that reads transition rules
from YAML/dict configuration. The packaged flows under
``auth_widget/flows`` describe the login/register and reset-password
lifecycles; the engine itself knows nothing about forms.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from auth_widget.protocols.schema import FormType

logger = logging.getLogger("widget.fsm")

FLOWS_DIR = Path(__file__).resolve().parent.parent / "flows"

FLOW_FILES = {
    FormType.LOGIN: "form_session.yaml",
    FormType.REGISTER: "form_session.yaml",
    FormType.RESET_PASSWORD: "reset_password_session.yaml",
}


class InvalidTransitionError(Exception):
    """Raised when an FSM transition is not permitted."""
    pass


class FormFSM:
    """
    Finite state machine driven by configuration.

    Transition rules are loaded from a dict or YAML file:
        states: [init, loading, ready]
        initial_state: init
        transitions:
          - from: init
            event: SESSION_START
            to: loading

    Unlike a pure transition table, the instance also tracks the current
    state of the single form session it belongs to.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self.name: str = config.get("name", "form_session")
        self._states: List[str] = config.get("states", [])
        self._initial_state: str = config.get(
            "initial_state", self._states[0] if self._states else "init"
        )
        self._transitions: List[Dict[str, str]] = config.get("transitions", [])

        # Build lookup: (from_state, event_type) -> to_state
        self._lookup: Dict[tuple, str] = {}
        for t in self._transitions:
            key = (t["from"], t["event"])
            self._lookup[key] = t["to"]

        self._state = self._initial_state

    @classmethod
    def from_yaml(cls, path: str | Path) -> FormFSM:
        """Load FSM config from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        return cls(config)

    @classmethod
    def for_form(cls, form_type: FormType) -> FormFSM:
        """Load the packaged flow for a form type."""
        return cls.from_yaml(FLOWS_DIR / FLOW_FILES[form_type])

    @property
    def state(self) -> str:
        return self._state

    # ── Core Transition Logic ───────────────────────────────────

    def transition(self, current_state: str, event_type: str) -> str:
        """
        Compute the next state given current state and event type.

        Raises InvalidTransitionError if no matching rule exists.
        """
        key = (current_state, event_type)
        if key not in self._lookup:
            raise InvalidTransitionError(
                f"No transition from state '{current_state}' "
                f"on event '{event_type}'"
            )
        return self._lookup[key]

    def can(self, event_type: str) -> bool:
        return (self._state, event_type) in self._lookup

    def advance(self, event_type: str) -> str:
        """
        Apply an event to the tracked state.

        Returns the new state.
        """
        new_state = self.transition(self._state, event_type)
        if new_state != self._state:
            logger.info(
                "FSM %s: %s -[%s]-> %s",
                self.name, self._state, event_type, new_state,
            )
        self._state = new_state
        return new_state
