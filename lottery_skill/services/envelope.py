"""Typed inbound requests and the abstract outbound response."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from lottery_skill.services.speech import Speech


class DialogState(str, Enum):
    STARTED = "STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class LaunchRequest:
    session_key: str


@dataclass(frozen=True)
class IntentRequest:
    session_key: str
    name: str
    slots: Mapping[str, str | None] = field(default_factory=dict)
    dialog_state: DialogState | None = None

    def slot(self, name: str) -> str | None:
        return self.slots.get(name)


@dataclass(frozen=True)
class SessionEndedRequest:
    session_key: str
    reason: str | None = None


@dataclass(frozen=True)
class UnsupportedRequest:
    """A request type the skill has no handler for."""

    session_key: str
    request_type: str


SkillRequest = Union[LaunchRequest, IntentRequest, SessionEndedRequest, UnsupportedRequest]


@dataclass(frozen=True)
class DelegateDirective:
    """Ask the host to keep collecting slots for the current intent."""


@dataclass(frozen=True)
class ElicitSlotDirective:
    slot_name: str


Directive = Union[DelegateDirective, ElicitSlotDirective]


@dataclass(frozen=True)
class SkillResponse:
    speech: Speech | None = None
    reprompt: str | None = None
    card_title: str | None = None
    card_body: str | None = None
    end_session: bool = False
    directives: tuple[Directive, ...] = ()

    @classmethod
    def empty(cls) -> "SkillResponse":
        """No body at all; the host closes the session."""

        return cls(end_session=True)

    @property
    def is_empty(self) -> bool:
        return (
            not self.speech
            and self.reprompt is None
            and self.card_title is None
            and not self.directives
        )
