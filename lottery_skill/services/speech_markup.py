"""Render abstract skill responses into the platform's JSON (SSML speech)."""

from __future__ import annotations

from typing import Any
from xml.sax.saxutils import escape

from lottery_skill.services.envelope import (
    DelegateDirective,
    Directive,
    ElicitSlotDirective,
    SkillResponse,
)
from lottery_skill.services.speech import Emphasis, Pause, Speech, Text

RESPONSE_VERSION = "1.0"


def _render_segments(speech: Speech) -> str:
    out: list[str] = []
    for segment in speech.segments:
        if isinstance(segment, Text):
            out.append(escape(segment.value))
        elif isinstance(segment, Pause):
            out.append(f'<break time="{int(segment.seconds)}s"/>')
        elif isinstance(segment, Emphasis):
            out.append(f'<prosody volume="x-loud">{_render_segments(segment.content)}</prosody>')
        else:
            raise TypeError(f"Unknown speech segment: {segment!r}")
    return "".join(out)


def to_ssml(speech: Speech | str) -> str:
    if isinstance(speech, str):
        speech = Speech.text(speech)
    return f"<speak>{_render_segments(speech)}</speak>"


def _render_directive(directive: Directive) -> dict[str, Any]:
    if isinstance(directive, DelegateDirective):
        return {"type": "Dialog.Delegate"}
    if isinstance(directive, ElicitSlotDirective):
        return {"type": "Dialog.ElicitSlot", "slotToElicit": directive.slot_name}
    raise TypeError(f"Unknown directive: {directive!r}")


def render_response(response: SkillResponse) -> dict[str, Any]:
    """Build the response envelope for ``response``."""

    if response.is_empty:
        return {"version": RESPONSE_VERSION, "response": {}}

    body: dict[str, Any] = {}
    if response.speech:
        body["outputSpeech"] = {"type": "SSML", "ssml": to_ssml(response.speech)}
    if response.reprompt is not None:
        body["reprompt"] = {"outputSpeech": {"type": "SSML", "ssml": to_ssml(response.reprompt)}}
    if response.card_title is not None:
        body["card"] = {
            "type": "Simple",
            "title": response.card_title,
            "content": response.card_body or "",
        }
    if response.directives:
        body["directives"] = [_render_directive(d) for d in response.directives]
        # Dialog directives require an open session.
        body["shouldEndSession"] = False
    else:
        body["shouldEndSession"] = bool(response.end_session)

    return {"version": RESPONSE_VERSION, "response": body}
