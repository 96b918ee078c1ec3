"""Markup-neutral speech: text, timed pauses and emphasis.

Rendering to a concrete dialect lives in ``services.speech_markup``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Pause:
    seconds: int


@dataclass(frozen=True)
class Emphasis:
    content: "Speech"


Segment = Union[Text, Pause, Emphasis]


@dataclass(frozen=True)
class Speech:
    """An immutable sequence of speech segments. Combine with ``+``."""

    segments: tuple[Segment, ...] = ()

    @classmethod
    def text(cls, value: str) -> "Speech":
        return cls((Text(value),))

    @classmethod
    def pause(cls, seconds: int) -> "Speech":
        return cls((Pause(seconds),))

    @classmethod
    def join(cls, separator: "Speech", parts: Iterable["Speech"]) -> "Speech":
        result = cls()
        for i, part in enumerate(parts):
            if i:
                result = result + separator
            result = result + part
        return result

    def emphasized(self) -> "Speech":
        return Speech((Emphasis(self),))

    def __add__(self, other: object) -> "Speech":
        if isinstance(other, str):
            other = Speech.text(other)
        if not isinstance(other, Speech):
            return NotImplemented
        return Speech(self.segments + other.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)

    def plain_text(self) -> str:
        """Text content only, with pauses and emphasis dropped."""

        out: list[str] = []
        for segment in self.segments:
            if isinstance(segment, Text):
                out.append(segment.value)
            elif isinstance(segment, Emphasis):
                out.append(segment.content.plain_text())
        return "".join(out)
