"""In-memory draw ledger: applicant pool, winner history and last action.

Pure data and mutation helpers; nothing here touches storage.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Union

from lottery_skill.errors import EmptyHistoryError


Applicant = Union[int, str]

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)

# Key used by the persisted form; see ``schemas.ledger``.
APPLICANTS_KEY = "validApplicants"


class LastActionKind(str, Enum):
    NONE = "NONE"
    AWAITING_REPEAT_CONFIRMATION = "REPEAT"


@dataclass(frozen=True)
class LastAction:
    kind: LastActionKind
    timestamp: datetime

    @classmethod
    def none(cls) -> "LastAction":
        return cls(kind=LastActionKind.NONE, timestamp=EPOCH)


@dataclass(frozen=True)
class WinnerRecord:
    """Winners of one draw, in the order they were drawn."""

    timestamp: datetime
    winners: tuple[Applicant, ...]


@dataclass
class Ledger:
    """Persisted aggregate for one session key.

    Every applicant is either still in ``applicants`` or in exactly one
    ``WinnerRecord`` of ``history``.
    """

    applicants: list[Applicant]
    history: list[WinnerRecord] = field(default_factory=list)
    last_action: LastAction = field(default_factory=LastAction.none)

    @classmethod
    def fresh(cls, seed: Sequence[Applicant]) -> "Ledger":
        return cls(applicants=list(seed))

    def record_draw(self, winners: Sequence[Applicant], at: datetime) -> WinnerRecord:
        """Append a winner record and take the winners out of the pool."""

        record = WinnerRecord(timestamp=at, winners=tuple(winners))
        drawn = set(record.winners)
        self.applicants = [a for a in self.applicants if a not in drawn]
        self.history.append(record)
        return record

    def set_last_action(self, kind: LastActionKind, at: datetime) -> None:
        self.last_action = LastAction(kind=kind, timestamp=at)

    def clear_last_action(self) -> None:
        self.last_action = LastAction.none()

    def last_winners(self) -> tuple[Applicant, ...]:
        if not self.history:
            raise EmptyHistoryError()
        return self.history[-1].winners

    def is_awaiting_repeat(self, now: datetime, window: timedelta) -> bool:
        """True while the last announcement can still be repeated."""

        action = self.last_action
        if action.kind is not LastActionKind.AWAITING_REPEAT_CONFIRMATION:
            return False
        if not self.history:
            return False
        return now - action.timestamp <= window

    def drawn(self) -> Iterable[Applicant]:
        for record in self.history:
            yield from record.winners


def ensure_defaults(attributes: Mapping[str, Any] | None, seed: Sequence[Applicant]) -> dict[str, Any]:
    """Return a copy of persisted ``attributes`` with a seeded pool if missing.

    ``None`` (nothing persisted yet) yields a record holding only the seed pool.
    """

    result = dict(attributes or {})
    if result.get(APPLICANTS_KEY) is None:
        result[APPLICANTS_KEY] = list(seed)
    return result
