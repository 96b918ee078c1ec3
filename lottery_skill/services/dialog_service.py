"""Dialog controller: decides what each inbound request does to the ledger.

The only stored state is the ledger's ``LastAction``. "Awaiting repeat
confirmation" means the last action was an announcement made no longer ago
than the repeat window; anything else is idle.

Every request works on its own freshly loaded ledger and saves at most once,
after the whole transition has been applied. If the save fails the working
copy is dropped, so the next request sees the pre-mutation state.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from lottery_skill.errors import (
    AppError,
    EmptyHistoryError,
    InvalidSlotValueError,
    PersistenceSaveError,
    UnrecognizedRequestError,
)
from lottery_skill.services import prompts
from lottery_skill.services.envelope import (
    DialogState,
    IntentRequest,
    LaunchRequest,
    SessionEndedRequest,
    SkillRequest,
    SkillResponse,
    UnsupportedRequest,
)
from lottery_skill.services.ledger import Ledger, LastActionKind
from lottery_skill.services.ledger_service import LedgerService
from lottery_skill.services.sampler import sample

logger = logging.getLogger(__name__)

DRAW_INTENT = "DrawLotsIntent"
NO_INTENT = "AMAZON.NoIntent"
HELP_INTENT = "AMAZON.HelpIntent"
STOP_INTENTS = frozenset({"AMAZON.CancelIntent", "AMAZON.StopIntent"})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_winner_count(raw: str | None, available: int) -> int:
    """Validate the winner-count slot against the remaining pool size.

    Raises:
        InvalidSlotValueError: not an integer, below 1, or above ``available``.
    """

    try:
        count = int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidSlotValueError(details={"winnerCount": raw}) from exc
    if count < 1:
        raise InvalidSlotValueError(details={"winnerCount": raw, "reason": "must be >= 1"})
    if count > available:
        raise InvalidSlotValueError(
            details={"winnerCount": raw, "reason": f"only {available} applicants remain"}
        )
    return count


class DialogService:
    """Handle one inbound skill request at a time."""

    def __init__(
        self,
        ledgers: LedgerService,
        *,
        skill_name: str,
        repeat_window: timedelta,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ) -> None:
        self._ledgers = ledgers
        self._skill_name = skill_name
        self._repeat_window = repeat_window
        self._clock = clock
        self._rng = rng

    def handle(self, request: SkillRequest) -> SkillResponse:
        try:
            return self._dispatch(request)
        except PersistenceSaveError:
            logger.exception("Ledger save failed for %s", request.session_key)
            return prompts.apology()
        except UnrecognizedRequestError as exc:
            logger.info("Unrecognized request: %s", exc.details)
            return prompts.apology()
        except AppError:
            logger.exception("Request failed")
            return prompts.apology()
        except Exception:
            # Every skill request gets a spoken answer.
            logger.exception("Unexpected error handling %s", type(request).__name__)
            return prompts.apology()

    def _dispatch(self, request: SkillRequest) -> SkillResponse:
        if isinstance(request, LaunchRequest):
            return self._launch(request)
        if isinstance(request, IntentRequest):
            return self._intent(request)
        if isinstance(request, SessionEndedRequest):
            logger.info("Session ended with reason: %s", request.reason)
            return SkillResponse.empty()
        if isinstance(request, UnsupportedRequest):
            raise UnrecognizedRequestError(details={"type": request.request_type})
        raise UnrecognizedRequestError(details={"type": type(request).__name__})

    def _intent(self, request: IntentRequest) -> SkillResponse:
        if request.name == DRAW_INTENT:
            return self._start_draw(request)
        if request.name == NO_INTENT:
            return self._negative_confirmation(request)
        if request.name == HELP_INTENT:
            return prompts.help_prompt(self._skill_name)
        if request.name in STOP_INTENTS:
            return prompts.goodbye()
        raise UnrecognizedRequestError(details={"intent": request.name})

    def _launch(self, request: LaunchRequest) -> SkillResponse:
        ledger = self._ledgers.load(request.session_key)
        logger.info("applicantCount: %d", len(ledger.applicants))
        return prompts.launch(len(ledger.applicants))

    def _start_draw(self, request: IntentRequest) -> SkillResponse:
        now = self._clock()
        ledger = self._ledgers.load(request.session_key)

        if ledger.is_awaiting_repeat(now, self._repeat_window):
            try:
                winners = ledger.last_winners()
            except EmptyHistoryError:
                logger.warning("Repeat requested with empty history; drawing instead")
            else:
                ledger.set_last_action(LastActionKind.AWAITING_REPEAT_CONFIRMATION, now)
                self._ledgers.save(request.session_key, ledger)
                logger.info("Repeating winners: %s", list(winners))
                return prompts.repeat_result(winners)

        if request.dialog_state is not DialogState.COMPLETED:
            return prompts.delegate()

        raw_count = request.slot(prompts.WINNER_COUNT_SLOT)
        try:
            count = parse_winner_count(raw_count, len(ledger.applicants))
        except InvalidSlotValueError as exc:
            logger.info("Invalid winner count: %s", exc.details)
            return prompts.ask_winner_count()

        return self._draw(request.session_key, ledger, count, now)

    def _draw(self, session_key: str, ledger: Ledger, count: int, now: datetime) -> SkillResponse:
        winners, _ = sample(ledger.applicants, count, rng=self._rng)
        ledger.record_draw(winners, now)
        ledger.set_last_action(LastActionKind.AWAITING_REPEAT_CONFIRMATION, now)
        self._ledgers.save(session_key, ledger)
        logger.info("winners: %s (%d applicants remain)", winners, len(ledger.applicants))
        return prompts.draw_result(self._skill_name, winners)

    def _negative_confirmation(self, request: IntentRequest) -> SkillResponse:
        ledger = self._ledgers.load(request.session_key)
        ledger.clear_last_action()
        self._ledgers.save(request.session_key, ledger)
        return SkillResponse.empty()
