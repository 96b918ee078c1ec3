"""Ledger inspection and explicit reset."""

from __future__ import annotations

from flask import Blueprint, current_app

from lottery_skill.services.ledger import Ledger
from lottery_skill.services.ledger_service import LedgerService
from lottery_skill.utils.responses import ok


ledgers_bp = Blueprint("ledgers", __name__)


def get_ledger_service() -> LedgerService:
    return current_app.extensions["ledger_service"]


def _view(session_key: str, ledger: Ledger) -> dict:
    return {
        "session_key": session_key,
        "applicant_count": len(ledger.applicants),
        "drawn_count": sum(1 for _ in ledger.drawn()),
        "ledger": LedgerService.dump(ledger),
    }


@ledgers_bp.get("/ledgers/<session_key>")
def get_ledger(session_key: str):
    """Return the stored ledger for a session key."""

    ledger = get_ledger_service().get_stored(session_key)
    return ok(_view(session_key, ledger))


@ledgers_bp.post("/ledgers/<session_key>/reset")
def reset_ledger(session_key: str):
    """Refill the applicant pool from the seed list and clear history."""

    ledger = get_ledger_service().reset(session_key)
    return ok(_view(session_key, ledger))
