"""Health check routes."""

from __future__ import annotations

from flask import Blueprint, current_app

from lottery_skill.db import get_ledger_store
from lottery_skill.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint."""

    return ok(
        {
            "status": "ok",
            "backend": current_app.config.get("DB_BACKEND"),
            "store": type(get_ledger_store()).__name__,
        }
    )
