"""Flask application package for the lottery skill."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from flask import Flask

if TYPE_CHECKING:
    from lottery_skill.repositories.ledger_repository import LedgerStore


def create_app(config: type | None = None, *, store: LedgerStore | None = None) -> Flask:
    """Application factory.

    Args:
        config: Config class to load; defaults to the one selected by APP_ENV.
        store: Ledger store to use instead of building one from config.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lottery_skill.config import get_config
    from lottery_skill.db import init_db
    from lottery_skill.error_handlers import register_error_handlers
    from lottery_skill.logging_config import configure_logging
    from lottery_skill.routes.health import health_bp
    from lottery_skill.routes.ledgers import ledgers_bp
    from lottery_skill.routes.skill import skill_bp

    app = Flask(__name__)
    app.config.from_object(config or get_config())

    configure_logging(app)
    init_db(app, store=store)
    init_services(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(skill_bp)
    app.register_blueprint(ledgers_bp)

    return app


def init_services(app: Flask) -> None:
    """Build the ledger and dialog services from config."""

    from lottery_skill.services.dialog_service import DialogService
    from lottery_skill.services.ledger_service import LedgerService

    ledgers = LedgerService(
        app.extensions["ledger_store"],
        seed=tuple(app.config["SEED_APPLICANTS"]),
    )
    app.extensions["ledger_service"] = ledgers
    app.extensions["dialog_service"] = DialogService(
        ledgers,
        skill_name=str(app.config["SKILL_NAME"]),
        repeat_window=timedelta(seconds=int(app.config["REPEAT_WINDOW_SECONDS"])),
    )
