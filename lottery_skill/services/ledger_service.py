"""Load and save ledgers through a store, in their persisted form."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from marshmallow import ValidationError as MarshmallowValidationError

from lottery_skill.errors import NotFoundError, PersistenceLoadError
from lottery_skill.repositories.ledger_repository import LedgerStore
from lottery_skill.schemas.ledger import LedgerSchema
from lottery_skill.services.ledger import Applicant, Ledger, ensure_defaults

logger = logging.getLogger(__name__)

_schema = LedgerSchema()


class LedgerService:
    """Ledger use-cases on top of a ``LedgerStore``."""

    def __init__(self, store: LedgerStore, seed: Sequence[Applicant]) -> None:
        self._store = store
        self._seed = tuple(seed)

    def load(self, session_key: str) -> Ledger:
        """Return a working copy of the ledger for ``session_key``.

        A missing, unreadable or malformed record yields a fresh ledger
        seeded with the default pool.
        """

        try:
            attributes = self._store.load(session_key)
        except PersistenceLoadError as exc:
            logger.warning("Ledger load failed for %s, using defaults: %s", session_key, exc.details)
            attributes = None

        try:
            return _schema.load(ensure_defaults(attributes, self._seed))
        except MarshmallowValidationError as exc:
            logger.warning("Stored ledger for %s is malformed, using defaults: %s", session_key, exc.messages)
            return Ledger.fresh(self._seed)

    def save(self, session_key: str, ledger: Ledger) -> None:
        """Persist ``ledger``. Raises ``PersistenceSaveError`` on failure."""

        self._store.save(session_key, self.dump(ledger))

    def reset(self, session_key: str) -> Ledger:
        """Replace the stored ledger with a fresh, fully seeded one."""

        ledger = Ledger.fresh(self._seed)
        self.save(session_key, ledger)
        logger.info("Ledger reset for %s (%d applicants)", session_key, len(ledger.applicants))
        return ledger

    def get_stored(self, session_key: str) -> Ledger:
        """Return the stored ledger without falling back to defaults."""

        attributes = self._store.load(session_key)
        if attributes is None:
            raise NotFoundError(message=f"No ledger stored for {session_key}")
        return _schema.load(ensure_defaults(attributes, self._seed))

    @staticmethod
    def dump(ledger: Ledger) -> dict[str, Any]:
        return _schema.dump(ledger)
