"""Repository layer for ledger persistence.

Every backend stores the serialized ledger (a plain JSON-compatible dict)
under a session key. ``load`` returns ``None`` when nothing is stored.
Backend exceptions are wrapped in ``PersistenceLoadError`` /
``PersistenceSaveError``.
"""

from __future__ import annotations

import copy
from decimal import Decimal
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from lottery_skill.errors import PersistenceLoadError, PersistenceSaveError
from lottery_skill.models.ledger_record import LedgerRecord


Attributes = dict[str, Any]


class LedgerStore:
    """Load/save serialized ledgers by session key."""

    def load(self, session_key: str) -> Attributes | None:
        raise NotImplementedError

    def save(self, session_key: str, attributes: Attributes) -> None:
        raise NotImplementedError


class InMemoryLedgerStore(LedgerStore):
    """Process-local store for development and tests."""

    def __init__(self) -> None:
        self._records: dict[str, Attributes] = {}

    def load(self, session_key: str) -> Attributes | None:
        record = self._records.get(session_key)
        return copy.deepcopy(record) if record is not None else None

    def save(self, session_key: str, attributes: Attributes) -> None:
        self._records[session_key] = copy.deepcopy(attributes)


class SqlLedgerStore(LedgerStore):
    """One ``lottery_ledgers`` row per session key."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def load(self, session_key: str) -> Attributes | None:
        try:
            with self._session_factory() as session:
                row = session.get(LedgerRecord, session_key)
                return dict(row.attributes) if row is not None else None
        except SQLAlchemyError as exc:
            raise PersistenceLoadError(details=str(exc)) from exc

    def save(self, session_key: str, attributes: Attributes) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(LedgerRecord, session_key)
                if row is None:
                    session.add(LedgerRecord(session_key=session_key, attributes=attributes))
                else:
                    # Assign a new object so the JSON column is flagged dirty.
                    row.attributes = dict(attributes)
        except SQLAlchemyError as exc:
            raise PersistenceSaveError(details=str(exc)) from exc


class MongoLedgerStore(LedgerStore):
    """Documents shaped ``{"_id": session_key, "attributes": {...}}``."""

    def __init__(self, db: Any, collection: str = "ledgers") -> None:
        self._collection = db[collection]

    def load(self, session_key: str) -> Attributes | None:
        try:
            doc = self._collection.find_one({"_id": session_key})
        except PyMongoError as exc:
            raise PersistenceLoadError(details=str(exc)) from exc
        if not doc:
            return None
        return dict(doc.get("attributes") or {})

    def save(self, session_key: str, attributes: Attributes) -> None:
        try:
            self._collection.replace_one(
                {"_id": session_key},
                {"_id": session_key, "attributes": attributes},
                upsert=True,
            )
        except PyMongoError as exc:
            raise PersistenceSaveError(details=str(exc)) from exc


def from_dynamo(value: Any) -> Any:
    """Convert DynamoDB ``Decimal`` numbers back to int/float, recursively."""

    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value


class DynamoLedgerStore(LedgerStore):
    """Items shaped ``{"id": session_key, "attributes": {...}}``."""

    def __init__(self, table: Any) -> None:
        self._table = table

    def load(self, session_key: str) -> Attributes | None:
        try:
            resp = self._table.get_item(Key={"id": session_key}, ConsistentRead=True)
        except (BotoCoreError, ClientError) as exc:
            raise PersistenceLoadError(details=str(exc)) from exc
        item = resp.get("Item")
        if not item:
            return None
        return from_dynamo(item.get("attributes") or {})

    def save(self, session_key: str, attributes: Attributes) -> None:
        try:
            self._table.put_item(Item={"id": session_key, "attributes": attributes})
        except (BotoCoreError, ClientError) as exc:
            raise PersistenceSaveError(details=str(exc)) from exc
