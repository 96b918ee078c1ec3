"""Ledger store wiring.

Builds the configured ``LedgerStore`` once per app and keeps it in
``app.extensions["ledger_store"]``. Stores open their own short-lived
sessions/connections per call, so there is no per-request session here.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from lottery_skill.models.base import Base
from lottery_skill.repositories.ledger_repository import (
    DynamoLedgerStore,
    InMemoryLedgerStore,
    LedgerStore,
    MongoLedgerStore,
    SqlLedgerStore,
)

logger = logging.getLogger(__name__)

BACKENDS = ("sql", "mongo", "dynamodb", "memory")


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # Flask may serve a request on a different thread than the one that
        # opened the pooled connection.
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            future=True,
        )
    return create_engine(database_url, pool_pre_ping=True, future=True)


def create_sql_store(database_url: str) -> SqlLedgerStore:
    engine = create_app_engine(database_url)
    # Create tables for convenience (production can run scripts/create_tables.py).
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return SqlLedgerStore(session_factory)


def create_mongo_store(uri: str, db_name: str) -> MongoLedgerStore:
    from pymongo import MongoClient

    client = MongoClient(uri)
    return MongoLedgerStore(client[db_name])


def create_dynamo_store(table_name: str, region: str | None, endpoint_url: str | None) -> DynamoLedgerStore:
    import boto3

    resource = boto3.resource("dynamodb", region_name=region, endpoint_url=endpoint_url)
    return DynamoLedgerStore(resource.Table(table_name))


def create_ledger_store(config: dict) -> LedgerStore:
    """Build the store selected by ``DB_BACKEND``."""

    backend = str(config.get("DB_BACKEND") or "sql").lower().strip()
    if backend == "sql":
        return create_sql_store(str(config["DATABASE_URL"]))
    if backend == "mongo":
        return create_mongo_store(str(config["MONGODB_URI"]), str(config["MONGODB_DB"]))
    if backend == "dynamodb":
        return create_dynamo_store(
            str(config["LEDGER_TABLE"]),
            config.get("AWS_REGION"),
            config.get("DYNAMODB_ENDPOINT_URL"),
        )
    if backend == "memory":
        return InMemoryLedgerStore()
    raise ValueError(f"Unknown DB_BACKEND {backend!r} (expected one of {', '.join(BACKENDS)})")


def init_db(app: Flask, store: LedgerStore | None = None) -> None:
    """Attach the ledger store to the app."""

    if store is None:
        store = create_ledger_store(app.config)
    logger.info("Ledger store: %s", type(store).__name__)
    app.extensions["ledger_store"] = store


def get_ledger_store() -> LedgerStore:
    """Get the current app's ledger store."""

    store: LedgerStore | None = current_app.extensions.get("ledger_store")
    if store is None:
        raise RuntimeError("Ledger store not initialized")
    return store
