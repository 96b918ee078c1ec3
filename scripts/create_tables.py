"""Create ledger storage for the configured backend.

Reads settings from .env / environment:
  DB_BACKEND=sql       creates the ``lottery_ledgers`` table at DATABASE_URL
  DB_BACKEND=dynamodb  creates the LEDGER_TABLE table (partition key ``id``)

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import logging
import os
import pathlib
import sys

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lottery_skill.config import resolve_database_url
from lottery_skill.db import create_app_engine
from lottery_skill.models.base import Base

# Import models so they register with Base.metadata
from lottery_skill import models  # noqa: F401


logger = logging.getLogger(__name__)


def create_sql_tables() -> None:
    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)
    logger.info("SQL tables created (or already exist) at %s", engine.url.render_as_string())


def create_dynamo_table() -> None:
    import boto3
    from botocore.exceptions import ClientError

    table_name = os.getenv("LEDGER_TABLE", "LotteryTable")
    dynamodb = boto3.resource(
        "dynamodb",
        region_name=os.getenv("AWS_REGION"),
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL"),
    )
    try:
        table = dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") != "ResourceInUseException":
            raise
        logger.info("DynamoDB table %s already exists", table_name)
        return
    table.wait_until_exists()
    logger.info("DynamoDB table %s created", table_name)


def main() -> int:
    """Create storage for the selected backend."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    backend = (os.getenv("DB_BACKEND") or ("mongo" if os.getenv("MONGODB_URI") else "sql")).lower().strip()
    if backend == "sql":
        create_sql_tables()
    elif backend == "dynamodb":
        create_dynamo_table()
    else:
        logger.info("Backend %s needs no setup", backend)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
