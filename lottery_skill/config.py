"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


DEFAULT_SEED_APPLICANTS: tuple[int, ...] = tuple(range(1, 11))


def resolve_database_url() -> str:
    """Resolve DB connection string for the sql ledger backend.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")

    if host and user and database:
        try:
            port = int(os.getenv("PGPORT") or 5432)
        except ValueError:
            port = 5432

        sslmode = os.getenv("PGSSLMODE", "require")
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=port,
            database=database,
            query={"sslmode": sslmode} if sslmode else {},
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./lottery.db"


def parse_seed_applicants(raw: str | None) -> tuple[int | str, ...]:
    """Parse a comma-separated applicant list.

    Numeric tokens become ints so the default pool matches ``1..10``.
    Blank tokens are dropped and duplicates keep their first position.
    """

    if raw is None or not raw.strip():
        return DEFAULT_SEED_APPLICANTS

    applicants: list[int | str] = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        value: int | str = int(token) if token.isdigit() else token
        if value not in applicants:
            applicants.append(value)

    if not applicants:
        return DEFAULT_SEED_APPLICANTS
    return tuple(applicants)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name) or default)
    except ValueError:
        return default


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DB_BACKEND: str = (
        os.getenv("DB_BACKEND")
        or ("mongo" if os.getenv("MONGODB_URI") else "sql")
    ).lower().strip()  # "sql" | "mongo" | "dynamodb" | "memory"

    # SQL backend
    DATABASE_URL: str = resolve_database_url()

    # Mongo backend
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "lottery_skill")

    # DynamoDB backend
    LEDGER_TABLE: str = os.getenv("LEDGER_TABLE", "LotteryTable")
    AWS_REGION: str | None = os.getenv("AWS_REGION")
    DYNAMODB_ENDPOINT_URL: str | None = os.getenv("DYNAMODB_ENDPOINT_URL")

    # Draw engine
    SKILL_NAME: str = os.getenv("SKILL_NAME", "Lottery")
    SEED_APPLICANTS: tuple[int | str, ...] = parse_seed_applicants(os.getenv("SEED_APPLICANTS"))
    REPEAT_WINDOW_SECONDS: int = _int_env("REPEAT_WINDOW_SECONDS", 60)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Testing configuration. Keeps ledgers in process memory."""

    TESTING: bool = True
    DEBUG: bool = False
    DB_BACKEND: str = "memory"
    SEED_APPLICANTS: tuple[int | str, ...] = DEFAULT_SEED_APPLICANTS
    REPEAT_WINDOW_SECONDS: int = 60


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
