"""Ledger row for the sql backend.

One row per session key; the serialized ledger is kept as a JSON document
so every backend stores the same shape.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from lottery_skill.models.base import Base


class LedgerRecord(Base):
    """Persisted ledger attributes keyed by session/user id."""

    __tablename__ = "lottery_ledgers"

    session_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    attributes: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
