"""ORM models."""

from lottery_skill.models.ledger_record import LedgerRecord

__all__ = ["LedgerRecord"]
