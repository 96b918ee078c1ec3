"""Schemas for the persisted ledger form.

Attribute names and epoch-millisecond timestamps match records written by
earlier releases of the skill, so existing records keep loading.
"""

from __future__ import annotations

from datetime import datetime, timezone

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validates, validates_schema

from lottery_skill.services.ledger import LastAction, LastActionKind, Ledger, WinnerRecord


class EpochMillis(fields.Field):
    """Timezone-aware datetime stored as integer epoch milliseconds."""

    def _serialize(self, value, attr, obj, **kwargs):  # type: ignore[no-untyped-def]
        if value is None:
            return None
        return int(value.timestamp() * 1000)

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, bool):
            raise ValidationError("Timestamp must be epoch milliseconds.")
        try:
            millis = int(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError("Timestamp must be epoch milliseconds.") from exc
        try:
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValidationError("Timestamp is out of range.") from exc


class Identifier(fields.Raw):
    """Applicant identifier: an int or a non-empty string."""

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValidationError("Applicant must be an integer or a string.")
        if isinstance(value, str) and not value:
            raise ValidationError("Applicant must not be empty.")
        return value


class WinnerRecordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    timestamp = EpochMillis(required=True)
    winners = fields.List(Identifier(), required=True)

    @post_load
    def _make_record(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return WinnerRecord(timestamp=data["timestamp"], winners=tuple(data["winners"]))


class LastActionSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    kind = fields.Enum(LastActionKind, by_value=True, required=True, data_key="state")
    timestamp = EpochMillis(required=True)

    @post_load
    def _make_action(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return LastAction(kind=data["kind"], timestamp=data["timestamp"])


class LedgerSchema(Schema):
    """Persisted ledger attributes."""

    class Meta:
        unknown = EXCLUDE

    applicants = fields.List(Identifier(), required=True, data_key="validApplicants")
    history = fields.List(
        fields.Nested(WinnerRecordSchema),
        required=False,
        load_default=list,
        data_key="winnerHistory",
    )
    last_action = fields.Nested(
        LastActionSchema,
        required=False,
        load_default=None,
        allow_none=True,
        data_key="lastState",
    )

    @validates("applicants")
    def _validate_unique(self, value, **kwargs):  # type: ignore[no-untyped-def]
        if len(value) != len(set(value)):
            raise ValidationError("Applicants must be unique")

    @validates_schema
    def _validate_drawn_once(self, data, **kwargs):  # type: ignore[no-untyped-def]
        # Each identifier is either still in the pool or in exactly one record.
        seen = set(data.get("applicants") or [])
        for record in data.get("history") or []:
            for winner in record.winners:
                if winner in seen:
                    raise ValidationError(
                        {"winnerHistory": [f"Applicant {winner!r} appears more than once"]}
                    )
                seen.add(winner)

    @post_load
    def _make_ledger(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return Ledger(
            applicants=list(data["applicants"]),
            history=list(data.get("history") or []),
            last_action=data.get("last_action") or LastAction.none(),
        )
