"""Schemas for the voice platform's inbound request envelope."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validates_schema

from lottery_skill.services.envelope import (
    DialogState,
    IntentRequest,
    LaunchRequest,
    SessionEndedRequest,
    SkillRequest,
    UnsupportedRequest,
)


class _Lenient(Schema):
    class Meta:
        unknown = EXCLUDE


class UserSchema(_Lenient):
    user_id = fields.String(required=True, data_key="userId")


class SessionSchema(_Lenient):
    session_id = fields.String(required=False, data_key="sessionId")
    user = fields.Nested(UserSchema, required=False)


class SystemSchema(_Lenient):
    user = fields.Nested(UserSchema, required=False)


class ContextSchema(_Lenient):
    system = fields.Nested(SystemSchema, required=False, data_key="System")


class SlotSchema(_Lenient):
    name = fields.String(required=False)
    value = fields.String(required=False, allow_none=True, load_default=None)


class IntentSchema(_Lenient):
    name = fields.String(required=True)
    slots = fields.Dict(
        keys=fields.String(),
        values=fields.Nested(SlotSchema),
        required=False,
        load_default=dict,
    )


class RequestSchema(_Lenient):
    type = fields.String(required=True)
    request_id = fields.String(required=False, data_key="requestId")
    dialog_state = fields.Enum(
        DialogState,
        by_value=True,
        required=False,
        load_default=None,
        data_key="dialogState",
    )
    intent = fields.Nested(IntentSchema, required=False, load_default=None)
    reason = fields.String(required=False, load_default=None)

    @validates_schema
    def _validate_intent(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if data.get("type") == "IntentRequest" and data.get("intent") is None:
            raise ValidationError({"intent": ["Required for IntentRequest"]})


class SkillEnvelopeSchema(_Lenient):
    """Validate an inbound envelope and turn it into a typed request."""

    version = fields.String(required=False)
    session = fields.Nested(SessionSchema, required=False, load_default=None)
    context = fields.Nested(ContextSchema, required=False, load_default=None)
    request = fields.Nested(RequestSchema, required=True)

    @staticmethod
    def _session_key(data: dict) -> str | None:
        system_user = ((data.get("context") or {}).get("system") or {}).get("user") or {}
        session_user = (data.get("session") or {}).get("user") or {}
        return system_user.get("user_id") or session_user.get("user_id")

    @validates_schema
    def _validate_user(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if not self._session_key(data):
            raise ValidationError({"session": ["A user id is required (session.user.userId)"]})

    @post_load
    def _make_request(self, data, **kwargs) -> SkillRequest:  # type: ignore[no-untyped-def]
        key = str(self._session_key(data))
        req = data["request"]
        kind = req["type"]

        if kind == "LaunchRequest":
            return LaunchRequest(session_key=key)
        if kind == "IntentRequest":
            intent = req["intent"]
            slots = {name: slot.get("value") for name, slot in (intent.get("slots") or {}).items()}
            return IntentRequest(
                session_key=key,
                name=intent["name"],
                slots=slots,
                dialog_state=req.get("dialog_state"),
            )
        if kind == "SessionEndedRequest":
            return SessionEndedRequest(session_key=key, reason=req.get("reason"))
        return UnsupportedRequest(session_key=key, request_type=kind)
