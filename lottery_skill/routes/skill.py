"""Voice platform webhook. No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from lottery_skill.schemas.skill_request import SkillEnvelopeSchema
from lottery_skill.services.dialog_service import DialogService
from lottery_skill.services.speech_markup import render_response


skill_bp = Blueprint("skill", __name__)

_envelope_schema = SkillEnvelopeSchema()


def get_dialog_service() -> DialogService:
    return current_app.extensions["dialog_service"]


@skill_bp.post("/skill")
def handle_skill_request():
    payload = request.get_json(silent=True) or {}
    skill_request = _envelope_schema.load(payload)

    response = get_dialog_service().handle(skill_request)
    return jsonify(render_response(response))
