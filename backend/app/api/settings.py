"""Admin endpoints for reading and updating runtime settings."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from ..errors import BadRequestError
from ..storage import get_metadata_store
from ..utils.settings import encode_setting_value

bp = Blueprint("settings", __name__)


@bp.get("/settings")
def get_settings() -> tuple[object, int]:
    return jsonify(get_metadata_store().list_settings()), HTTPStatus.OK


@bp.put("/settings")
def update_setting() -> tuple[object, int]:
    payload = request.get_json(force=True, silent=True) or {}
    if not isinstance(payload, dict):
        raise BadRequestError("Body must be a JSON object")

    key = payload.get("key")
    if not isinstance(key, str) or not key.strip():
        raise BadRequestError("Missing key")

    key = key.strip()
    value = encode_setting_value(payload.get("value"))
    get_metadata_store().set_setting(key, value)
    current_app.logger.info("Setting %s updated", key)
    return jsonify({"ok": True}), HTTPStatus.OK
