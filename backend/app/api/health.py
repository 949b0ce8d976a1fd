"""Health check endpoint."""

from flask import Blueprint, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health() -> tuple[object, int]:
    """Return the service liveness status without touching any store."""
    return jsonify({"ok": True}), 200
