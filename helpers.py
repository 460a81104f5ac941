"""
Shared helpers used across blueprints.

Kept apart from app.py to break circular dependencies.
"""

from __future__ import annotations

from typing import Any

from flask import abort, jsonify, make_response, request
from flask_login import current_user

from db_stores import ValidationFailed
from schemas import MAX_SQL_INT


def current_user_id() -> int:
    """Return the authenticated principal's id. Routes are login_required."""
    return current_user.id


def parse_id(raw: str) -> int:
    """Turn a URL segment into a record id or abort with 400."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if not 1 <= value <= MAX_SQL_INT:
        abort(make_response(jsonify({"message": "Invalid ID"}), 400))
    return value


def json_body() -> dict[str, Any]:
    """The request's JSON object, or a validation failure on ``body``."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailed([{"field": "body", "message": "Request body must be a JSON object"}])
    return payload
