"""Core routes: health checks."""

from __future__ import annotations

import logging
import time

from flask import Blueprint, jsonify

from database import get_db

logger = logging.getLogger(__name__)

bp = Blueprint("core", __name__)

_start_time = time.time()


@bp.route("/health")
def health():
    uptime = int(time.time() - _start_time)
    return jsonify({"status": "ok", "uptime_seconds": uptime})


@bp.route("/ready")
def ready():
    try:
        get_db().execute("SELECT 1").fetchone()
        return jsonify({"status": "ready"}), 200
    except Exception as exc:
        logger.error("Readiness check failed: %s", exc, exc_info=True)
        return jsonify({"status": "not_ready"}), 503


@bp.route("/live")
def live():
    return jsonify({"status": "alive"}), 200
