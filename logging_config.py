"""
Logging setup for the tracker API.

Every record leaving the root handler carries ``request_id`` and ``user_id``
so a line can be traced to the request and the signed-in account that caused
it. Records emitted outside a request get ``-`` for both.

Formats:
  text  ``2026-01-02 10:00:00 [INFO] trackers [3f2a9c1b7d0e u=1]: ...``
  json  one object per line: timestamp, level, logger, message, request_id,
        user_id and, when present, exception
"""

from __future__ import annotations

import json
import logging
import time
import uuid

from flask import Flask, g, has_request_context, request

ACCESS_LOGGER = "placement_prep.access"
REQUEST_ID_HEADER = "X-Request-ID"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s u=%(user_id)s]: %(message)s"


def _signed_in_id() -> str:
    # Reads only a user Flask-Login has already loaded; never calls the user loader.
    user = g.get("_login_user")
    if user is not None and getattr(user, "is_authenticated", False):
        return str(user.get_id())
    return "-"


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request id and user id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_id = getattr(record, "request_id", None) or g.get("request_id", "-")
            record.user_id = getattr(record, "user_id", None) or _signed_in_id()
        else:
            record.request_id = getattr(record, "request_id", "-")
            record.user_id = getattr(record, "user_id", "-")
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
            "user_id": getattr(record, "user_id", "-"),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def build_handler(log_format: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def init_logging(app: Flask) -> None:
    """Install the root handler and the request id / access log hooks."""
    level = app.config.get("LOG_LEVEL", "INFO")
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(build_handler(app.config.get("LOG_FORMAT", "text")))

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    access = logging.getLogger(ACCESS_LOGGER)

    @app.before_request
    def _start_request():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_access(response):
        request_id = g.get("request_id", "-")
        elapsed_ms = (time.perf_counter() - g.get("request_start", time.perf_counter())) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        user_id = _signed_in_id()
        access.info(
            "%s %s -> %s in %.0fms (user %s)",
            request.method, request.path, response.status_code, elapsed_ms, user_id,
            extra={"request_id": request_id, "user_id": user_id},
        )
        return response
