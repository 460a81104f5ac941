"""
Placement Prep Tracker: Flask Web Application

JSON API for tracking interview preparation: DSA and CS topics, projects,
mock interviews, daily study logs, custom trackers and a readiness dashboard.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

import database
from auth import auth_bp, login_manager
from blueprints import register_blueprints
from db_stores import NotFoundError, OperationNotSupported, ValidationFailed
from extensions import limiter
from logging_config import init_logging

logger = logging.getLogger(__name__)


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    if test_config is not None:
        from config import TestingConfig
        app.config.from_object(TestingConfig)
        app.config.update(test_config)
    else:
        from config import config_by_name
        env = os.environ.get("FLASK_ENV", "development")
        cfg = config_by_name.get(env, config_by_name["development"])
        app.config.from_object(cfg)
        if hasattr(cfg, "validate"):
            cfg.validate()

    app.secret_key = app.config.get("SECRET_KEY", os.environ.get("SECRET_KEY", "dev-key-change-in-production"))

    # Structured logging
    init_logging(app)

    # Register database teardown
    database.init_app(app)

    # Rate limiter (disabled in testing)
    limiter.init_app(app)
    if app.config.get("TESTING"):
        limiter.enabled = False

    # Register auth blueprint and login manager
    app.register_blueprint(auth_bp)
    login_manager.init_app(app)

    # Register all application blueprints
    register_blueprints(app)

    _register_error_handlers(app)

    # Security headers
    @app.after_request
    def set_security_headers(response: Response) -> Response:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        if not app.debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationFailed)
    def validation_failed(exc: ValidationFailed):
        return jsonify({"message": "Validation failed", "errors": exc.errors}), 400

    @app.errorhandler(NotFoundError)
    def not_found(exc: NotFoundError):
        return jsonify({"message": exc.message}), 404

    @app.errorhandler(OperationNotSupported)
    def not_supported(exc: OperationNotSupported):
        return jsonify({"message": str(exc)}), 405

    @app.errorhandler(Exception)
    def internal_error(exc: Exception):
        if isinstance(exc, HTTPException):
            if exc.response is not None:
                return exc.response
            return jsonify({"message": exc.description or exc.name}), exc.code
        logger.exception("Unhandled error: %s", exc)
        body = {"message": "Internal Server Error"}
        if app.config.get("EXPOSE_ERRORS"):
            body["error"] = str(exc)
        return jsonify(body), 500


if __name__ == "__main__":
    create_app().run(debug=True, port=5000)
