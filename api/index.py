"""Serverless entry point: exposes the WSGI ``app`` built by the factory."""

import logging

from app import create_app

try:
    app = create_app()
except Exception:
    logging.getLogger(__name__).exception("Failed to build the application")
    raise
