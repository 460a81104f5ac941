"""
Blueprint registration for the placement prep tracker.

All blueprints are registered without URL prefixes; each one declares full
``/api/...`` paths itself.
"""

from __future__ import annotations


def register_blueprints(app):
    from blueprints.core import bp as core_bp
    from blueprints.trackers import bp as trackers_bp
    from blueprints.custom import bp as custom_bp
    from blueprints.dashboard import bp as dashboard_bp

    app.register_blueprint(core_bp)
    app.register_blueprint(trackers_bp)
    app.register_blueprint(custom_bp)
    app.register_blueprint(dashboard_bp)
