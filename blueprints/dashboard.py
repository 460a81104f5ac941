"""Dashboard route: readiness report for the signed-in user."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required

from analytics import build_report
from helpers import current_user_id
from resources import Resource, store_for

bp = Blueprint("dashboard", __name__)


@bp.route("/api/dashboard")
@login_required
def dashboard():
    uid = current_user_id()
    report = build_report(
        dsa=store_for(Resource.DSA).list(uid),
        cs=store_for(Resource.CS).list(uid),
        projects=store_for(Resource.PROJECTS).list(uid),
        mocks=store_for(Resource.MOCKS).list(uid),
        logs=store_for(Resource.LOGS).list(uid),
    )
    return jsonify(report.to_dict())
