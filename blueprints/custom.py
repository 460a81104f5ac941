"""Custom tracker routes nested under a section."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required

from helpers import current_user_id, json_body, parse_id
from resources import Resource, store_for

bp = Blueprint("custom", __name__)


@bp.route("/api/custom/sections/<section_id>/topics")
@login_required
def section_topics(section_id):
    sid = parse_id(section_id)
    topics = store_for(Resource.CUSTOM_TOPICS).list_for_section(current_user_id(), sid)
    return jsonify([t.to_json() for t in topics])


@bp.route("/api/custom/sections/<section_id>/topics", methods=["POST"])
@login_required
def add_section_topic(section_id):
    sid = parse_id(section_id)
    payload = {**json_body(), "sectionId": sid}
    payload.pop("section_id", None)
    topic = store_for(Resource.CUSTOM_TOPICS).create(current_user_id(), payload)
    return jsonify(topic.to_json()), 201
