"""Tracker routes: list/create/update/delete for every registered resource.

Routes are generated from ``resources.REGISTRY`` when the module loads, so
each resource only gets the HTTP verbs its store supports.
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify
from flask_login import login_required

from helpers import current_user_id, json_body, parse_id
from resources import REGISTRY, Operation, Resource

logger = logging.getLogger(__name__)

bp = Blueprint("trackers", __name__)


def _list_view(resource: Resource):
    store = REGISTRY[resource].store

    def view():
        return jsonify([r.to_json() for r in store.list(current_user_id())])
    return view


def _create_view(resource: Resource):
    store = REGISTRY[resource].store

    def view():
        record = store.create(current_user_id(), json_body())
        return jsonify(record.to_json()), 201
    return view


def _update_view(resource: Resource):
    store = REGISTRY[resource].store

    def view(record_id: str):
        rid = parse_id(record_id)
        record = store.update(rid, current_user_id(), json_body())
        return jsonify(record.to_json())
    return view


def _delete_view(resource: Resource):
    store = REGISTRY[resource].store

    def view(record_id: str):
        rid = parse_id(record_id)
        store.delete(rid, current_user_id())
        return "", 204
    return view


_ROUTES = (
    (Operation.LIST, "", "GET", _list_view),
    (Operation.CREATE, "", "POST", _create_view),
    (Operation.UPDATE, "/<record_id>", "PATCH", _update_view),
    (Operation.DELETE, "/<record_id>", "DELETE", _delete_view),
)


def _register_routes() -> None:
    for resource, binding in REGISTRY.items():
        for op, suffix, method, factory in _ROUTES:
            if not binding.supports(op):
                continue
            bp.add_url_rule(
                f"/api/{resource.value}{suffix}",
                endpoint=f"{resource.endpoint}_{op.value}",
                view_func=login_required(factory(resource)),
                methods=[method],
            )
    logger.debug("registered tracker routes for %d resources", len(REGISTRY))


_register_routes()
