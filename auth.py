"""
User Authentication: Flask-Login blueprint.

Provides register, login, logout and current-user JSON routes.
Uses werkzeug.security for password hashing. A user is recognised either
by the Flask-Login session cookie or by an ``Authorization: Bearer`` token
signed with itsdangerous. Tokens are stateless: logout ends the cookie
session, and a client holding a token simply discards it.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_login import LoginManager, UserMixin, current_user, login_required, login_user, logout_user
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from audit import log_event
from db_stores import UserStore, validate
from extensions import limiter
from helpers import json_body
from schemas import Credentials

TOKEN_SALT = "placement-prep-auth-token"

auth_bp = Blueprint("auth", __name__)
login_manager = LoginManager()


class User(UserMixin):
    """Wraps a DB user row for Flask-Login."""

    def __init__(self, id: int, username: str):
        self.id = id
        self.username = username

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username}

    @staticmethod
    def get(user_id: int):
        record = UserStore.get(user_id)
        if record:
            return User(record.id, record.username)
        return None


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(user: User) -> str:
    return _serializer().dumps({"uid": user.id, "username": user.username})


def verify_token(token: str) -> int | None:
    """Return the user id carried by a valid, unexpired token, else None."""
    try:
        payload = _serializer().loads(token, max_age=current_app.config.get("TOKEN_MAX_AGE"))
    except (SignatureExpired, BadSignature):
        return None
    uid = payload.get("uid") if isinstance(payload, dict) else None
    return uid if isinstance(uid, int) else None


@login_manager.user_loader
def load_user(user_id):
    return User.get(int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    header = req.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    uid = verify_token(header[len("Bearer "):].strip())
    return User.get(uid) if uid is not None else None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"message": "Authentication required"}), 401


def _credentials() -> Credentials:
    return validate(Credentials, json_body())


def _session_response(user: User, status: int):
    login_user(user, remember=True)
    return jsonify({"token": issue_token(user), "user": user.to_dict()}), status


@auth_bp.route("/api/register", methods=["POST"])
@limiter.limit("10 per hour")
def register():
    creds = _credentials()

    if UserStore.get_by_username(creds.username):
        return jsonify({"message": "Username already exists"}), 400

    record = UserStore.create(creds.username, generate_password_hash(creds.password))
    log_event("register", record.id, f"username={record.username}")
    return _session_response(User(record.id, record.username), 201)


@auth_bp.route("/api/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    creds = _credentials()

    row = UserStore.get_by_username(creds.username)
    if not row or not check_password_hash(row["password_hash"], creds.password):
        log_event("login_failed", row["id"] if row else None, f"username={creds.username}")
        return jsonify({"message": "Invalid username or password"}), 401

    log_event("login_success", row["id"])
    return _session_response(User(row["id"], row["username"]), 200)


@auth_bp.route("/api/logout", methods=["POST"])
def logout():
    uid = current_user.id if current_user.is_authenticated else None
    log_event("logout", uid)
    logout_user()
    return jsonify({"message": "Logged out"})


@auth_bp.route("/api/user")
@login_required
def me():
    return jsonify(current_user.to_dict())
