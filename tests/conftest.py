"""
Test fixtures for the placement prep tracker.

Provides app, client, auth_client, other_client, token and db fixtures with
file-based SQLite. Two users are seeded: alice (id 1) and bob (id 2).
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest
from werkzeug.security import generate_password_hash

sys.path.insert(0, str(Path(__file__).parent.parent))

PASSWORD = "testpass123"


@pytest.fixture
def app(tmp_path):
    """Create app with file-based SQLite for testing."""
    from app import create_app

    db_file = str(tmp_path / "test.db")
    app = create_app({
        "TESTING": True,
        "DATABASE": db_file,
        "SECRET_KEY": "test-secret-key",
    })

    with app.app_context():
        from database import init_db, run_migrations, get_db

        init_db()
        run_migrations()

        db = get_db()
        for uid, username in ((1, "alice"), (2, "bob")):
            db.execute(
                "INSERT INTO users (id, username, password_hash, created_at) VALUES (?, ?, ?, ?)",
                (uid, username, generate_password_hash(PASSWORD), datetime.now().isoformat()),
            )
        db.commit()

    yield app


@pytest.fixture
def client(app):
    """Unauthenticated test client."""
    return app.test_client()


def _logged_in(app, username):
    client = app.test_client()
    resp = client.post("/api/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def auth_client(app):
    """Session-authenticated test client (alice, id 1)."""
    return _logged_in(app, "alice")


@pytest.fixture
def other_client(app):
    """Session-authenticated test client for a second principal (bob, id 2)."""
    return _logged_in(app, "bob")


@pytest.fixture
def token(app):
    """Bearer token for alice, obtained through the login route."""
    resp = app.test_client().post("/api/login", json={"username": "alice", "password": PASSWORD})
    return resp.get_json()["token"]


@pytest.fixture
def db(app):
    """Direct database access for store tests."""
    with app.app_context():
        from database import get_db
        yield get_db()
