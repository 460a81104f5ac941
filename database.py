"""
Database layer for the placement preparation tracker.

Raw sqlite3 with WAL mode and parameterized queries by default; PostgreSQL
through pg_compat when DATABASE is a postgres URL. A schema_version table
handles migrations.
"""

from __future__ import annotations

import atexit
import fcntl
import sqlite3
from datetime import datetime
from pathlib import Path

from flask import current_app, g

from extensions import PoolManager
from pg_compat import is_postgres_url

DEFAULT_DATABASE = str(Path(__file__).parent / "placement_prep.db")


SCHEMA = """
-- Migration tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL,
    applied_at TEXT NOT NULL
);

-- Users
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ''
);

-- DSA tracker
CREATE TABLE IF NOT EXISTS dsa_topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    topic TEXT NOT NULL,
    category TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'not_started'
);

-- CS fundamentals tracker
CREATE TABLE IF NOT EXISTS cs_topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    subject TEXT NOT NULL,
    topic TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'not_started'
);

-- Projects
CREATE TABLE IF NOT EXISTS projects (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    tech_stack TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'planned',
    is_interview_ready BOOLEAN NOT NULL DEFAULT FALSE
);

-- Mock interviews (date is an ISO timestamp)
CREATE TABLE IF NOT EXISTS mock_interviews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    date TEXT NOT NULL,
    topics_covered TEXT NOT NULL,
    self_rating INTEGER NOT NULL,
    feedback TEXT
);

-- Daily preparation log (date is YYYY-MM-DD)
CREATE TABLE IF NOT EXISTS daily_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    date TEXT NOT NULL,
    content TEXT NOT NULL,
    hours_spent INTEGER NOT NULL
);

-- Custom trackers
CREATE TABLE IF NOT EXISTS custom_sections (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    icon TEXT NOT NULL DEFAULT 'BookOpen'
);

CREATE TABLE IF NOT EXISTS custom_topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    section_id INTEGER NOT NULL REFERENCES custom_sections(id) ON DELETE CASCADE,
    topic TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'not_started'
);

-- Audit trail for auth events
CREATE TABLE IF NOT EXISTS audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER,
    action TEXT NOT NULL,
    detail TEXT NOT NULL DEFAULT '',
    ip_address TEXT NOT NULL DEFAULT '',
    user_agent TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);
"""

# Versioned migrations: (version, sql). Version 1 is the base SCHEMA.
MIGRATIONS = [
    (2, """
        CREATE INDEX IF NOT EXISTS idx_dsa_topics_user ON dsa_topics(user_id);
        CREATE INDEX IF NOT EXISTS idx_cs_topics_user ON cs_topics(user_id);
        CREATE INDEX IF NOT EXISTS idx_projects_user ON projects(user_id);
    """),
    (3, """
        CREATE INDEX IF NOT EXISTS idx_mock_interviews_user_date ON mock_interviews(user_id, date);
        CREATE INDEX IF NOT EXISTS idx_daily_logs_user_date ON daily_logs(user_id, date);
    """),
    (4, """
        CREATE INDEX IF NOT EXISTS idx_custom_sections_user ON custom_sections(user_id);
        CREATE INDEX IF NOT EXISTS idx_custom_topics_section ON custom_topics(user_id, section_id);
    """),
]


def _database_url() -> str:
    return current_app.config.get("DATABASE", DEFAULT_DATABASE)


def get_db():
    """Return a DB connection from Flask g, creating if needed.

    Supports both SQLite (default) and PostgreSQL (when DATABASE starts
    with postgresql:// or postgres://).
    """
    if "db" not in g:
        db_url = _database_url()

        if is_postgres_url(db_url):
            pool = PoolManager.get_pool(
                db_url,
                minconn=current_app.config.get("PG_POOL_MIN", 1),
                maxconn=current_app.config.get("PG_POOL_MAX", 5),
            )
            g.db = pool.connection()
            return g.db

        # Default: SQLite
        g.db = sqlite3.connect(db_url)
        g.db.row_factory = sqlite3.Row
        g.db.execute("PRAGMA journal_mode=WAL")
        g.db.execute("PRAGMA foreign_keys=ON")
    return g.db


def close_db(e=None) -> None:
    """Teardown handler: close (or return to the pool) the DB connection."""
    db = g.pop("db", None)
    if db is not None:
        db.close()


def init_db() -> None:
    """Execute schema DDL to create all tables."""
    db = get_db()
    db.executescript(SCHEMA)
    if db.execute("SELECT 1 FROM schema_version WHERE version = 1").fetchone() is None:
        db.execute(
            "INSERT INTO schema_version (version, applied_at) VALUES (1, ?)",
            (datetime.now().isoformat(),),
        )
    db.commit()


def run_migrations() -> None:
    """Apply any unapplied versioned migrations.

    Uses file-based locking to prevent race conditions when multiple
    Gunicorn workers start simultaneously.
    """
    db_url = _database_url()
    lock_file = None

    # File-based locking only for SQLite (PostgreSQL has its own locking)
    if not is_postgres_url(db_url):
        lock_path = Path(db_url).with_suffix(".migration.lock")
        try:
            lock_file = open(lock_path, "w")
            fcntl.flock(lock_file, fcntl.LOCK_EX)
        except OSError:
            lock_file = None

    try:
        db = get_db()
        applied = {
            row["version"]
            for row in db.execute("SELECT version FROM schema_version").fetchall()
        }
        for version, sql in MIGRATIONS:
            if version in applied:
                continue
            db.executescript(sql)
            db.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (version, datetime.now().isoformat()),
            )
            db.commit()
    finally:
        if lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_UN)
            lock_file.close()


def init_app(app) -> None:
    """Register teardown, pool shutdown, and auto-init on first request."""
    app.teardown_appcontext(close_db)
    atexit.register(PoolManager.shutdown)

    @app.before_request
    def _ensure_db():
        if not getattr(app, "_db_initialized", False):
            init_db()
            run_migrations()
            app._db_initialized = True
