"""
Seed Demo Data: Standalone script and importable helper.

Creates the ``demo`` / ``demo123`` account with a few DSA and CS topics,
two projects, a mock interview and daily logs for yesterday and today, so
the dashboard shows a live streak straight away.

Usage:
    python seed_demo_data.py           # Seed into the configured database
    python seed_demo_data.py --reset   # Remove the demo account first
"""

from __future__ import annotations

import sys
from datetime import date, datetime, timedelta

from werkzeug.security import generate_password_hash

from database import get_db
from db_stores import UserStore
from resources import Resource, store_for

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "demo123"

DSA_TOPICS = [
    {"topic": "Two Sum", "category": "Arrays", "status": "completed"},
    {"topic": "Reverse Linked List", "category": "Linked List", "status": "in_progress"},
    {"topic": "Binary Search", "category": "Arrays", "status": "not_started"},
]

CS_TOPICS = [
    {"subject": "OS", "topic": "Process Scheduling", "status": "completed"},
    {"subject": "DBMS", "topic": "Normalization", "status": "in_progress"},
]

PROJECTS = [
    {"name": "Portfolio Website", "techStack": "React, Tailwind",
     "status": "completed", "isInterviewReady": True},
    {"name": "Task Manager", "techStack": "Node, Express",
     "status": "in_progress", "isInterviewReady": False},
]


def seed() -> dict:
    """Create the demo account and its sample data. Needs an app context.

    Does nothing when the account already exists.
    """
    if UserStore.get_by_username(DEMO_USERNAME):
        return {"created": False}

    user = UserStore.create(DEMO_USERNAME, generate_password_hash(DEMO_PASSWORD))
    uid = user.id

    for payload in DSA_TOPICS:
        store_for(Resource.DSA).create(uid, payload)
    for payload in CS_TOPICS:
        store_for(Resource.CS).create(uid, payload)
    for payload in PROJECTS:
        store_for(Resource.PROJECTS).create(uid, payload)

    store_for(Resource.MOCKS).create(uid, {
        "date": datetime.now(),
        "topicsCovered": "DSA, OS",
        "selfRating": 8,
        "feedback": "Good problem solving, work on communication.",
    })

    today = date.today()
    store_for(Resource.LOGS).create(uid, {
        "date": today - timedelta(days=1), "content": "Solved 2 DSA problems", "hoursSpent": 2,
    })
    store_for(Resource.LOGS).create(uid, {
        "date": today, "content": "Revise OS concepts", "hoursSpent": 1,
    })

    return {"created": True, "user_id": uid}


def clear_demo() -> None:
    """Remove the demo account; its tracker rows go with it (ON DELETE CASCADE)."""
    db = get_db()
    db.execute("DELETE FROM users WHERE username = ?", (DEMO_USERNAME,))
    db.commit()


if __name__ == "__main__":
    from app import create_app
    from database import init_db, run_migrations

    app = create_app()
    with app.app_context():
        init_db()
        run_migrations()
        if "--reset" in sys.argv:
            clear_demo()
            print("[Seed] Demo data cleared.")
        result = seed()
        print(f"[Seed] Done: {result}")
