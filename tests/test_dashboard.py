"""Tests for the /api/dashboard readiness report."""

from __future__ import annotations

from datetime import date, timedelta

from analytics import MOCK_TARGET


class TestDashboard:
    def test_empty_dashboard(self, auth_client):
        resp = auth_client.get("/api/dashboard")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["readinessScore"] == 0
        assert data["streak"] == 0
        assert data["dsa"] == {"completed": 0, "total": 0, "percent": 0.0}
        assert data["mocks"]["target"] == MOCK_TARGET

    def test_readiness_from_snapshot(self, auth_client):
        auth_client.post("/api/dsa", json={"topic": "a", "category": "x", "status": "completed"})
        auth_client.post("/api/dsa", json={"topic": "b", "category": "x"})
        auth_client.post("/api/cs", json={"subject": "OS", "topic": "c", "status": "completed"})
        auth_client.post("/api/projects", json={"name": "p", "techStack": "t", "isInterviewReady": True})
        auth_client.post("/api/mocks", json={"date": "2026-01-01T10:00:00", "topicsCovered": "x",
                                             "selfRating": 8})

        data = auth_client.get("/api/dashboard").get_json()
        assert data["readinessScore"] == 61
        assert data["projects"]["interviewReady"] == 1
        assert data["mocks"]["count"] == 1
        assert data["mocks"]["score"] == 80.0

    def test_streak_and_recent_logs(self, auth_client):
        today = date.today()
        for offset in range(3):
            day = (today - timedelta(days=offset)).isoformat()
            auth_client.post("/api/logs", json={"date": day, "content": f"d{offset}", "hoursSpent": 2})
        auth_client.post("/api/logs", json={"date": (today - timedelta(days=10)).isoformat(),
                                            "content": "old", "hoursSpent": 1})

        data = auth_client.get("/api/dashboard").get_json()
        assert data["streak"] == 3
        assert data["totalHours"] == 7
        assert [log["content"] for log in data["recentLogs"]] == ["d0", "d1", "d2", "old"]

    def test_only_own_data_counts(self, auth_client, other_client):
        other_client.post("/api/dsa", json={"topic": "a", "category": "x", "status": "completed"})
        data = auth_client.get("/api/dashboard").get_json()
        assert data["dsa"]["total"] == 0
