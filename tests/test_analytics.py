"""Tests for analytics.py: ratios, readiness score, mock score and streak."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from analytics import (
    MOCK_TARGET,
    READINESS_WEIGHTS,
    CategoryProgress,
    build_report,
    category_progress,
    logging_streak,
    mock_score,
    readiness_score,
)

TODAY = date(2026, 3, 15)


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


class TestCategoryProgress:
    def test_empty_category_is_zero(self):
        progress = category_progress([])
        assert progress.total == 0
        assert progress.ratio == 0.0
        assert progress.percent == 0.0

    def test_counts_completed_only(self):
        progress = category_progress(["completed", "in_progress", "not_started", "completed"])
        assert (progress.completed, progress.total) == (2, 4)
        assert progress.ratio == 0.5

    def test_to_dict(self):
        assert CategoryProgress(1, 3).to_dict() == {"completed": 1, "total": 3, "percent": 33.3}


class TestMockScore:
    def test_average_as_percentage(self):
        assert mock_score([8, 6]) == pytest.approx(70.0)

    def test_no_interviews(self):
        assert mock_score([]) == 0.0


class TestReadinessScore:
    def test_weights_sum_to_100(self):
        assert sum(READINESS_WEIGHTS.values()) == 100

    def test_worked_example(self):
        assert readiness_score(0.5, 1.0, 0.0, 80.0) == 61

    def test_bounds(self):
        assert readiness_score(0, 0, 0, 0) == 0
        assert readiness_score(1, 1, 1, 100) == 100

    def test_half_rounds_up(self):
        # 0.25 * 30 = 7.5
        assert readiness_score(0.25, 0, 0, 0) == 8

    @pytest.mark.parametrize("category", ["dsa", "cs", "projects"])
    def test_monotonic_in_completed_count(self, category):
        total = 7
        previous = -1
        for completed in range(total + 1):
            ratios = {"dsa": 0.4, "cs": 0.3, "projects": 0.6}
            ratios[category] = category_progress(
                ["completed"] * completed + ["in_progress"] * (total - completed)).ratio
            score = readiness_score(ratios["dsa"], ratios["cs"], ratios["projects"], 55.0)
            assert score >= previous
            previous = score


class TestStreak:
    def test_three_consecutive_days(self):
        assert logging_streak([TODAY, days_ago(1), days_ago(2)], today=TODAY) == 3

    def test_broken_when_no_recent_log(self):
        assert logging_streak([days_ago(2), days_ago(3)], today=TODAY) == 0

    def test_starting_yesterday_stops_at_gap(self):
        assert logging_streak([days_ago(1), days_ago(2), days_ago(4)], today=TODAY) == 2

    def test_same_day_counts_once(self):
        morning = datetime.combine(TODAY, datetime.min.time()).replace(hour=9)
        evening = morning.replace(hour=21)
        assert logging_streak([morning, evening], today=TODAY) == 1

    def test_no_logs(self):
        assert logging_streak([], today=TODAY) == 0

    def test_iso_strings(self):
        dates = [days_ago(0).isoformat(), days_ago(1).isoformat()]
        assert logging_streak(dates, today=TODAY) == 2

    def test_order_does_not_matter(self):
        assert logging_streak([days_ago(2), TODAY, days_ago(1)], today=TODAY) == 3

    def test_future_dated_log_breaks_streak(self):
        assert logging_streak([TODAY + timedelta(days=1)], today=TODAY) == 0


class TestBuildReport:
    def test_empty_snapshot(self):
        report = build_report([], [], [], [], [], today=TODAY).to_dict()
        assert report["readinessScore"] == 0
        assert report["streak"] == 0
        assert report["mocks"] == {"count": 0, "target": MOCK_TARGET, "averageRating": 0.0, "score": 0.0}
        assert report["recentLogs"] == []
        assert report["totalHours"] == 0

    def test_full_snapshot(self):
        dsa = [{"status": "completed"}, {"status": "in_progress"}]
        cs = [{"status": "completed"}]
        projects = [{"status": "in_progress", "is_interview_ready": True}]
        mocks = [{"self_rating": 8}]
        logs = [
            {"date": TODAY.isoformat(), "content": f"day {i}", "hours_spent": 2}
            for i in range(5)
        ]
        report = build_report(dsa, cs, projects, mocks, logs, today=TODAY).to_dict()

        # 0.5*30 + 1.0*30 + 0*20 + 80*0.2 = 61
        assert report["readinessScore"] == 61
        assert report["dsa"] == {"completed": 1, "total": 2, "percent": 50.0}
        assert report["projects"]["interviewReady"] == 1
        assert report["mocks"]["averageRating"] == 8
        assert report["mocks"]["score"] == 80.0
        assert report["streak"] == 1
        assert report["totalHours"] == 10
        assert len(report["recentLogs"]) == 4
        assert report["recentLogs"][0]["content"] == "day 0"
