"""Readiness Analytics: completion ratios, readiness score, logging streak.

Pure functions over records that have already been fetched. Nothing here
touches the database.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

COMPLETED = "completed"

# Fixed weights of the readiness score; they sum to 100.
READINESS_WEIGHTS = {"dsa": 30, "cs": 30, "projects": 20, "mocks": 20}

# Mock interviews the dashboard treats as the goal.
MOCK_TARGET = 10

RECENT_LOGS = 4


@dataclass(frozen=True)
class CategoryProgress:
    completed: int
    total: int

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def percent(self) -> float:
        return self.ratio * 100

    def to_dict(self) -> dict:
        return {"completed": self.completed, "total": self.total, "percent": round(self.percent, 1)}


def category_progress(statuses: Iterable[str]) -> CategoryProgress:
    """Count completed items; an empty category is 0 of 0, ratio 0."""
    completed = total = 0
    for status in statuses:
        total += 1
        if status == COMPLETED:
            completed += 1
    return CategoryProgress(completed=completed, total=total)


def mock_score(ratings: Iterable[int]) -> float:
    """Average self-rating (1-10) as a percentage; 0 with no interviews."""
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings) / 10 * 100


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def readiness_score(dsa_ratio: float, cs_ratio: float, project_ratio: float, mock_pct: float) -> int:
    """Weighted composite: ratios are 0-1, mock_pct is 0-100. Result is 0-100."""
    raw = (
        dsa_ratio * READINESS_WEIGHTS["dsa"]
        + cs_ratio * READINESS_WEIGHTS["cs"]
        + project_ratio * READINESS_WEIGHTS["projects"]
        + mock_pct * READINESS_WEIGHTS["mocks"] / 100
    )
    return max(0, min(100, _round_half_up(raw)))


def _calendar_day(value: date | datetime | str) -> date:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00")) if "T" in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def logging_streak(dates: Iterable[date | datetime | str], today: date | None = None) -> int:
    """Consecutive days with at least one log, ending today or yesterday.

    Several logs on one day count once. If the latest day is older than
    yesterday the streak is broken and the result is 0.
    """
    days = sorted({_calendar_day(d) for d in dates}, reverse=True)
    if not days:
        return 0
    today = today or date.today()
    if (today - days[0]).days not in (0, 1):
        return 0
    count = 1
    for prev, curr in zip(days, days[1:]):
        if (prev - curr).days == 1:
            count += 1
        else:
            break
    return count


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


@dataclass(frozen=True)
class ReadinessReport:
    dsa: CategoryProgress
    cs: CategoryProgress
    projects: CategoryProgress
    mock_count: int
    mock_average: float
    mock_score: float
    readiness: int
    streak: int
    interview_ready_projects: int = 0
    total_hours: int = 0
    recent_logs: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "dsa": self.dsa.to_dict(),
            "cs": self.cs.to_dict(),
            "projects": {**self.projects.to_dict(), "interviewReady": self.interview_ready_projects},
            "mocks": {
                "count": self.mock_count,
                "target": MOCK_TARGET,
                "averageRating": round(self.mock_average, 2),
                "score": round(self.mock_score, 1),
            },
            "readinessScore": self.readiness,
            "streak": self.streak,
            "totalHours": self.total_hours,
            "recentLogs": self.recent_logs,
        }


def build_report(
    dsa: Sequence[Any],
    cs: Sequence[Any],
    projects: Sequence[Any],
    mocks: Sequence[Any],
    logs: Sequence[Any],
    today: date | None = None,
) -> ReadinessReport:
    """Derive the dashboard metrics from one user's full snapshot.

    Items may be record models or plain dicts with snake_case keys. ``logs``
    is expected newest first, as the log store returns them.
    """
    dsa_progress = category_progress(_get(t, "status") for t in dsa)
    cs_progress = category_progress(_get(t, "status") for t in cs)
    project_progress = category_progress(_get(p, "status") for p in projects)

    ratings = [_get(m, "self_rating") for m in mocks]
    score = mock_score(ratings)

    recent = []
    for log in logs[:RECENT_LOGS]:
        recent.append(log.to_json() if hasattr(log, "to_json") else dict(log))

    return ReadinessReport(
        dsa=dsa_progress,
        cs=cs_progress,
        projects=project_progress,
        mock_count=len(ratings),
        mock_average=sum(ratings) / len(ratings) if ratings else 0.0,
        mock_score=score,
        readiness=readiness_score(dsa_progress.ratio, cs_progress.ratio,
                                  project_progress.ratio, score),
        streak=logging_streak((_get(log, "date") for log in logs), today=today),
        interview_ready_projects=sum(1 for p in projects if _get(p, "is_interview_ready")),
        total_hours=sum(_get(log, "hours_spent", 0) for log in logs),
        recent_logs=recent,
    )
