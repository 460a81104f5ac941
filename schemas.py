"""
Request and record schemas for every tracked entity.

Each entity has three models:
  - a record model: the stored row as returned to clients
  - a create model: what a client may send to create one
  - a patch model: the same fields, all optional, same rules when supplied

Wire names are camelCase (``techStack``, ``selfRating``); snake_case is
accepted on input too. Unknown keys, including any owner or id field, are
dropped, so the owner always comes from the authenticated request.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StringConstraints,
    ValidationError,
)
from pydantic.alias_generators import to_camel

TopicStatus = Literal["not_started", "in_progress", "completed"]
ProjectStatus = Literal["planned", "in_progress", "completed"]

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
SelfRating = Annotated[int, Field(strict=True, ge=1, le=10)]
# Largest value an INTEGER column holds in SQLite and a BIGINT in PostgreSQL.
MAX_SQL_INT = 2**63 - 1

RecordId = Annotated[int, Field(strict=True, ge=1, le=MAX_SQL_INT)]
HoursSpent = Annotated[int, Field(strict=True, ge=0, le=MAX_SQL_INT)]


def _calendar_day(value: Any) -> Any:
    """Reduce a full ISO timestamp to its calendar day; leave the rest to pydantic."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def _start_of_day(value: Any) -> Any:
    """A bare date (or YYYY-MM-DD string) means midnight of that day."""
    if isinstance(value, str) and len(value) == 10:
        try:
            value = date.fromisoformat(value)
        except ValueError:
            return value
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


def _utc_naive(value: datetime) -> datetime:
    """Store aware timestamps as naive UTC so text ordering stays chronological."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


LogDate = Annotated[date, BeforeValidator(_calendar_day)]
Timestamp = Annotated[datetime, BeforeValidator(_start_of_day), AfterValidator(_utc_naive)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class PatchModel(ApiModel):
    """Base for partial updates: only fields the client actually sent count."""

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# ── Auth ─────────────────────────────────────────────────────────────


class Credentials(ApiModel):
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)]
    password: Annotated[str, StringConstraints(min_length=6, max_length=128)]


class UserRecord(ApiModel):
    id: int
    username: str


# ── DSA topics ───────────────────────────────────────────────────────


class DsaTopic(ApiModel):
    id: int
    user_id: int
    topic: str
    category: str
    status: TopicStatus


class DsaTopicCreate(ApiModel):
    topic: NonEmptyStr
    category: NonEmptyStr
    status: TopicStatus = "not_started"


class DsaTopicPatch(PatchModel):
    topic: NonEmptyStr = None
    category: NonEmptyStr = None
    status: TopicStatus = None


# ── CS fundamentals ──────────────────────────────────────────────────


class CsTopic(ApiModel):
    id: int
    user_id: int
    subject: str
    topic: str
    status: TopicStatus


class CsTopicCreate(ApiModel):
    subject: NonEmptyStr
    topic: NonEmptyStr
    status: TopicStatus = "not_started"


class CsTopicPatch(PatchModel):
    subject: NonEmptyStr = None
    topic: NonEmptyStr = None
    status: TopicStatus = None


# ── Projects ─────────────────────────────────────────────────────────


class Project(ApiModel):
    id: int
    user_id: int
    name: str
    tech_stack: str
    status: ProjectStatus
    is_interview_ready: bool


class ProjectCreate(ApiModel):
    name: NonEmptyStr
    tech_stack: NonEmptyStr
    status: ProjectStatus = "planned"
    is_interview_ready: StrictBool = False


class ProjectPatch(PatchModel):
    name: NonEmptyStr = None
    tech_stack: NonEmptyStr = None
    status: ProjectStatus = None
    is_interview_ready: StrictBool = None


# ── Mock interviews ──────────────────────────────────────────────────


class MockInterview(ApiModel):
    id: int
    user_id: int
    date: datetime
    topics_covered: str
    self_rating: int
    feedback: Optional[str] = None


class MockInterviewCreate(ApiModel):
    date: Timestamp
    topics_covered: NonEmptyStr
    self_rating: SelfRating
    feedback: Optional[str] = None


class MockInterviewPatch(PatchModel):
    date: Timestamp = None
    topics_covered: NonEmptyStr = None
    self_rating: SelfRating = None
    feedback: Optional[str] = None


# ── Daily logs ───────────────────────────────────────────────────────


class DailyLog(ApiModel):
    id: int
    user_id: int
    date: LogDate
    content: str
    hours_spent: int


class DailyLogCreate(ApiModel):
    date: LogDate = Field(default_factory=date.today)
    content: NonEmptyStr
    hours_spent: HoursSpent


class DailyLogPatch(PatchModel):
    date: LogDate = None
    content: NonEmptyStr = None
    hours_spent: HoursSpent = None


# ── Custom trackers ──────────────────────────────────────────────────


class CustomSection(ApiModel):
    id: int
    user_id: int
    name: str
    icon: str


class CustomSectionCreate(ApiModel):
    name: NonEmptyStr
    icon: NonEmptyStr = "BookOpen"


class CustomSectionPatch(PatchModel):
    name: NonEmptyStr = None
    icon: NonEmptyStr = None


class CustomTopic(ApiModel):
    id: int
    user_id: int
    section_id: int
    topic: str
    status: TopicStatus


class CustomTopicCreate(ApiModel):
    section_id: RecordId
    topic: NonEmptyStr
    status: TopicStatus = "not_started"


class CustomTopicPatch(PatchModel):
    topic: NonEmptyStr = None
    status: TopicStatus = None


def field_errors(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic ValidationError into ``[{"field", "message"}]``."""
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "body"
        errors.append({"field": loc, "message": err["msg"]})
    return errors
