"""Tests for schemas.py: wire names, defaults, strictness and patch semantics."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from schemas import (
    MAX_SQL_INT,
    Credentials,
    CustomSectionCreate,
    CustomTopicCreate,
    DailyLog,
    DailyLogCreate,
    DailyLogPatch,
    DsaTopicPatch,
    MockInterviewCreate,
    MockInterviewPatch,
    Project,
    ProjectCreate,
    ProjectPatch,
    field_errors,
)


class TestWireNames:
    def test_camel_case_input(self):
        project = ProjectCreate.model_validate({"name": "API", "techStack": "Go", "isInterviewReady": True})
        assert project.tech_stack == "Go"
        assert project.is_interview_ready is True

    def test_snake_case_input(self):
        project = ProjectCreate.model_validate({"name": "API", "tech_stack": "Go"})
        assert project.tech_stack == "Go"

    def test_record_serializes_camel_case(self):
        record = Project(id=1, user_id=2, name="API", tech_stack="Go", status="planned",
                         is_interview_ready=False)
        assert record.to_json() == {
            "id": 1, "userId": 2, "name": "API", "techStack": "Go",
            "status": "planned", "isInterviewReady": False,
        }

    def test_log_date_serializes_as_day(self):
        log = DailyLog(id=1, user_id=1, date="2026-05-01", content="x", hours_spent=0)
        assert log.to_json()["date"] == "2026-05-01"
        assert log.to_json()["hoursSpent"] == 0


class TestCreateRules:
    def test_required_strings_are_trimmed(self):
        section = CustomSectionCreate.model_validate({"name": "  Design  "})
        assert section.name == "Design"
        assert section.icon == "BookOpen"

    def test_blank_string_rejected(self):
        with pytest.raises(ValidationError):
            CustomSectionCreate.model_validate({"name": "   "})

    @pytest.mark.parametrize("rating", [0, 11, "8", 7.5, True])
    def test_self_rating_strict_range(self, rating):
        with pytest.raises(ValidationError):
            MockInterviewCreate.model_validate(
                {"date": "2026-01-01T10:00:00", "topicsCovered": "OS", "selfRating": rating})

    def test_negative_hours_rejected(self):
        with pytest.raises(ValidationError):
            DailyLogCreate.model_validate({"content": "x", "hoursSpent": -1})

    def test_zero_hours_allowed(self):
        assert DailyLogCreate.model_validate({"content": "x", "hoursSpent": 0}).hours_spent == 0

    def test_hours_beyond_sql_integer_rejected(self):
        with pytest.raises(ValidationError):
            DailyLogCreate.model_validate({"content": "x", "hoursSpent": 2**70})
        with pytest.raises(ValidationError):
            DailyLogPatch.model_validate({"hoursSpent": MAX_SQL_INT + 1})
        assert DailyLogCreate.model_validate(
            {"content": "x", "hoursSpent": MAX_SQL_INT}).hours_spent == MAX_SQL_INT

    def test_interview_ready_must_be_bool(self):
        with pytest.raises(ValidationError):
            ProjectCreate.model_validate({"name": "A", "techStack": "B", "isInterviewReady": "yes"})

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            ProjectCreate.model_validate({"name": "A", "techStack": "B", "status": "not_started"})

    def test_malformed_log_date_rejected(self):
        with pytest.raises(ValidationError):
            DailyLogCreate.model_validate({"date": "yesterday", "content": "x", "hoursSpent": 1})

    def test_log_date_from_timestamp(self):
        log = DailyLogCreate.model_validate(
            {"date": "2026-02-10T23:59:00.000Z", "content": "x", "hoursSpent": 1})
        assert log.date == date(2026, 2, 10)

    def test_mock_date_only(self):
        mock = MockInterviewCreate.model_validate(
            {"date": "2026-02-10", "topicsCovered": "OS", "selfRating": 5})
        assert mock.date == datetime(2026, 2, 10)

    def test_mock_aware_timestamp_becomes_utc(self):
        mock = MockInterviewCreate.model_validate(
            {"date": "2026-02-10T12:00:00Z", "topicsCovered": "OS", "selfRating": 5})
        assert mock.date == datetime(2026, 2, 10, 12, 0)
        assert mock.date.tzinfo is None

    def test_section_id_must_be_positive_int(self):
        with pytest.raises(ValidationError):
            CustomTopicCreate.model_validate({"sectionId": "3", "topic": "x"})
        with pytest.raises(ValidationError):
            CustomTopicCreate.model_validate({"sectionId": 0, "topic": "x"})
        with pytest.raises(ValidationError):
            CustomTopicCreate.model_validate({"sectionId": 2**70, "topic": "x"})

    def test_owner_and_id_keys_ignored(self):
        model = CustomSectionCreate.model_validate({"name": "A", "userId": 5, "id": 3})
        assert model.model_dump() == {"name": "A", "icon": "BookOpen"}


class TestPatches:
    def test_only_sent_fields_are_changes(self):
        assert DsaTopicPatch.model_validate({"status": "completed"}).changes() == {"status": "completed"}

    def test_empty_patch(self):
        assert ProjectPatch.model_validate({}).changes() == {}

    def test_patch_obeys_create_rules(self):
        with pytest.raises(ValidationError):
            DsaTopicPatch.model_validate({"topic": ""})

    def test_null_rejected_for_required_field(self):
        with pytest.raises(ValidationError):
            ProjectPatch.model_validate({"isInterviewReady": None})

    def test_feedback_may_be_cleared(self):
        patch = MockInterviewPatch.model_validate({"feedback": None})
        assert patch.changes() == {"feedback": None}


class TestCredentials:
    def test_valid(self):
        creds = Credentials.model_validate({"username": " dana ", "password": "secret1"})
        assert creds.username == "dana"

    @pytest.mark.parametrize("payload", [
        {"username": "ab", "password": "secret1"},
        {"username": "dana", "password": "short"},
        {"username": "dana"},
    ])
    def test_invalid(self, payload):
        with pytest.raises(ValidationError):
            Credentials.model_validate(payload)


class TestFieldErrors:
    def test_uses_wire_names(self):
        with pytest.raises(ValidationError) as exc_info:
            ProjectCreate.model_validate({"name": "A"})
        errors = field_errors(exc_info.value)
        assert errors == [{"field": "techStack", "message": "Field required"}]

    def test_one_entry_per_problem(self):
        with pytest.raises(ValidationError) as exc_info:
            MockInterviewCreate.model_validate({"selfRating": 20})
        fields = {e["field"] for e in field_errors(exc_info.value)}
        assert fields == {"date", "topicsCovered", "selfRating"}
