"""Unit tests for field-level progress tracking."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from villa_onboarding.services.field_progress_tracker import FieldProgressTracker, infer_field_type

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository() -> AsyncMock:
    repository = AsyncMock()
    repository.get_by_step.return_value = {}
    return repository


class TestFieldProgressTracker:
    """Tests for per-field status and value rows."""

    @pytest.mark.asyncio
    async def test_new_fields_are_created_with_status_and_type(self, repository):
        step_progress_id = uuid4()

        tracked = await FieldProgressTracker(repository).track(
            step_progress_id, 1, {"villaName": "Villa Serenity", "bedrooms": 4, "address": ""}, now=NOW
        )

        assert tracked == 3
        created = {call.kwargs["field_name"]: call.kwargs for call in repository.create.await_args_list}
        assert created["villaName"]["status"] == "completed"
        assert created["villaName"]["field_type"] == "string"
        assert created["villaName"]["is_required"] is True
        assert created["bedrooms"]["field_type"] == "number"
        assert created["address"]["status"] == "in-progress"
        assert created["address"]["value"] is None
        assert created["address"]["completed_at"] is None

    @pytest.mark.asyncio
    async def test_blank_value_keeps_last_stored_value(self, repository):
        row = SimpleNamespace(value="Canggu", field_type="string", status="completed", completed_at=NOW)
        repository.get_by_step.return_value = {"city": row}

        await FieldProgressTracker(repository).track(uuid4(), 1, {"city": None}, now=NOW)

        assert row.value == "Canggu"
        assert row.status == "in-progress"
        repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skipped_submission_marks_fields_skipped(self, repository):
        tracked = await FieldProgressTracker(repository).track(
            uuid4(), 5, {"platforms": [], "skipped": True}, skipped=True, now=NOW
        )

        statuses = {call.kwargs["status"] for call in repository.create.await_args_list}
        assert statuses == {"skipped"}
        assert tracked == 1
        names = [call.kwargs["field_name"] for call in repository.create.await_args_list]
        assert names == ["platforms"]

    @pytest.mark.asyncio
    async def test_unknown_fields_are_stored(self, repository):
        await FieldProgressTracker(repository).track(uuid4(), 4, {"legacyNote": "x"}, now=NOW)

        assert repository.create.await_args.kwargs["field_name"] == "legacyNote"
        assert repository.create.await_args.kwargs["is_required"] is False

    @pytest.mark.asyncio
    async def test_values_are_stored_as_json(self, repository):
        await FieldProgressTracker(repository).track(
            uuid4(), 3, {"contractStartDate": datetime(2024, 3, 1, tzinfo=timezone.utc)}, now=NOW
        )

        assert repository.create.await_args.kwargs["value"] == "2024-03-01T00:00:00Z"

    @pytest.mark.parametrize(
        "value,expected",
        [(None, "null"), (True, "boolean"), (2.5, "number"), ("x", "string"), ([1], "json")],
    )
    def test_infer_field_type(self, value, expected):
        assert infer_field_type(value) == expected
