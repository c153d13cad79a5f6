"""Integration tests for the onboarding service against an on-disk SQLite database."""

import asyncio
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy import select

from villa_onboarding.core.exceptions import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    VersionConflictError,
)
from villa_onboarding.database.models import (
    FacilityChecklist,
    OnboardingProgress,
    Owner,
    Staff,
    Villa,
)
from villa_onboarding.repositories.progress_repository import OnboardingProgressRepository
from villa_onboarding.services.onboarding_service import OnboardingService

pytestmark = pytest.mark.integration


async def submit(session_maker, villa_id, step, data, **kwargs):
    async with session_maker() as session:
        return await OnboardingService(session).submit_stage(villa_id, step, data, **kwargs)


async def progress_of(session_maker, villa_id):
    async with session_maker() as session:
        return await OnboardingService(session).get_aggregate_progress(villa_id)


def step_entry(progress, step):
    return next(entry for entry in progress["steps"] if entry["step"] == step)


class TestStartOnboarding:

    @pytest.mark.asyncio
    async def test_new_villa_has_ten_steps_at_version_zero(self, session_maker, villa_id):
        progress = await progress_of(session_maker, villa_id)

        assert progress["current_step"] == 1
        assert progress["status"] == "IN_PROGRESS"
        assert progress["overall_percentage"] == 0
        assert progress["label"] == "NOT_STARTED"
        assert [entry["version"] for entry in progress["steps"]] == [0] * 10
        assert {entry["status"] for entry in progress["steps"]} == {"not-started"}
        assert not any(progress["flags"].values())

    @pytest.mark.asyncio
    async def test_blank_villa_name_rejected(self, session_maker):
        async with session_maker() as session:
            with pytest.raises(ValidationError):
                await OnboardingService(session).start_onboarding("   ")


class TestVersioning:
    """Optimistic concurrency on stage writes."""

    @pytest.mark.asyncio
    async def test_versions_increase_by_one_and_stale_writes_fail(self, session_maker, villa_id):
        first = await submit(session_maker, villa_id, 2, {"firstName": "Ayu"}, is_auto_save=True, version=0)
        second = await submit(session_maker, villa_id, 2, {"lastName": "Lestari"}, is_auto_save=True, version=1)

        assert first.version == 1
        assert second.version == 2

        with pytest.raises(VersionConflictError) as exc_info:
            await submit(session_maker, villa_id, 2, {"phone": "+62 811"}, is_auto_save=True, version=1)

        assert exc_info.value.current_version == 2
        async with session_maker() as session:
            owner = (await session.execute(select(Owner).where(Owner.villa_id == villa_id))).scalar_one()
        assert owner.phone is None

    @pytest.mark.asyncio
    async def test_concurrent_writers_with_same_version_cannot_both_win(self, session_maker, villa_id):
        results = await asyncio.gather(
            submit(session_maker, villa_id, 1, {"city": "Canggu"}, is_auto_save=True, version=0),
            submit(session_maker, villa_id, 1, {"city": "Ubud"}, is_auto_save=True, version=0),
            return_exceptions=True,
        )

        conflicts = [result for result in results if isinstance(result, VersionConflictError)]
        successes = [result for result in results if not isinstance(result, Exception)]
        assert len(conflicts) == 1
        assert len(successes) == 1
        assert successes[0].version == 1

        progress = await progress_of(session_maker, villa_id)
        assert step_entry(progress, 1)["version"] == 1
        winner = next(i for i, result in enumerate(results) if not isinstance(result, Exception))
        async with session_maker() as session:
            villa = await session.get(Villa, villa_id)
        assert villa.city == ["Canggu", "Ubud"][winner]

    @pytest.mark.asyncio
    async def test_write_without_version_is_accepted(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 4, {"bankName": "BCA"}, version=0)
        result = await submit(session_maker, villa_id, 4, {"iban": "ID123"})

        assert result.version == 2


class TestScalarStages:
    """Additive writes to single-record stages."""

    @pytest.mark.asyncio
    async def test_absent_fields_are_preserved(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 2, {"firstName": "Ayu", "ownerEmail": "ayu@example.com"})
        await submit(session_maker, villa_id, 2, {"ownerPhone": "+62 811"})

        async with session_maker() as session:
            owner = (await session.execute(select(Owner).where(Owner.villa_id == villa_id))).scalar_one()

        assert owner.first_name == "Ayu"
        assert owner.email == "ayu@example.com"
        assert owner.phone == "+62 811"
        assert owner.preferred_language == "en"

    @pytest.mark.asyncio
    async def test_overwritten_field_changes_and_omitted_field_stays(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 1, {"city": "Canggu", "country": "Indonesia"})
        await submit(session_maker, villa_id, 1, {"city": "Ubud"})

        async with session_maker() as session:
            villa = await session.get(Villa, villa_id)

        assert villa.city == "Ubud"
        assert villa.country == "Indonesia"

    @pytest.mark.asyncio
    async def test_explicit_null_clears_a_field(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 2, {"firstName": "Ayu", "nationality": "ID"})
        await submit(session_maker, villa_id, 2, {"nationality": None})

        async with session_maker() as session:
            owner = (await session.execute(select(Owner).where(Owner.villa_id == villa_id))).scalar_one()

        assert owner.first_name == "Ayu"
        assert owner.nationality is None

    @pytest.mark.asyncio
    async def test_failed_final_submit_writes_nothing(self, session_maker, villa_id):
        with pytest.raises(ValidationError) as exc_info:
            await submit(session_maker, villa_id, 1, {"villaCity": "Canggu"}, completed=True)

        assert "address" in {error.field for error in exc_info.value.errors}
        progress = await progress_of(session_maker, villa_id)
        assert step_entry(progress, 1)["version"] == 0
        assert step_entry(progress, 1)["status"] == "not-started"

    @pytest.mark.asyncio
    async def test_committed_write_survives_failed_progress_read(self, session_maker, villa_id):
        async with session_maker() as session:
            service = OnboardingService(session)
            service.get_aggregate_progress = AsyncMock(side_effect=PersistenceError("database is locked"))
            result = await service.submit_stage(villa_id, 2, {"firstName": "Ayu"}, version=0)

        assert result.version == 1
        assert result.progress == {}
        progress = await progress_of(session_maker, villa_id)
        assert step_entry(progress, 2)["version"] == 1

    @pytest.mark.asyncio
    async def test_unknown_villa(self, session_maker):
        with pytest.raises(NotFoundError):
            await submit(session_maker, uuid4(), 1, {"city": "Canggu"})


class TestCollectionStages:
    """Replace-by-natural-key writes."""

    @pytest.mark.asyncio
    async def test_staff_replace_by_email(self, session_maker, villa_id):
        a = {"firstName": "Made", "lastName": "Wirawan", "phone": "1", "email": "made@example.com"}
        b = {"firstName": "Ketut", "lastName": "Sari", "phone": "2", "email": "ketut@example.com"}
        c = {"firstName": "Wayan", "lastName": "Putra", "phone": "3", "email": "wayan@example.com"}

        first = await submit(session_maker, villa_id, 7, {"staff": [a, b]})
        second = await submit(session_maker, villa_id, 7, {"staff": [dict(a, phone="11"), c]})

        assert (first.batch.created, first.batch.updated, first.batch.deactivated) == (2, 0, 0)
        assert (second.batch.created, second.batch.updated, second.batch.deactivated) == (1, 1, 1)

        async with session_maker() as session:
            rows = (await session.execute(select(Staff).where(Staff.villa_id == villa_id))).scalars().all()
        by_email = {row.email: row for row in rows}
        assert len(rows) == 3
        assert by_email["made@example.com"].phone == "11"
        assert by_email["ketut@example.com"].is_active is False
        assert by_email["wayan@example.com"].is_active is True
        assert second.progress["steps"][6]["reason"] == "2 active staff members"

    @pytest.mark.asyncio
    async def test_invalid_entity_does_not_deactivate_its_stored_counterpart(self, session_maker, villa_id):
        a = {"firstName": "Made", "lastName": "Wirawan", "phone": "1"}
        await submit(session_maker, villa_id, 7, {"staff": [a]})

        result = await submit(session_maker, villa_id, 7, {"staff": [{"firstName": "Made", "lastName": "Wirawan"}]})

        assert result.batch.failed == 1
        assert result.batch.deactivated == 0
        assert step_entry(result.progress, 7)["is_complete"] is True

    @pytest.mark.asyncio
    async def test_facilities_not_resent_are_removed(self, session_maker, villa_id):
        oven = {"category": "Kitchen", "itemName": "Oven"}
        kettle = {"category": "Kitchen", "itemName": "Kettle", "available": False}

        await submit(session_maker, villa_id, 8, {"facilities": [oven, kettle]})
        result = await submit(session_maker, villa_id, 8, {"facilities": [kettle]})

        assert result.batch.deactivated == 1
        async with session_maker() as session:
            rows = (
                await session.execute(select(FacilityChecklist).where(FacilityChecklist.villa_id == villa_id))
            ).scalars().all()
        assert [row.item_name for row in rows] == ["Kettle"]
        assert step_entry(result.progress, 8)["is_complete"] is False

    @pytest.mark.asyncio
    async def test_payload_without_collection_leaves_it_alone(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 5, {"platforms": [{"platform": "airbnb"}]})
        result = await submit(session_maker, villa_id, 5, {})

        assert result.batch.deactivated == 0
        assert step_entry(result.progress, 5)["is_complete"] is True


class TestProgress:
    """Derived completion and flag synchronization."""

    @pytest.mark.asyncio
    async def test_end_to_end_percentage_and_flags(self, session_maker, villa_id, villa_info_payload):
        result = await submit(session_maker, villa_id, 1, villa_info_payload, completed=True, version=0)

        assert result.version == 1
        assert result.progress["overall_percentage"] == 10
        assert result.progress["current_step"] == 2
        assert step_entry(result.progress, 1)["status"] == "completed"

        result = await submit(
            session_maker, villa_id, 5, {"platforms": [{"platform": "airbnb"}]}, completed=True
        )

        progress = result.progress
        assert progress["overall_percentage"] == 20
        assert progress["label"] == "STARTED"
        set_flags = sorted(name for name, value in progress["flags"].items() if value)
        assert set_flags == ["ota_credentials_completed", "villa_info_completed"]
        assert progress["legacy_summary"] == {"completed_steps": 2, "percentage": 20}

    @pytest.mark.asyncio
    async def test_completion_ignores_flags_and_flags_never_revert(self, session_maker, villa_id):
        async with session_maker() as session:
            await OnboardingProgressRepository(session).set_flags(villa_id, ["villa_info_completed"])
            await session.commit()

        progress = await progress_of(session_maker, villa_id)

        assert progress["overall_percentage"] == 0
        assert step_entry(progress, 1)["is_complete"] is False
        assert progress["flags"]["villa_info_completed"] is True

    @pytest.mark.asyncio
    async def test_skipped_stage(self, session_maker, villa_id):
        result = await submit(session_maker, villa_id, 6, {"skipped": True}, completed=True)

        entry = step_entry(result.progress, 6)
        assert entry["status"] == "skipped"
        assert entry["skipped_at"] is not None
        assert entry["is_complete"] is False

    @pytest.mark.asyncio
    async def test_field_progress_restores_last_values(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 2, {"ownerEmail": "ayu@example.com"}, is_auto_save=True, version=0)
        await submit(session_maker, villa_id, 2, {"ownerEmail": "", "firstName": "Ayu"}, is_auto_save=True, version=1)

        async with session_maker() as session:
            fields = await OnboardingService(session).get_field_progress(villa_id, 2)

        assert fields["fields"] == {"email": "ayu@example.com", "firstName": "Ayu"}
        assert fields["version"] == 2
        assert fields["status"] == "in-progress"

    @pytest.mark.asyncio
    async def test_validate_step_reports_missing_persisted_fields(self, session_maker, villa_id):
        await submit(session_maker, villa_id, 4, {"bankName": "BCA"})

        async with session_maker() as session:
            result = await OnboardingService(session).validate_step(villa_id, 4)

        assert result["is_valid"] is False
        assert any(error.startswith("accountNumber") for error in result["errors"])
        assert any(error.startswith("accountHolderName") for error in result["errors"])

    @pytest.mark.asyncio
    async def test_complete_onboarding_lists_incomplete_steps(self, session_maker, villa_id, villa_info_payload):
        await submit(session_maker, villa_id, 1, villa_info_payload, completed=True)

        async with session_maker() as session:
            with pytest.raises(ValidationError) as exc_info:
                await OnboardingService(session).complete_onboarding(villa_id)

        assert len(exc_info.value.errors) == 9
        assert "villaInfo" not in {error.field for error in exc_info.value.errors}

    @pytest.mark.asyncio
    async def test_all_stages_complete_activates_villa(self, session_maker, villa_id, villa_info_payload):
        stages = {
            1: villa_info_payload,
            2: {"firstName": "Ayu", "lastName": "Lestari", "email": "ayu@example.com",
                "phone": "+62 811", "address": "Jl. Raya 1", "city": "Denpasar", "country": "Indonesia"},
            3: {"contractStartDate": "2024-03-01", "contractType": "exclusive", "commissionRate": "20"},
            4: {"accountHolderName": "Ayu Lestari", "bankName": "BCA", "accountNumber": "1234567"},
            5: {"platforms": [{"platform": "airbnb", "listingUrl": "airbnb.com/rooms/1"}]},
            6: {"documents": [{"documentType": "CONTRACT", "filename": "contract.pdf"}]},
            7: {"staff": [{"firstName": "Made", "lastName": "Wirawan", "phone": "1", "position": "chef"}]},
            8: {"facilities": [{"category": "Pool", "itemName": "Infinity pool"}]},
            9: {"photos": [{"filename": "pool.jpg", "order": 1}]},
            10: {"agreedToTerms": True, "dataAccuracyConfirmed": True},
        }
        for step, data in stages.items():
            result = await submit(session_maker, villa_id, step, data, completed=True, user_id="tester")

        assert result.progress["overall_percentage"] == 100
        assert result.progress["status"] == "COMPLETED"
        assert result.progress["current_step"] == 10
        assert all(result.progress["flags"].values())

        async with session_maker() as session:
            villa = await session.get(Villa, villa_id)
            progress_row = (
                await session.execute(select(OnboardingProgress).where(OnboardingProgress.villa_id == villa_id))
            ).scalar_one()
            staff = (await session.execute(select(Staff).where(Staff.villa_id == villa_id))).scalar_one()
        assert villa.status == "ACTIVE"
        assert villa.is_active is True
        assert progress_row.completed_at is not None
        assert staff.department == "HOSPITALITY"

        async with session_maker() as session:
            completed = await OnboardingService(session).complete_onboarding(villa_id)
        assert completed["status"] == "COMPLETED"
