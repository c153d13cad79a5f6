"""Unit tests for the one-way flag synchronizer."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from villa_onboarding.services.completion_calculator import CompletionReport, StepCompletion
from villa_onboarding.services.flag_synchronizer import FlagSynchronizer


def report_with(complete_steps) -> CompletionReport:
    return CompletionReport(
        steps={
            step: StepCompletion(step, f"step{step}", step in complete_steps, "")
            for step in range(1, 11)
        }
    )


@pytest.fixture
def repository() -> AsyncMock:
    repository = AsyncMock()
    repository.session = AsyncMock()
    return repository


class TestFlagSynchronizer:
    """Tests for ratcheting legacy flags."""

    @pytest.mark.asyncio
    async def test_sets_flags_for_newly_complete_steps(self, repository):
        villa_id = uuid4()
        flags = await FlagSynchronizer(repository).synchronize(
            villa_id, report_with({1, 5}), {step: False for step in range(1, 11)}
        )

        repository.set_flags.assert_awaited_once_with(
            villa_id, ["villa_info_completed", "ota_credentials_completed"]
        )
        repository.session.commit.assert_awaited_once()
        assert flags[1] is True and flags[5] is True
        assert sum(flags.values()) == 2

    @pytest.mark.asyncio
    async def test_never_reverts_a_set_flag(self, repository):
        current = {step: False for step in range(1, 11)}
        current[3] = True

        flags = await FlagSynchronizer(repository).synchronize(uuid4(), report_with(set()), current)

        assert flags[3] is True
        repository.set_flags.assert_not_awaited()
        repository.session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_set_flags_are_not_rewritten(self, repository):
        current = {step: step == 1 for step in range(1, 11)}

        await FlagSynchronizer(repository).synchronize(uuid4(), report_with({1, 2}), current)

        repository.set_flags.assert_awaited_once()
        assert repository.set_flags.await_args.args[1] == ["owner_details_completed"]

    @pytest.mark.asyncio
    async def test_failure_is_swallowed_and_rolled_back(self, repository):
        repository.set_flags.side_effect = OperationalError("UPDATE", {}, Exception("locked"))
        current = {step: False for step in range(1, 11)}

        flags = await FlagSynchronizer(repository).synchronize(uuid4(), report_with({1}), current)

        assert flags == current
        repository.session.rollback.assert_awaited_once()
