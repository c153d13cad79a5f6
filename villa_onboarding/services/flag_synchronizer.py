"""One-way bridge from computed completion to the legacy boolean flags."""

from typing import Dict, Mapping
from uuid import UUID

from villa_onboarding.contracts.stages import STEP_FLAG_COLUMNS
from villa_onboarding.repositories.progress_repository import OnboardingProgressRepository
from villa_onboarding.services.completion_calculator import CompletionReport
from villa_onboarding.utils.logging import get_logger

LOGGER = get_logger(__name__)


class FlagSynchronizer:
    """Sets a stage's legacy flag once the calculator reports it complete.

    Flags only ratchet upwards: an incomplete stage leaves its flag alone, so a
    flag set earlier is never reverted. Failures are logged and swallowed; the
    flags are advisory and the next read retries.
    """

    def __init__(self, repository: OnboardingProgressRepository):
        self.repository = repository

    async def synchronize(
        self,
        villa_id: UUID,
        report: CompletionReport,
        current_flags: Mapping[int, bool],
    ) -> Dict[int, bool]:
        """Write newly completed stages into the flags and commit.

        Args:
            villa_id: Villa ID
            report: Calculator output
            current_flags: Stage ordinal -> stored flag value

        Returns:
            Stage ordinal -> flag value after synchronization
        """
        flags = dict(current_flags)
        to_set = [
            step
            for step, detail in sorted(report.steps.items())
            if detail.is_complete and not flags.get(step, False)
        ]
        if not to_set:
            return flags

        session = self.repository.session
        try:
            await self.repository.set_flags(villa_id, [STEP_FLAG_COLUMNS[step] for step in to_set])
            await session.commit()
        except Exception as e:
            LOGGER.error(
                f"Failed to synchronize completion flags for villa {villa_id}: {str(e)}",
                exc_info=True,
                extra={"villa_id": str(villa_id), "steps": to_set},
            )
            try:
                await session.rollback()
            except Exception:
                LOGGER.error("Rollback after flag synchronization failure failed", exc_info=True)
            return flags

        for step in to_set:
            flags[step] = True

        LOGGER.info(
            f"Synchronized completion flags for villa {villa_id}: "
            f"{', '.join(STEP_FLAG_COLUMNS[step] for step in to_set)}",
            extra={"villa_id": str(villa_id), "steps": to_set},
        )
        return flags
