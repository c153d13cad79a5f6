"""Optimistic concurrency for stage writes.

Each (villa, stage) pair carries a version counter. A writer that supplies the
version it last saw only succeeds while that version is still current; the
check and the increment are a single compare-and-set UPDATE, so two writers
holding the same version cannot both succeed.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from villa_onboarding.contracts.stages import STEP_NAMES, StepStatus
from villa_onboarding.core.exceptions import VersionConflictError
from villa_onboarding.repositories.progress_repository import StepProgressRepository
from villa_onboarding.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class VersionTicket:
    """Outcome of an accepted write: the stage row and its new version."""

    step_progress_id: UUID
    version: int
    created: bool = False


class VersionArbiter:
    """Accepts or rejects a stage write by version.

    Must run as the first write of the submission transaction: the UPDATE
    holds the row lock until the caller commits or rolls back.
    """

    def __init__(self, repository: StepProgressRepository):
        self.repository = repository

    async def acquire(
        self,
        villa_id: UUID,
        step: int,
        supplied_version: Optional[int] = None,
    ) -> VersionTicket:
        """Claim the next version of a stage.

        Args:
            villa_id: Villa ID
            step: Stage ordinal
            supplied_version: Version the client last saw; None skips the check

        Returns:
            VersionTicket: The stage row and its incremented version

        Raises:
            VersionConflictError: If the supplied version is stale
        """
        row = await self.repository.get_for_step(villa_id, step)
        created = False
        expected = supplied_version

        if row is None:
            try:
                row = await self.repository.create(
                    villa_id=villa_id,
                    step_number=step,
                    step_name=STEP_NAMES[step],
                    status=StepStatus.NOT_STARTED.value,
                    version=0,
                )
            except IntegrityError:
                # Another writer created the row first
                LOGGER.info(
                    f"Concurrent creation of step {step} progress for villa {villa_id}",
                    extra={"villa_id": str(villa_id), "step": step},
                )
                raise VersionConflictError(villa_id, step, supplied_version)
            created = True
            expected = None

        if not await self.repository.increment_version(row.id, expected):
            current = await self.repository.get_version(row.id)
            LOGGER.info(
                f"Version conflict on villa {villa_id} step {step}: "
                f"supplied {supplied_version}, current {current}",
                extra={
                    "villa_id": str(villa_id),
                    "step": step,
                    "supplied_version": supplied_version,
                    "current_version": current,
                },
            )
            raise VersionConflictError(villa_id, step, supplied_version, current)

        version = await self.repository.get_version(row.id)
        return VersionTicket(step_progress_id=row.id, version=version, created=created)
