"""Repositories for onboarding progress, stage progress and field progress."""

from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.contracts.stages import ONBOARDING_STEPS, STEP_NAMES, StepStatus
from villa_onboarding.database.models import (
    OnboardingProgress,
    OnboardingStepProgress,
    StepFieldProgress,
)
from villa_onboarding.repositories.base_repository import BaseRepository


class OnboardingProgressRepository(BaseRepository[OnboardingProgress]):
    """Repository for the per-villa onboarding progress row."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, OnboardingProgress)

    async def get_by_villa_id(self, villa_id: UUID) -> Optional[OnboardingProgress]:
        try:
            query = (
                select(OnboardingProgress)
                .where(OnboardingProgress.villa_id == villa_id)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving onboarding progress for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def set_flags(self, villa_id: UUID, flag_columns: Iterable[str]) -> int:
        """Set legacy completion flags to true.

        Only ever writes ``True``; flags are never cleared here.

        Args:
            villa_id: Villa ID
            flag_columns: Flag column names to set

        Returns:
            Number of rows updated
        """
        values = {column: True for column in flag_columns}
        if not values:
            return 0
        try:
            stmt = (
                update(OnboardingProgress)
                .where(OnboardingProgress.villa_id == villa_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            return result.rowcount
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error setting completion flags for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise


class StepProgressRepository(BaseRepository[OnboardingStepProgress]):
    """Repository for per-stage progress rows and their version counters."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, OnboardingStepProgress)

    async def get_for_step(self, villa_id: UUID, step: int) -> Optional[OnboardingStepProgress]:
        try:
            query = select(OnboardingStepProgress).where(
                OnboardingStepProgress.villa_id == villa_id,
                OnboardingStepProgress.step_number == step,
            )
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving step {step} progress for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def list_for_villa(self, villa_id: UUID) -> List[OnboardingStepProgress]:
        try:
            query = (
                select(OnboardingStepProgress)
                .where(OnboardingStepProgress.villa_id == villa_id)
                .order_by(OnboardingStepProgress.step_number)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error listing step progress for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def create_all_steps(self, villa_id: UUID) -> List[OnboardingStepProgress]:
        """Create the ten stage rows for a new villa at version 0."""
        try:
            rows = [
                OnboardingStepProgress(
                    villa_id=villa_id,
                    step_number=step,
                    step_name=STEP_NAMES[step],
                    status=StepStatus.NOT_STARTED.value,
                    version=0,
                )
                for step in ONBOARDING_STEPS
            ]
            self.session.add_all(rows)
            await self.session.flush()
            return rows
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error creating step progress rows for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def increment_version(self, step_progress_id: UUID, expected: Optional[int] = None) -> bool:
        """Atomically bump the version counter.

        With ``expected`` this is a compare-and-set: the row only matches while
        its stored version still equals ``expected``. The UPDATE takes the row
        lock, held until the surrounding transaction ends.

        Args:
            step_progress_id: Stage progress row ID
            expected: Version the caller last saw, or None to skip the check

        Returns:
            True if the row was updated
        """
        try:
            stmt = (
                update(OnboardingStepProgress)
                .where(OnboardingStepProgress.id == step_progress_id)
                .values(version=OnboardingStepProgress.version + 1)
                .execution_options(synchronize_session=False)
            )
            if expected is not None:
                stmt = stmt.where(OnboardingStepProgress.version == expected)
            result = await self.session.execute(stmt)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error incrementing version of step progress {step_progress_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def get_version(self, step_progress_id: UUID) -> Optional[int]:
        try:
            query = select(OnboardingStepProgress.version).where(
                OnboardingStepProgress.id == step_progress_id
            )
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error reading version of step progress {step_progress_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def update_status(
        self,
        step_progress_id: UUID,
        status: str,
        now: datetime,
    ) -> None:
        """Record a stage's lifecycle status and the matching timestamp.

        ``started_at`` is only set on the first write to the stage.
        """
        values: Dict[str, object] = {
            "status": status,
            "last_updated_at": now,
            "started_at": func.coalesce(OnboardingStepProgress.started_at, now),
        }
        if status == StepStatus.COMPLETED.value:
            values["completed_at"] = now
        elif status == StepStatus.SKIPPED.value:
            values["skipped_at"] = now

        try:
            stmt = (
                update(OnboardingStepProgress)
                .where(OnboardingStepProgress.id == step_progress_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            await self.session.execute(stmt)
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error updating status of step progress {step_progress_id}: {str(e)}",
                exc_info=True
            )
            raise


class FieldProgressRepository(BaseRepository[StepFieldProgress]):
    """Repository for field-level progress rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, StepFieldProgress)

    async def get_by_step(self, step_progress_id: UUID) -> Dict[str, StepFieldProgress]:
        """Map field name -> row for one stage."""
        try:
            query = select(StepFieldProgress).where(
                StepFieldProgress.step_progress_id == step_progress_id
            )
            result = await self.session.execute(query)
            return {row.field_name: row for row in result.scalars().all()}
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving field progress for step progress {step_progress_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def get_for_steps(self, step_progress_ids: List[UUID]) -> List[StepFieldProgress]:
        if not step_progress_ids:
            return []
        try:
            query = select(StepFieldProgress).where(
                StepFieldProgress.step_progress_id.in_(step_progress_ids)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving field progress: {str(e)}",
                exc_info=True
            )
            raise
