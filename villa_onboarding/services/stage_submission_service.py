"""Single-stage write path: validate, arbitrate the version, persist, track.

Everything after validation runs in one transaction. The version arbiter is
the first write so the stage row stays locked until the commit; a rejected
version rolls back without touching villa data.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.contracts.aliases import canonicalize_step_data
from villa_onboarding.contracts.fields import coerce_boolean
from villa_onboarding.contracts.stages import TOTAL_STEPS, StepStatus, ensure_step
from villa_onboarding.contracts.validation import validate_step_payload
from villa_onboarding.core.exceptions import FieldError, NotFoundError, ValidationError
from villa_onboarding.repositories.progress_repository import (
    FieldProgressRepository,
    OnboardingProgressRepository,
    StepProgressRepository,
)
from villa_onboarding.repositories.villa_repository import VillaRepository
from villa_onboarding.services.base_service import BaseService
from villa_onboarding.services.field_progress_tracker import FieldProgressTracker
from villa_onboarding.services.stage_persister import BatchResult, PreparedStage, StagePersister
from villa_onboarding.services.version_arbiter import VersionArbiter
from villa_onboarding.utils.logging import log_operation


@dataclass
class StageSubmission:
    """A stage write that passed validation and is ready to apply."""

    villa_id: UUID
    step: int
    payload: Dict[str, Any]
    prepared: PreparedStage
    completed: bool = False
    is_auto_save: bool = False
    version: Optional[int] = None
    user_id: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.prepared.validated.skipped

    @property
    def status(self) -> str:
        if self.skipped:
            return StepStatus.SKIPPED.value
        if self.prepared.validated.enforce_required:
            return StepStatus.COMPLETED.value
        return StepStatus.IN_PROGRESS.value


@dataclass
class StageWriteOutcome:
    step: int
    status: str
    version: int
    batch: BatchResult = field(default_factory=BatchResult)


def _validate_version(version: Any) -> Optional[int]:
    if version is None:
        return None
    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        raise ValidationError(
            "Invalid version",
            errors=[FieldError("version", "must be a non-negative integer")],
        )
    return version


class StageSubmissionService(BaseService):
    """Applies one stage submission (auto-save or final) for a villa."""

    def __init__(self, session: AsyncSession):
        super().__init__(StepProgressRepository(session))
        self.session = session
        self.villa_repository = VillaRepository(session)
        self.progress_repository = OnboardingProgressRepository(session)
        self.arbiter = VersionArbiter(self.repository)
        self.persister = StagePersister(session)
        self.tracker = FieldProgressTracker(FieldProgressRepository(session))

    def validate(
        self,
        villa_id: UUID,
        step: int,
        payload: Any,
        completed: bool = False,
        is_auto_save: bool = False,
        version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> StageSubmission:
        """Canonicalize and validate a submission before any write.

        Required fields are enforced only for a final, non-skipped submit;
        auto-saves and drafts validate partially.

        Raises:
            ValidationError: With every field problem found
        """
        step = ensure_step(step)
        version = _validate_version(version)
        canonical = canonicalize_step_data(step, payload)

        skipped = coerce_boolean(canonical.get("skipped")) is True
        enforce_required = bool(completed) and not is_auto_save and not skipped

        validated = validate_step_payload(step, canonical, enforce_required=enforce_required)
        prepared = self.persister.prepare(validated)

        return StageSubmission(
            villa_id=villa_id,
            step=step,
            payload=canonical,
            prepared=prepared,
            completed=bool(completed),
            is_auto_save=bool(is_auto_save),
            version=version,
            user_id=user_id,
        )

    async def run(self, submission: StageSubmission, *args, **kwargs) -> StageWriteOutcome:
        villa = await self.villa_repository.get_by_id(submission.villa_id)
        if villa is None:
            raise NotFoundError(f"Villa {submission.villa_id} not found")

        now = datetime.now(timezone.utc)
        status = submission.status
        try:
            ticket = await self.arbiter.acquire(
                submission.villa_id, submission.step, submission.version
            )
            batch = await self.persister.apply(villa, submission.prepared, submission.user_id)
            await self.tracker.track(
                ticket.step_progress_id,
                submission.step,
                submission.payload,
                skipped=submission.skipped,
                now=now,
            )
            await self.repository.update_status(ticket.step_progress_id, status, now)

            if status == StepStatus.COMPLETED.value:
                await self._advance_current_step(submission)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        log_operation(
            self.logger,
            "stage_submitted",
            villa_id=submission.villa_id,
            step=submission.step,
            status=status,
            version=ticket.version,
            auto_save=submission.is_auto_save,
            created=batch.created,
            updated=batch.updated,
            deactivated=batch.deactivated,
            failed=batch.failed,
        )
        return StageWriteOutcome(
            step=submission.step,
            status=status,
            version=ticket.version,
            batch=batch,
        )

    async def _advance_current_step(self, submission: StageSubmission) -> None:
        progress = await self.progress_repository.get_by_villa_id(submission.villa_id)
        if progress is None:
            return
        next_step = min(submission.step + 1, TOTAL_STEPS)
        if next_step > (progress.current_step or 1):
            progress.current_step = next_step
            if submission.user_id is not None:
                progress.updated_by = submission.user_id
