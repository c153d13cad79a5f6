"""Onboarding facade used by the API layer.

Built per request around one session. Reads always recompute completion from
persisted data and then let the flag synchronizer bring the legacy flags up
to date.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.contracts.enums import VillaStatus
from villa_onboarding.contracts.fields import coerce_string
from villa_onboarding.contracts.schemas import STEP_PAYLOAD_MODELS
from villa_onboarding.contracts.stages import (
    COLLECTION_KEYS,
    ONBOARDING_STEPS,
    STEP_FLAG_COLUMNS,
    STEP_NAMES,
    STEP_TITLES,
    TOTAL_STEPS,
    OnboardingStatus,
    StepStatus,
    ensure_step,
)
from villa_onboarding.contracts.validation import validate_step_payload
from villa_onboarding.core.exceptions import (
    FieldError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from villa_onboarding.database.models import (
    BankDetails,
    ContractualDetails,
    FacilityChecklist,
    OtaCredential,
    Owner,
    Photo,
    Staff,
)
from villa_onboarding.repositories.progress_repository import (
    FieldProgressRepository,
    OnboardingProgressRepository,
    StepProgressRepository,
)
from villa_onboarding.repositories.villa_repository import VillaChildRepository, VillaRepository
from villa_onboarding.services.completion_calculator import (
    CompletionCalculator,
    CompletionReport,
    VillaSnapshot,
)
from villa_onboarding.services.field_progress_tracker import FieldProgressTracker
from villa_onboarding.services.flag_synchronizer import FlagSynchronizer
from villa_onboarding.services.stage_persister import BatchResult
from villa_onboarding.services.stage_submission_service import StageSubmissionService
from villa_onboarding.services.storage_signals import DatabaseStorageSignals, StorageSignals
from villa_onboarding.utils.logging import get_logger, log_operation

LOGGER = get_logger(__name__)

VILLA_NAME_MAX_LENGTH = 200


def row_to_dict(row) -> Optional[Dict[str, Any]]:
    """Copy a mapped row's column values into a plain dict."""
    if row is None:
        return None
    return {column: getattr(row, column) for column in row.__table__.c.keys()}


@dataclass
class StageSubmissionResult:
    """What a stage submission hands back to the caller."""

    progress: Dict[str, Any]
    version: int
    batch: BatchResult = field(default_factory=BatchResult)


@dataclass
class OnboardingState:
    """Plain-data copy of everything a progress read needs."""

    snapshot: VillaSnapshot
    progress: Dict[str, Any]
    steps: Dict[int, Dict[str, Any]]
    field_values: Dict[int, Dict[str, Any]]

    @property
    def flags(self) -> Dict[int, bool]:
        return {
            step: bool(self.progress.get(column))
            for step, column in STEP_FLAG_COLUMNS.items()
        }


class OnboardingService:
    """Entry point for every onboarding operation on a villa."""

    def __init__(self, session: AsyncSession, storage_signals: Optional[StorageSignals] = None):
        self.session = session
        self.villa_repository = VillaRepository(session)
        self.progress_repository = OnboardingProgressRepository(session)
        self.step_repository = StepProgressRepository(session)
        self.field_repository = FieldProgressRepository(session)
        self.storage_signals = storage_signals or DatabaseStorageSignals(session)
        self.submission_service = StageSubmissionService(session)
        self.tracker = FieldProgressTracker(self.field_repository)
        self.calculator = CompletionCalculator()
        self.synchronizer = FlagSynchronizer(self.progress_repository)

    async def start_onboarding(self, villa_name: Any, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Create a villa with its progress row and ten stage rows.

        Args:
            villa_name: Name of the new villa
            user_id: Acting user

        Returns:
            Aggregate progress of the new villa
        """
        name = coerce_string(villa_name)
        if not isinstance(name, str) or not name:
            raise ValidationError(
                "Villa name is required",
                errors=[FieldError("villaName", "villaName is required")],
            )
        if len(name) > VILLA_NAME_MAX_LENGTH:
            raise ValidationError(
                "Villa name is too long",
                errors=[FieldError(
                    "villaName", f"must be at most {VILLA_NAME_MAX_LENGTH} characters"
                )],
            )

        try:
            villa = await self.villa_repository.create(
                villa_name=name,
                status=VillaStatus.DRAFT.value,
                is_active=False,
                created_by=user_id,
                updated_by=user_id,
            )
            await self.progress_repository.create(
                villa_id=villa.id,
                current_step=1,
                status=OnboardingStatus.IN_PROGRESS.value,
                created_by=user_id,
                updated_by=user_id,
            )
            await self.step_repository.create_all_steps(villa.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to start onboarding: {str(e)}", original_error=e)

        villa_id = villa.id
        log_operation(LOGGER, "onboarding_started", villa_id=villa_id, user_id=user_id)
        return await self.get_aggregate_progress(villa_id, user_id=user_id)

    async def submit_stage(
        self,
        villa_id: UUID,
        step: int,
        payload: Any,
        completed: bool = False,
        is_auto_save: bool = False,
        version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> StageSubmissionResult:
        """Write one stage and return the refreshed aggregate progress.

        Args:
            villa_id: Villa ID
            step: Stage ordinal
            payload: Raw client payload
            completed: Whether the client marks the stage complete
            is_auto_save: Whether this is a background auto-save
            version: Stage version the client last saw
            user_id: Acting user

        Returns:
            StageSubmissionResult: Progress, the new stage version and batch counts.
                Progress is empty when the read after a committed write fails.

        Raises:
            ValidationError: Payload failed validation
            VersionConflictError: ``version`` is stale
            NotFoundError: Villa does not exist
        """
        outcome = await self.submission_service.execute(
            villa_id,
            step,
            payload,
            completed=completed,
            is_auto_save=is_auto_save,
            version=version,
            user_id=user_id,
        )
        try:
            progress = await self.get_aggregate_progress(villa_id, user_id=user_id)
        except PersistenceError as e:
            # The write is committed; the caller still needs its new version
            LOGGER.warning(
                f"Progress read failed after saving step {outcome.step} for villa {villa_id}: {e}",
                exc_info=True,
                extra={"villa_id": str(villa_id), "step": outcome.step, "version": outcome.version},
            )
            progress = {}
        return StageSubmissionResult(progress=progress, version=outcome.version, batch=outcome.batch)

    async def get_aggregate_progress(self, villa_id: UUID, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Recompute completion for a villa and synchronize its flags.

        When every stage is complete the onboarding is marked completed and the
        villa activated.

        Args:
            villa_id: Villa ID
            user_id: Acting user, recorded if the onboarding completes

        Returns:
            Dictionary with overall and per-stage progress
        """
        state = await self._load_state(villa_id)
        report = self.calculator.calculate(state.snapshot)
        flags = await self.synchronizer.synchronize(villa_id, report, state.flags)

        if report.all_complete and state.progress.get("status") != OnboardingStatus.COMPLETED.value:
            completed_at = await self._mark_completed(villa_id, user_id)
            state.progress["status"] = OnboardingStatus.COMPLETED.value
            state.progress["completed_at"] = completed_at

        return self._build_progress(villa_id, state, report, flags)

    async def get_field_progress(self, villa_id: UUID, step: int) -> Dict[str, Any]:
        """Return the stored field values of one stage for restoration."""
        step = ensure_step(step)
        await self._require_villa(villa_id)
        try:
            row = await self.step_repository.get_for_step(villa_id, step)
            fields = await self.tracker.get_field_values(row.id) if row is not None else {}
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load field progress: {str(e)}", original_error=e)

        return {
            "villa_id": str(villa_id),
            "step": step,
            "step_name": STEP_NAMES[step],
            "status": row.status if row is not None else StepStatus.NOT_STARTED.value,
            "version": row.version if row is not None else 0,
            "fields": fields,
        }

    async def validate_step(self, villa_id: UUID, step: int) -> Dict[str, Any]:
        """Check what is persisted for a stage as if it were submitted final.

        Args:
            villa_id: Villa ID
            step: Stage ordinal

        Returns:
            Dictionary with is_valid, errors and warnings
        """
        step = ensure_step(step)
        state = await self._load_state(villa_id)
        detail = self.calculator.calculate_step(step, state.snapshot)

        errors: List[str] = []
        warnings: List[str] = []
        if step in COLLECTION_KEYS:
            if not detail.is_complete:
                errors.append(detail.reason)
        else:
            payload = self._persisted_payload(step, state)
            try:
                validate_step_payload(step, payload, enforce_required=True)
            except ValidationError as e:
                errors.extend(e.messages)
            if not errors and not detail.is_complete:
                warnings.append(detail.reason)

        return {
            "villa_id": str(villa_id),
            "step": step,
            "step_name": STEP_NAMES[step],
            "is_valid": not errors,
            "is_complete": detail.is_complete,
            "errors": errors,
            "warnings": warnings,
        }

    async def complete_onboarding(self, villa_id: UUID, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Finish onboarding once every stage is complete.

        Raises:
            ValidationError: Listing each incomplete stage
        """
        state = await self._load_state(villa_id)
        report = self.calculator.calculate(state.snapshot)
        incomplete = [detail for detail in report.steps.values() if not detail.is_complete]
        if incomplete:
            raise ValidationError(
                "Onboarding cannot be completed: "
                f"{len(incomplete)} of {TOTAL_STEPS} steps incomplete",
                errors=[FieldError(detail.name, detail.reason) for detail in incomplete],
            )

        progress = await self.get_aggregate_progress(villa_id, user_id=user_id)
        log_operation(LOGGER, "onboarding_completed", villa_id=villa_id, user_id=user_id)
        return progress

    async def build_snapshot(self, villa_id: UUID) -> VillaSnapshot:
        """Plain-data snapshot of a villa's persisted onboarding data."""
        villa = await self._require_villa(villa_id)
        progress = await self.progress_repository.get_by_villa_id(villa_id)
        return VillaSnapshot(
            villa=row_to_dict(villa),
            owner=row_to_dict(await VillaChildRepository(self.session, Owner).get_by_villa_id(villa_id)),
            contractual_details=row_to_dict(
                await VillaChildRepository(self.session, ContractualDetails).get_by_villa_id(villa_id)
            ),
            bank_details=row_to_dict(
                await VillaChildRepository(self.session, BankDetails).get_by_villa_id(villa_id)
            ),
            active_credentials=await VillaChildRepository(self.session, OtaCredential).count_for_villa(
                villa_id, is_active=True
            ),
            active_documents=await self.storage_signals.active_document_count(villa_id),
            active_staff=await VillaChildRepository(self.session, Staff).count_for_villa(
                villa_id, is_active=True
            ),
            available_facilities=await VillaChildRepository(
                self.session, FacilityChecklist
            ).count_for_villa(villa_id, is_available=True),
            photos=await VillaChildRepository(self.session, Photo).count_for_villa(villa_id),
            agreed_to_terms=progress.agreed_to_terms if progress is not None else None,
        )

    async def _require_villa(self, villa_id: UUID):
        try:
            villa = await self.villa_repository.get_by_id(villa_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load villa {villa_id}: {str(e)}", original_error=e)
        if villa is None:
            raise NotFoundError(f"Villa {villa_id} not found")
        return villa

    async def _load_state(self, villa_id: UUID) -> OnboardingState:
        try:
            snapshot = await self.build_snapshot(villa_id)
            progress = row_to_dict(await self.progress_repository.get_by_villa_id(villa_id)) or {}
            step_rows = await self.step_repository.list_for_villa(villa_id)
            steps = {row.step_number: row_to_dict(row) for row in step_rows}

            step_by_id = {row.id: row.step_number for row in step_rows}
            field_values: Dict[int, Dict[str, Any]] = {}
            for row in await self.field_repository.get_for_steps(list(step_by_id)):
                field_values.setdefault(step_by_id[row.step_progress_id], {})[row.field_name] = row.value
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load onboarding state: {str(e)}", original_error=e)

        return OnboardingState(
            snapshot=snapshot,
            progress=progress,
            steps=steps,
            field_values=field_values,
        )

    def _persisted_payload(self, step: int, state: OnboardingState) -> Dict[str, Any]:
        if step == 1:
            data = state.snapshot.villa
        elif step == 2:
            data = state.snapshot.owner
        elif step == 3:
            data = state.snapshot.contractual_details
        elif step == 4:
            data = state.snapshot.bank_details
        else:
            data = state.progress

        payload: Dict[str, Any] = {}
        for name, model_field in STEP_PAYLOAD_MODELS[step].model_fields.items():
            if name == "skipped" or not data:
                continue
            value = data.get(name)
            if value is not None:
                payload[model_field.alias or name] = value
        return payload

    async def _mark_completed(self, villa_id: UUID, user_id: Optional[str]) -> datetime:
        now = datetime.now(timezone.utc)
        try:
            progress = await self.progress_repository.get_by_villa_id(villa_id)
            villa = await self.villa_repository.get_by_id(villa_id)
            if progress is not None:
                progress.status = OnboardingStatus.COMPLETED.value
                progress.completed_at = now
                progress.updated_by = user_id
            if villa is not None:
                villa.status = VillaStatus.ACTIVE.value
                villa.is_active = True
                villa.updated_by = user_id
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to complete onboarding: {str(e)}", original_error=e)

        log_operation(LOGGER, "onboarding_marked_completed", villa_id=villa_id)
        return now

    def _build_progress(
        self,
        villa_id: UUID,
        state: OnboardingState,
        report: CompletionReport,
        flags: Dict[int, bool],
    ) -> Dict[str, Any]:
        steps = []
        for step in ONBOARDING_STEPS:
            row = state.steps.get(step) or {}
            detail = report.steps[step]
            steps.append({
                "step": step,
                "name": STEP_NAMES[step],
                "title": STEP_TITLES[step],
                "status": row.get("status") or StepStatus.NOT_STARTED.value,
                "version": row.get("version") or 0,
                "started_at": row.get("started_at"),
                "completed_at": row.get("completed_at"),
                "skipped_at": row.get("skipped_at"),
                "last_updated_at": row.get("last_updated_at"),
                "is_complete": detail.is_complete,
                "reason": detail.reason,
                "required_fields": detail.required_fields,
                "completed_fields": detail.completed_fields,
            })

        flagged = sum(1 for value in flags.values() if value)
        return {
            "villa_id": str(villa_id),
            "current_step": state.progress.get("current_step") or 1,
            "status": state.progress.get("status") or OnboardingStatus.IN_PROGRESS.value,
            "completed_at": state.progress.get("completed_at"),
            "overall_percentage": report.percentage,
            "label": report.label,
            "completed_steps": report.completed_steps,
            "total_steps": TOTAL_STEPS,
            "steps": steps,
            "field_progress": {
                STEP_NAMES[step]: values for step, values in sorted(state.field_values.items())
            },
            "flags": {STEP_FLAG_COLUMNS[step]: value for step, value in sorted(flags.items())},
            "legacy_summary": {
                "completed_steps": flagged,
                "percentage": round(100 * flagged / TOTAL_STEPS),
            },
        }
