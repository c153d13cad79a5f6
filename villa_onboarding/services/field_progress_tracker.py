"""Field-level progress tracking.

Every key of a canonicalized payload gets a row holding its status and last
non-empty value, so a client can restore a half-filled stage exactly as it
was left.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from uuid import UUID

from pydantic_core import to_jsonable_python

from villa_onboarding.contracts.aliases import canonical_fields, required_fields
from villa_onboarding.contracts.fields import is_blank
from villa_onboarding.contracts.stages import FieldStatus
from villa_onboarding.repositories.progress_repository import FieldProgressRepository
from villa_onboarding.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Submission control keys; not form fields
CONTROL_KEYS = frozenset({"skipped"})


def has_value(value: Any) -> bool:
    if is_blank(value):
        return False
    if isinstance(value, (list, dict, tuple)) and not value:
        return False
    return True


def infer_field_type(value: Any) -> str:
    """Type tag stored alongside a field value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "json"


class FieldProgressTracker:
    """Upserts one progress row per payload field."""

    def __init__(self, repository: FieldProgressRepository):
        self.repository = repository

    async def track(
        self,
        step_progress_id: UUID,
        step: int,
        payload: Mapping[str, Any],
        skipped: bool = False,
        now: Optional[datetime] = None,
    ) -> int:
        """Record the status and value of every field in a payload.

        Args:
            step_progress_id: Stage progress row the fields belong to
            step: Stage ordinal
            payload: Canonicalized payload (camelCase keys)
            skipped: Whether the submission skipped the stage
            now: Timestamp to record

        Returns:
            Number of fields tracked
        """
        now = now or datetime.now(timezone.utc)
        known = set(canonical_fields(step))
        required = set(required_fields(step))
        fields = {name: value for name, value in payload.items() if name not in CONTROL_KEYS}
        existing = await self.repository.get_by_step(step_progress_id)

        unknown = [name for name in fields if name not in known]
        if unknown:
            LOGGER.warning(
                f"Tracking unknown fields for step {step}: {', '.join(sorted(unknown))}",
                extra={"step": step, "unknown_fields": unknown},
            )

        for name, raw_value in fields.items():
            present = has_value(raw_value)
            if skipped:
                status = FieldStatus.SKIPPED.value
            elif present:
                status = FieldStatus.COMPLETED.value
            else:
                status = FieldStatus.IN_PROGRESS.value

            value = to_jsonable_python(raw_value, fallback=str) if present else None
            row = existing.get(name)

            if row is None:
                row = await self.repository.create(
                    step_progress_id=step_progress_id,
                    field_name=name,
                    field_type=infer_field_type(value),
                    value=value,
                    status=status,
                    is_required=name in required,
                    started_at=now,
                    completed_at=now if status == FieldStatus.COMPLETED.value else None,
                    last_modified_at=now,
                )
                existing[name] = row
                continue

            row.status = status
            row.last_modified_at = now
            if present:
                # A blank submission keeps the last stored value
                row.value = value
                row.field_type = infer_field_type(value)
            if status == FieldStatus.COMPLETED.value:
                row.completed_at = now

        return len(fields)

    async def get_field_values(self, step_progress_id: UUID) -> Dict[str, Any]:
        """Return the {field: last value} map used to restore a stage."""
        rows = await self.repository.get_by_step(step_progress_id)
        return {name: row.value for name, row in rows.items()}
