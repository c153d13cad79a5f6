"""Onboarding stage catalogue: ordinals, names, flag columns and status values."""

from enum import Enum
from typing import Dict, FrozenSet, Tuple

from villa_onboarding.core.exceptions import FieldError, ValidationError

TOTAL_STEPS = 10
ONBOARDING_STEPS: Tuple[int, ...] = tuple(range(1, TOTAL_STEPS + 1))

STEP_NAMES: Dict[int, str] = {
    1: "villaInfo",
    2: "ownerDetails",
    3: "contractualDetails",
    4: "bankDetails",
    5: "otaCredentials",
    6: "documents",
    7: "staffConfig",
    8: "facilities",
    9: "photos",
    10: "review",
}

STEP_TITLES: Dict[int, str] = {
    1: "Villa Information",
    2: "Owner Details",
    3: "Contractual Details",
    4: "Bank Details",
    5: "OTA Credentials",
    6: "Documents Upload",
    7: "Staff Configuration",
    8: "Facilities Checklist",
    9: "Photo Upload",
    10: "Review & Submit",
}

# Legacy boolean columns on onboarding_progress, one per stage
STEP_FLAG_COLUMNS: Dict[int, str] = {
    1: "villa_info_completed",
    2: "owner_details_completed",
    3: "contractual_details_completed",
    4: "bank_details_completed",
    5: "ota_credentials_completed",
    6: "documents_uploaded",
    7: "staff_config_completed",
    8: "facilities_completed",
    9: "photos_uploaded",
    10: "review_completed",
}

SCALAR_STEPS: FrozenSet[int] = frozenset({1, 2, 3, 4, 10})

# Collection key per collection stage (stage 9 also carries a bedroom layout)
COLLECTION_KEYS: Dict[int, str] = {
    5: "platforms",
    6: "documents",
    7: "staff",
    8: "facilities",
    9: "photos",
}


class StepStatus(str, Enum):
    """Lifecycle of a single stage."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class FieldStatus(str, Enum):
    """Lifecycle of a single field within a stage."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class OnboardingStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


def ensure_step(step) -> int:
    """Return the stage ordinal as an int or raise ValidationError.

    Args:
        step: Stage ordinal as received from the caller

    Returns:
        int: Stage ordinal in 1..10

    Raises:
        ValidationError: If the ordinal is not a known stage
    """
    try:
        ordinal = int(step)
    except (TypeError, ValueError):
        ordinal = None

    if ordinal is None or isinstance(step, bool) or ordinal not in STEP_NAMES:
        raise ValidationError(
            f"Unsupported onboarding step: {step}",
            errors=[FieldError("step", f"must be an integer between 1 and {TOTAL_STEPS}")],
        )
    return ordinal


def progress_label(percentage: int) -> str:
    """Map an overall percentage to its progress label."""
    if percentage >= 100:
        return "COMPLETED"
    if percentage >= 90:
        return "READY_FOR_REVIEW"
    if percentage >= 70:
        return "MOSTLY_COMPLETE"
    if percentage >= 50:
        return "IN_PROGRESS"
    if percentage >= 20:
        return "STARTED"
    return "NOT_STARTED"
