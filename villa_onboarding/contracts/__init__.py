"""Stage catalogue, alias canonicalization and payload validation."""

from villa_onboarding.contracts.aliases import (
    REQUIRED_FIELDS_BY_STEP,
    STEP_FIELD_ALIASES,
    canonicalize_entity,
    canonicalize_step_data,
)
from villa_onboarding.contracts.stages import (
    STEP_FLAG_COLUMNS,
    STEP_NAMES,
    TOTAL_STEPS,
    ensure_step,
)
from villa_onboarding.contracts.validation import (
    ValidatedStage,
    validate_entity,
    validate_step_payload,
)

__all__ = [
    "REQUIRED_FIELDS_BY_STEP",
    "STEP_FIELD_ALIASES",
    "STEP_FLAG_COLUMNS",
    "STEP_NAMES",
    "TOTAL_STEPS",
    "ValidatedStage",
    "canonicalize_entity",
    "canonicalize_step_data",
    "ensure_step",
    "validate_entity",
    "validate_step_payload",
]
