"""Two-mode stage validation.

Partial mode (drafts and auto-saves) treats every field as optional but still
rejects a present value that cannot be coerced. Complete mode (final submit)
additionally requires the stage's declared fields. All problems are collected
and reported together.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from villa_onboarding.contracts.aliases import canonicalize_entity, required_fields
from villa_onboarding.contracts.enums import (
    DEPARTMENT_BY_POSITION,
    EMPLOYMENT_TYPE_BY_POSITION,
    FacilityCondition,
    SalaryFrequency,
    StaffPosition,
)
from villa_onboarding.contracts.fields import is_blank
from villa_onboarding.contracts.schemas import (
    ENTITY_MODELS,
    ENTITY_REQUIRED_FIELDS,
    STEP_PAYLOAD_MODELS,
)
from villa_onboarding.contracts.stages import ensure_step
from villa_onboarding.core.exceptions import FieldError, ValidationError
from villa_onboarding.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Applied only to columns that are still null after the payload is written
STAGE_DEFAULTS: Dict[int, Dict[str, Any]] = {
    2: {
        "preferred_language": "en",
        "communication_preference": "EMAIL",
        "owner_type": "INDIVIDUAL",
    },
    3: {
        "payment_schedule": "MONTHLY",
        "minimum_stay_nights": 1,
        "cancellation_policy": "MODERATE",
        "check_in_time": "15:00",
        "check_out_time": "11:00",
        "payment_through_ipl": False,
    },
    4: {
        "currency": "USD",
        "is_verified": False,
    },
}


@dataclass
class ValidatedStage:
    """Result of validating one stage payload.

    ``values`` holds only the keys the client supplied, snake_cased; a key
    mapped to ``None`` is an explicit clear. ``defaults`` is kept apart so the
    persister can apply it to null columns only.
    """

    step: int
    values: Dict[str, Any]
    defaults: Dict[str, Any] = field(default_factory=dict)
    unknown_fields: List[str] = field(default_factory=list)
    skipped: bool = False
    enforce_required: bool = False


def _format_errors(error: PydanticValidationError, prefix: str = "") -> List[FieldError]:
    field_errors: List[FieldError] = []
    seen = set()
    for issue in error.errors():
        path = ".".join(str(part) for part in issue.get("loc", ())) or "data"
        name = f"{prefix}{path}"
        if name in seen:
            continue
        seen.add(name)
        message = issue.get("msg", "invalid value")
        if issue.get("type") != "missing" and "input" in issue:
            message = f"{message} (received {issue['input']!r})"
        field_errors.append(FieldError(name, message))
    return field_errors


def _split_known(model, data: Mapping) -> Tuple[Dict[str, Any], List[str]]:
    input_keys = model.input_keys()
    known = {key: value for key, value in data.items() if key in input_keys}
    unknown = [key for key in data if key not in input_keys]
    return known, unknown


def _missing_required(
    fields: Tuple[str, ...],
    known: Mapping,
    failed: set,
    prefix: str = "",
) -> List[FieldError]:
    missing = []
    for name in fields:
        if f"{prefix}{name}" in failed:
            continue
        value = known.get(name)
        if is_blank(value) or (isinstance(value, (list, dict)) and not value):
            missing.append(FieldError(f"{prefix}{name}", f"{name} is required"))
    return missing


def _derive_coordinates(values: Dict[str, Any]) -> None:
    """Fill latitude/longitude from a "lat, lng" googleCoordinates string."""
    raw = values.get("google_coordinates")
    if not raw:
        return
    if values.get("latitude") is not None and values.get("longitude") is not None:
        return

    parts = [part.strip() for part in str(raw).split(",")]
    if len(parts) != 2:
        return
    try:
        latitude, longitude = float(parts[0]), float(parts[1])
    except ValueError:
        LOGGER.debug(f"Ignoring unparseable googleCoordinates: {raw!r}")
        return

    if -90 <= latitude <= 90 and -180 <= longitude <= 180:
        if values.get("latitude") is None:
            values["latitude"] = latitude
        if values.get("longitude") is None:
            values["longitude"] = longitude


def validate_step_payload(
    step: int,
    data: Any,
    enforce_required: bool = False,
) -> ValidatedStage:
    """Validate and coerce a canonicalized stage payload.

    Args:
        step: Stage ordinal
        data: Canonical payload (output of ``canonicalize_step_data``)
        enforce_required: Enforce the stage's required-on-final-submit fields

    Returns:
        ValidatedStage: Coerced values, defaults and dropped unknown keys

    Raises:
        ValidationError: With one FieldError per missing or invalid field
    """
    step = ensure_step(step)
    model = STEP_PAYLOAD_MODELS[step]

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"Validation failed for step {step}",
            errors=[FieldError("data", "must be an object")],
        )

    known, unknown = _split_known(model, data)
    if unknown:
        LOGGER.warning(
            f"Dropping unknown fields for step {step}: {', '.join(sorted(unknown))}",
            extra={"step": step, "unknown_fields": unknown},
        )

    errors: List[FieldError] = []
    values: Dict[str, Any] = {}
    try:
        parsed = model.model_validate(known)
        values = parsed.model_dump(exclude_unset=True)
    except PydanticValidationError as e:
        errors.extend(_format_errors(e))

    if enforce_required:
        failed = {error.field for error in errors}
        errors.extend(_missing_required(required_fields(step), known, failed))

    if errors:
        raise ValidationError(f"Validation failed for step {step}", errors=errors)

    skipped = bool(values.pop("skipped", False))

    if step == 1:
        _derive_coordinates(values)

    defaults = {
        key: value
        for key, value in STAGE_DEFAULTS.get(step, {}).items()
        if values.get(key) is None
    }

    return ValidatedStage(
        step=step,
        values=values,
        defaults=defaults,
        unknown_fields=unknown,
        skipped=skipped,
        enforce_required=enforce_required,
    )


def _normalize_facility(values: Dict[str, Any]) -> None:
    quantity = values.get("quantity")
    if quantity is not None and quantity < 1:
        values["quantity"] = 1
    condition = values.get("condition")
    if condition is not None:
        lowered = condition.lower()
        allowed = {item.value for item in FacilityCondition}
        values["condition"] = lowered if lowered in allowed else FacilityCondition.GOOD.value


def validate_entity(collection: str, data: Any, prefix: str = "") -> Dict[str, Any]:
    """Validate one entity of a collection stage.

    Entity-level required fields apply in both modes: an entity without them
    cannot be stored at all.

    Args:
        collection: Collection key (platforms, documents, staff, facilities, photos)
        data: Raw entity mapping
        prefix: Prefix for error field names, e.g. ``staff[2].``

    Returns:
        Dict of supplied snake_case values

    Raises:
        ValidationError: If the entity is invalid
    """
    model = ENTITY_MODELS[collection]
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"Invalid {collection} entry",
            errors=[FieldError(prefix.rstrip(".") or collection, "must be an object")],
        )

    canonical = canonicalize_entity(collection, data)
    known, unknown = _split_known(model, canonical)
    if unknown:
        LOGGER.debug(f"Ignoring unknown {collection} fields: {', '.join(sorted(unknown))}")

    errors: List[FieldError] = []
    values: Dict[str, Any] = {}
    try:
        values = model.model_validate(known).model_dump(exclude_unset=True)
    except PydanticValidationError as e:
        errors.extend(_format_errors(e, prefix))

    failed = {error.field for error in errors}
    errors.extend(
        _missing_required(ENTITY_REQUIRED_FIELDS.get(collection, ()), known, failed, prefix)
    )
    if errors:
        raise ValidationError(f"Invalid {collection} entry", errors=errors)

    if collection == "facilities":
        _normalize_facility(values)
    elif collection == "photos":
        order = values.pop("order", None)
        if order is not None and values.get("sort_order") is None:
            values["sort_order"] = order

    return values


def entity_defaults(collection: str, values: Mapping) -> Dict[str, Any]:
    """Defaults for a newly created entity, never overriding supplied values."""
    defaults: Dict[str, Any] = {}

    if collection in ("platforms", "documents", "staff"):
        defaults["is_active"] = True

    if collection == "staff":
        position: Optional[str] = values.get("position")
        if position in StaffPosition.__members__:
            member = StaffPosition(position)
            defaults["department"] = DEPARTMENT_BY_POSITION[member].value
            defaults["employment_type"] = EMPLOYMENT_TYPE_BY_POSITION[member].value
        defaults["salary_frequency"] = SalaryFrequency.MONTHLY.value
        defaults["currency"] = "USD"
    elif collection == "facilities":
        defaults["is_available"] = True
        defaults["quantity"] = 1
        defaults["condition"] = FacilityCondition.GOOD.value

    return {key: value for key, value in defaults.items() if values.get(key) is None}
