"""Data-derived stage completion.

Completion is computed from what is persisted for a villa at read time. The
legacy boolean flags are never an input here; the flag synchronizer copies
this calculator's verdicts into them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from villa_onboarding.contracts.fields import is_blank
from villa_onboarding.contracts.stages import ONBOARDING_STEPS, STEP_NAMES, TOTAL_STEPS, progress_label


@dataclass
class VillaSnapshot:
    """Plain-data view of a villa's persisted onboarding data."""

    villa: Mapping[str, Any]
    owner: Optional[Mapping[str, Any]] = None
    contractual_details: Optional[Mapping[str, Any]] = None
    bank_details: Optional[Mapping[str, Any]] = None
    active_credentials: int = 0
    active_documents: int = 0
    active_staff: int = 0
    available_facilities: int = 0
    photos: int = 0
    agreed_to_terms: Optional[bool] = None


@dataclass
class StepCompletion:
    step: int
    name: str
    is_complete: bool
    reason: str
    required_fields: List[str] = field(default_factory=list)
    completed_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "name": self.name,
            "is_complete": self.is_complete,
            "reason": self.reason,
            "required_fields": list(self.required_fields),
            "completed_fields": list(self.completed_fields),
        }


@dataclass
class CompletionReport:
    steps: Dict[int, StepCompletion]

    @property
    def completed_steps(self) -> int:
        return sum(1 for detail in self.steps.values() if detail.is_complete)

    @property
    def percentage(self) -> int:
        return round(100 * self.completed_steps / TOTAL_STEPS)

    @property
    def label(self) -> str:
        return progress_label(self.percentage)

    @property
    def all_complete(self) -> bool:
        return self.completed_steps == TOTAL_STEPS


# (client field name, column) pairs checked per scalar stage
VILLA_INFO_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("villaName", "villa_name"),
    ("address", "address"),
    ("bedrooms", "bedrooms"),
    ("bathrooms", "bathrooms"),
    ("maxGuests", "max_guests"),
    ("propertyType", "property_type"),
    ("city", "city"),
    ("country", "country"),
)
OWNER_FIELDS = (("firstName", "first_name"), ("lastName", "last_name"), ("email", "email"))
CONTRACT_FIELDS = (("contractType", "contract_type"),)
BANK_FIELDS = (("bankName", "bank_name"), ("accountNumber", "account_number"))


def _present(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value > 0
    return not is_blank(value)


def _check_fields(
    step: int,
    data: Optional[Mapping[str, Any]],
    fields: Tuple[Tuple[str, str], ...],
    missing_record_reason: str,
) -> StepCompletion:
    required = [name for name, _ in fields]
    if data is None:
        return StepCompletion(step, STEP_NAMES[step], False, missing_record_reason, required, [])

    completed = [name for name, column in fields if _present(data.get(column))]
    missing = [name for name in required if name not in completed]
    if missing:
        reason = f"Missing required fields: {', '.join(missing)}"
    else:
        reason = "All required fields present"
    return StepCompletion(step, STEP_NAMES[step], not missing, reason, required, completed)


def _check_count(step: int, count: int, what: str) -> StepCompletion:
    if count > 0:
        return StepCompletion(step, STEP_NAMES[step], True, f"{count} {what}")
    return StepCompletion(step, STEP_NAMES[step], False, f"No {what}")


class CompletionCalculator:
    """Derives per-stage completion and the overall percentage."""

    def calculate(self, snapshot: VillaSnapshot) -> CompletionReport:
        steps = {step: self.calculate_step(step, snapshot) for step in ONBOARDING_STEPS}
        return CompletionReport(steps=steps)

    def calculate_step(self, step: int, snapshot: VillaSnapshot) -> StepCompletion:
        if step == 1:
            return _check_fields(1, snapshot.villa, VILLA_INFO_FIELDS, "Villa not found")
        if step == 2:
            return _check_fields(2, snapshot.owner, OWNER_FIELDS, "No owner details")
        if step == 3:
            return _check_fields(
                3, snapshot.contractual_details, CONTRACT_FIELDS, "No contractual details"
            )
        if step == 4:
            return _check_fields(4, snapshot.bank_details, BANK_FIELDS, "No bank details")
        if step == 5:
            return _check_count(5, snapshot.active_credentials, "active OTA credentials")
        if step == 6:
            return _check_count(6, snapshot.active_documents, "active documents")
        if step == 7:
            return _check_count(7, snapshot.active_staff, "active staff members")
        if step == 8:
            return _check_count(8, snapshot.available_facilities, "available facilities")
        if step == 9:
            return _check_count(9, snapshot.photos, "photos")

        agreed = snapshot.agreed_to_terms is True
        reason = "Terms agreed" if agreed else "Terms not agreed"
        return StepCompletion(10, STEP_NAMES[10], agreed, reason, ["agreedToTerms"],
                              ["agreedToTerms"] if agreed else [])
