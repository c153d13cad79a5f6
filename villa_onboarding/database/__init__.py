"""Database models package."""

from villa_onboarding.database.models import (
    BankDetails,
    ContractualDetails,
    FacilityChecklist,
    OnboardingProgress,
    OnboardingStepProgress,
    OtaCredential,
    Owner,
    Photo,
    Staff,
    StepFieldProgress,
    Villa,
    VillaDocument,
)

__all__ = [
    "BankDetails",
    "ContractualDetails",
    "FacilityChecklist",
    "OnboardingProgress",
    "OnboardingStepProgress",
    "OtaCredential",
    "Owner",
    "Photo",
    "Staff",
    "StepFieldProgress",
    "Villa",
    "VillaDocument",
]
