"""Data access layer."""

from villa_onboarding.repositories.base_repository import BaseRepository
from villa_onboarding.repositories.progress_repository import (
    FieldProgressRepository,
    OnboardingProgressRepository,
    StepProgressRepository,
)
from villa_onboarding.repositories.villa_repository import (
    VillaChildRepository,
    VillaRepository,
)

__all__ = [
    "BaseRepository",
    "FieldProgressRepository",
    "OnboardingProgressRepository",
    "StepProgressRepository",
    "VillaChildRepository",
    "VillaRepository",
]
