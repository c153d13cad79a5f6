"""Onboarding services."""

from villa_onboarding.services.completion_calculator import (
    CompletionCalculator,
    CompletionReport,
    StepCompletion,
    VillaSnapshot,
)
from villa_onboarding.services.field_progress_tracker import FieldProgressTracker
from villa_onboarding.services.flag_synchronizer import FlagSynchronizer
from villa_onboarding.services.onboarding_service import OnboardingService, StageSubmissionResult
from villa_onboarding.services.stage_persister import BatchResult, StagePersister
from villa_onboarding.services.stage_submission_service import StageSubmissionService
from villa_onboarding.services.version_arbiter import VersionArbiter, VersionTicket

__all__ = [
    "BatchResult",
    "CompletionCalculator",
    "CompletionReport",
    "FieldProgressTracker",
    "FlagSynchronizer",
    "OnboardingService",
    "StageSubmissionResult",
    "StagePersister",
    "StageSubmissionService",
    "StepCompletion",
    "VersionArbiter",
    "VersionTicket",
    "VillaSnapshot",
]
