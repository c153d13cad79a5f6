"""Request models for the onboarding endpoints.

Stage payloads stay free-form here; the alias canonicalizer and the stage
validator own their shape.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class StartOnboardingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    villa_name: str = Field(
        ...,
        alias="villaName",
        description="Name of the villa being onboarded",
        examples=["Villa Serenity"],
    )


class StageSubmissionRequest(BaseModel):
    """A full stage submission (draft or final)."""

    model_config = ConfigDict(populate_by_name=True)

    step: int = Field(..., description="Stage ordinal 1-10", examples=[1])
    data: Optional[Dict[str, Any]] = Field(
        default=None, description="Stage payload; any supported field aliases accepted"
    )
    completed: bool = Field(False, description="Mark the stage complete (enforces required fields)")
    is_auto_save: bool = Field(False, alias="isAutoSave", description="Background auto-save")
    version: Optional[int] = Field(None, ge=0, description="Stage version last seen by the client")


class AutoSaveRequest(BaseModel):
    """A background auto-save; the version is mandatory."""

    model_config = ConfigDict(populate_by_name=True)

    data: Optional[Dict[str, Any]] = Field(default=None, description="Partial stage payload")
    version: int = Field(..., ge=0, description="Stage version last seen by the client")
