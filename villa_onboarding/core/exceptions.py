"""Custom exception hierarchy."""

from dataclasses import dataclass
from typing import List, Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


@dataclass(frozen=True)
class FieldError:
    """A single field-level problem found while validating a payload."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(AppError):
    """Raised when input validation fails.

    Carries every field problem found in one pass; callers never see only
    the first one.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[FieldError]] = None,
        original_error: Exception = None,
    ):
        super().__init__(message, original_error=original_error)
        self.errors: List[FieldError] = list(errors or [])

    @property
    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]


class VersionConflictError(AppError):
    """Raised when an auto-save carries a version other than the stored one.

    Expected under normal multi-tab use; the caller re-fetches and retries.
    """

    def __init__(
        self,
        villa_id,
        step: int,
        supplied_version: int,
        current_version: Optional[int] = None,
    ):
        message = (
            f"Version conflict for villa {villa_id} step {step}: "
            f"supplied {supplied_version}, current {current_version}"
        )
        super().__init__(message)
        self.villa_id = villa_id
        self.step = step
        self.supplied_version = supplied_version
        self.current_version = current_version


class NotFoundError(AppError):
    """Raised when a villa or its stage progress does not exist."""
    pass


class PersistenceError(AppError):
    """Raised when the database is unavailable or a write fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass
