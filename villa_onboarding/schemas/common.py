"""Envelope models shared by every API response."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ResponseMeta(BaseModel):
    """Metadata attached to every successful response."""

    timestamp: datetime = Field(..., description="Time the response was produced")
    request_id: str = Field(..., description="Request correlation ID")
    api_version: str = Field("v1", description="API version")


class ApiResponse(BaseModel):
    """Standard response envelope."""

    status: bool = Field(True, description="Whether the operation succeeded")
    message: str = Field(..., description="Human readable summary")
    data: Dict[str, Any] = Field(default_factory=dict, description="Operation payload")
    meta: ResponseMeta


class ErrorDetail(BaseModel):
    """Problem details body (RFC 7807) with onboarding extensions."""

    title: str = Field(..., description="Short summary of the problem type")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Explanation of this occurrence")
    instance: Optional[str] = Field(None, description="Request path")
    request_id: str = Field(..., description="Request correlation ID")
    timestamp: datetime = Field(..., description="Time the error was produced")
    code: Optional[str] = Field(None, description="Machine readable error code")
    errors: List[Dict[str, str]] = Field(
        default_factory=list,
        description="Field-level problems as {field, message} pairs",
    )
    context: Dict[str, Any] = Field(default_factory=dict, description="Extra error context")
