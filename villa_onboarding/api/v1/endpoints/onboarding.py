from typing import Annotated, Any, Dict, NoReturn, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.core.database import get_async_session as get_session
from villa_onboarding.core.exceptions import (
    AppError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    VersionConflictError,
)
from villa_onboarding.schemas.common import ApiResponse
from villa_onboarding.schemas.onboarding import (
    AutoSaveRequest,
    StageSubmissionRequest,
    StartOnboardingRequest,
)
from villa_onboarding.services.onboarding_service import OnboardingService, StageSubmissionResult
from villa_onboarding.utils.logging import get_logger
from villa_onboarding.utils.responses import create_api_response, create_error_detail

LOGGER = get_logger(__name__)

router = APIRouter()

UserId = Annotated[Optional[str], Header(alias="X-User-Id", description="Acting user ID")]


async def get_onboarding_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> OnboardingService:
    return OnboardingService(db_session)


def raise_http_error(error: AppError, request: Request) -> NoReturn:
    """Translate a service error into an HTTPException with a problem body."""
    if isinstance(error, VersionConflictError):
        detail = create_error_detail(
            title="Version Conflict",
            status=status.HTTP_409_CONFLICT,
            detail=str(error),
            request=request,
            code="VERSION_CONFLICT",
            context={
                "step": error.step,
                "supplied_version": error.supplied_version,
                "current_version": error.current_version,
            },
        )
    elif isinstance(error, ValidationError):
        detail = create_error_detail(
            title="Validation Failed",
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(error),
            request=request,
            code="VALIDATION_ERROR",
            errors=error.errors,
        )
    elif isinstance(error, NotFoundError):
        detail = create_error_detail(
            title="Not Found",
            status=status.HTTP_404_NOT_FOUND,
            detail=str(error),
            request=request,
            code="NOT_FOUND",
        )
    elif isinstance(error, PersistenceError):
        LOGGER.error(f"Persistence failure on {request.url.path}: {error}", exc_info=True)
        detail = create_error_detail(
            title="Service Unavailable",
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The onboarding store is unavailable, please retry",
            request=request,
            code="PERSISTENCE_ERROR",
        )
    else:
        LOGGER.error(f"Onboarding request failed on {request.url.path}: {error}", exc_info=True)
        detail = create_error_detail(
            title="Internal Server Error",
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(error),
            request=request,
            code="INTERNAL_ERROR",
        )
    raise HTTPException(status_code=detail.status, detail=detail.model_dump(mode="json"))


def _submission_data(result: StageSubmissionResult) -> Dict[str, Any]:
    return {
        "version": result.version,
        "batch": result.batch.to_dict(),
        "progress": result.progress,
    }


@router.post(
    "/start",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start onboarding a villa",
    operation_id="start_villa_onboarding",
)
async def start_onboarding(
    request: Request,
    payload: StartOnboardingRequest,
    user_id: UserId = None,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    """Create a villa record with its progress rows."""
    try:
        progress = await service.start_onboarding(payload.villa_name, user_id=user_id)
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=progress,
        message="Onboarding started",
        request=request,
    )


@router.get(
    "/{villa_id}",
    response_model=ApiResponse,
    summary="Get aggregate onboarding progress",
    operation_id="get_villa_onboarding_progress",
)
async def get_progress(
    request: Request,
    villa_id: UUID,
    user_id: UserId = None,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    try:
        progress = await service.get_aggregate_progress(villa_id, user_id=user_id)
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=progress,
        message="Onboarding progress retrieved",
        request=request,
    )


@router.put(
    "/{villa_id}/step",
    response_model=ApiResponse,
    summary="Submit an onboarding stage",
    operation_id="submit_villa_onboarding_step",
)
async def submit_step(
    request: Request,
    villa_id: UUID,
    payload: StageSubmissionRequest,
    user_id: UserId = None,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    """Submit a stage as a draft or, with ``completed``, as final."""
    try:
        result = await service.submit_stage(
            villa_id,
            payload.step,
            payload.data,
            completed=payload.completed,
            is_auto_save=payload.is_auto_save,
            version=payload.version,
            user_id=user_id,
        )
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=_submission_data(result),
        message=f"Step {payload.step} saved",
        request=request,
    )


@router.patch(
    "/{villa_id}/step/{step}",
    response_model=ApiResponse,
    summary="Auto-save an onboarding stage",
    operation_id="autosave_villa_onboarding_step",
)
async def autosave_step(
    request: Request,
    villa_id: UUID,
    step: int,
    payload: AutoSaveRequest,
    user_id: UserId = None,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    """Background save of a partial stage; rejected with 409 on a stale version."""
    try:
        result = await service.submit_stage(
            villa_id,
            step,
            payload.data,
            completed=False,
            is_auto_save=True,
            version=payload.version,
            user_id=user_id,
        )
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=_submission_data(result),
        message=f"Step {step} auto-saved",
        request=request,
    )


@router.get(
    "/{villa_id}/field-progress/{step}",
    response_model=ApiResponse,
    summary="Get stored field values of a stage",
    operation_id="get_villa_onboarding_field_progress",
)
async def get_field_progress(
    request: Request,
    villa_id: UUID,
    step: int,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    try:
        fields = await service.get_field_progress(villa_id, step)
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=fields,
        message="Field progress retrieved",
        request=request,
    )


@router.get(
    "/{villa_id}/validate/{step}",
    response_model=ApiResponse,
    summary="Validate persisted stage data",
    operation_id="validate_villa_onboarding_step",
)
async def validate_step(
    request: Request,
    villa_id: UUID,
    step: int,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    try:
        result = await service.validate_step(villa_id, step)
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=result,
        message="Step is valid" if result["is_valid"] else "Step has validation errors",
        request=request,
    )


@router.post(
    "/{villa_id}/complete",
    response_model=ApiResponse,
    summary="Complete onboarding",
    operation_id="complete_villa_onboarding",
)
async def complete_onboarding(
    request: Request,
    villa_id: UUID,
    user_id: UserId = None,
    service: Annotated[OnboardingService, Depends(get_onboarding_service)] = None,
) -> ApiResponse:
    """Finish onboarding; fails with 422 listing incomplete stages."""
    try:
        progress = await service.complete_onboarding(villa_id, user_id=user_id)
    except AppError as e:
        raise_http_error(e, request)

    return create_api_response(
        data=progress,
        message="Onboarding completed",
        request=request,
    )
