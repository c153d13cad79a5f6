"""Tests for API endpoints."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from villa_onboarding.api.v1.endpoints import health
from villa_onboarding.api.v1.endpoints.onboarding import get_onboarding_service
from villa_onboarding.core.exceptions import (
    FieldError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    VersionConflictError,
)
from villa_onboarding.main import app
from villa_onboarding.services.onboarding_service import StageSubmissionResult
from villa_onboarding.services.stage_persister import BatchResult


@pytest.fixture
def mock_service() -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[get_onboarding_service] = lambda: service
    return service


@pytest.fixture
def sample_progress() -> dict:
    return {
        "villa_id": str(uuid4()),
        "current_step": 1,
        "status": "IN_PROGRESS",
        "overall_percentage": 0,
        "label": "NOT_STARTED",
        "steps": [],
        "flags": {},
    }


class TestOnboardingEndpoints:
    """Test suite for onboarding API endpoints.

    The service is replaced with a mock; these tests cover request parsing,
    response envelopes and error translation.
    """

    def test_start_onboarding(
        self, test_client: TestClient, mock_service: AsyncMock, sample_progress: dict
    ) -> None:
        mock_service.start_onboarding.return_value = sample_progress

        response = test_client.post(
            "/api/v1/onboarding/start",
            json={"villaName": "Villa Serenity"},
            headers={"X-User-Id": "user-1"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] is True
        assert body["data"]["villa_id"] == sample_progress["villa_id"]
        assert body["meta"]["api_version"] == "v1"
        mock_service.start_onboarding.assert_awaited_once_with("Villa Serenity", user_id="user-1")

    def test_start_onboarding_missing_name(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        response = test_client.post("/api/v1/onboarding/start", json={})

        assert response.status_code == 422
        mock_service.start_onboarding.assert_not_awaited()

    def test_submit_step(
        self, test_client: TestClient, mock_service: AsyncMock, sample_progress: dict
    ) -> None:
        villa_id = uuid4()
        mock_service.submit_stage.return_value = StageSubmissionResult(
            progress=sample_progress,
            version=3,
            batch=BatchResult(updated=1),
        )

        response = test_client.put(
            f"/api/v1/onboarding/{villa_id}/step",
            json={"step": 2, "data": {"ownerEmail": "ayu@example.com"}, "completed": True, "version": 2},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["version"] == 3
        assert data["batch"]["updated"] == 1
        assert data["progress"]["status"] == "IN_PROGRESS"
        mock_service.submit_stage.assert_awaited_once_with(
            villa_id,
            2,
            {"ownerEmail": "ayu@example.com"},
            completed=True,
            is_auto_save=False,
            version=2,
            user_id=None,
        )

    def test_autosave_uses_auto_save_mode(
        self, test_client: TestClient, mock_service: AsyncMock, sample_progress: dict
    ) -> None:
        villa_id = uuid4()
        mock_service.submit_stage.return_value = StageSubmissionResult(
            progress=sample_progress, version=1, batch=BatchResult()
        )

        response = test_client.patch(
            f"/api/v1/onboarding/{villa_id}/step/1",
            json={"data": {"villaCity": "Canggu"}, "version": 0},
        )

        assert response.status_code == 200
        kwargs = mock_service.submit_stage.await_args.kwargs
        assert kwargs["is_auto_save"] is True
        assert kwargs["completed"] is False
        assert kwargs["version"] == 0

    def test_autosave_requires_version(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        response = test_client.patch(
            f"/api/v1/onboarding/{uuid4()}/step/1",
            json={"data": {"villaCity": "Canggu"}},
        )

        assert response.status_code == 422

    def test_version_conflict_returns_409(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        villa_id = uuid4()
        mock_service.submit_stage.side_effect = VersionConflictError(villa_id, 1, 0, current_version=2)

        response = test_client.patch(
            f"/api/v1/onboarding/{villa_id}/step/1",
            json={"data": {"villaCity": "Canggu"}, "version": 0},
        )

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "VERSION_CONFLICT"
        assert detail["context"] == {"step": 1, "supplied_version": 0, "current_version": 2}

    def test_validation_error_returns_422_with_field_errors(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.submit_stage.side_effect = ValidationError(
            "Validation failed for step 4",
            errors=[
                FieldError("bankName", "bankName is required"),
                FieldError("accountNumber", "accountNumber is required"),
            ],
        )

        response = test_client.put(
            f"/api/v1/onboarding/{uuid4()}/step",
            json={"step": 4, "data": {}, "completed": True},
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == "VALIDATION_ERROR"
        assert [error["field"] for error in detail["errors"]] == ["bankName", "accountNumber"]

    def test_unknown_villa_returns_404(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        mock_service.get_aggregate_progress.side_effect = NotFoundError("Villa not found")

        response = test_client.get(f"/api/v1/onboarding/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOT_FOUND"

    def test_persistence_error_returns_503(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        mock_service.get_field_progress.side_effect = PersistenceError("database is locked")

        response = test_client.get(f"/api/v1/onboarding/{uuid4()}/field-progress/2")

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "PERSISTENCE_ERROR"

    def test_invalid_villa_id(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        response = test_client.get("/api/v1/onboarding/not-a-uuid")

        assert response.status_code == 422

    def test_validate_step_message(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        mock_service.validate_step.return_value = {
            "step": 4,
            "is_valid": False,
            "errors": ["bankName: bankName is required"],
            "warnings": [],
        }

        response = test_client.get(f"/api/v1/onboarding/{uuid4()}/validate/4")

        assert response.status_code == 200
        assert response.json()["message"] == "Step has validation errors"

    def test_complete_onboarding_incomplete(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        mock_service.complete_onboarding.side_effect = ValidationError(
            "Onboarding cannot be completed: 1 of 10 steps incomplete",
            errors=[FieldError("photos", "No photos")],
        )

        response = test_client.post(f"/api/v1/onboarding/{uuid4()}/complete")

        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == [{"field": "photos", "message": "No photos"}]


class TestServiceEndpoints:

    def test_root(self, test_client: TestClient) -> None:
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_health_reports_database_status(self, test_client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(
            health.db_client, "health_check", AsyncMock(return_value={"status": "healthy"})
        )

        response = test_client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "healthy"

    def test_correlation_id_is_echoed(self, test_client: TestClient) -> None:
        response = test_client.get("/", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"
