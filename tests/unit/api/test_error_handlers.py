"""Tests for API error handlers.

Tests verify:
- Status code mapping per exception type
- Error response schema {"error": {code, message, provider, details}}
- Handlers registered on a FastAPI app return structured JSON
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from reasoning_demo.api.error_handlers import (
    ErrorResponse,
    build_error_response,
    extract_error_details,
    get_status_code_for_error,
    register_exception_handlers,
)
from reasoning_demo.core.exceptions import (
    AlreadyRunningError,
    EmptyInputError,
    ModelLoadError,
    ModelUnavailableError,
    NoModeSelectedError,
    ReasoningDemoError,
    ServiceError,
)
from reasoning_demo.services.availability import AvailabilityStatus


# =============================================================================
# Status Code Mapping
# =============================================================================


class TestStatusCodeMapping:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (EmptyInputError(), 400),
            (NoModeSelectedError(), 400),
            (AlreadyRunningError(), 409),
            (ModelUnavailableError(AvailabilityStatus.FEATURE_DISABLED, "off"), 503),
            (ServiceError("boom"), 502),
            (ModelLoadError("bad"), 502),
            (ReasoningDemoError("x"), 500),
            (RuntimeError("x"), 500),
        ],
    )
    def test_status_codes(self, error: Exception, expected: int) -> None:
        assert get_status_code_for_error(error) == expected


# =============================================================================
# Response Building
# =============================================================================


class TestBuildErrorResponse:
    def test_response_schema(self) -> None:
        response = build_error_response(EmptyInputError())

        assert isinstance(response, ErrorResponse)
        assert response.error.code == "EMPTY_INPUT"
        assert response.error.message == "Please enter a question."
        assert response.error.provider == "reasoning-demo"
        assert response.error.details is None

    def test_enum_details_serialized_by_value(self) -> None:
        error = ModelUnavailableError(AvailabilityStatus.MODEL_DOWNLOADING, "wait")
        assert extract_error_details(error) == {"reason": "model_downloading"}

    def test_model_id_in_details(self) -> None:
        response = build_error_response(ServiceError("boom", model_id="phi-4"))
        assert response.error.details == {"model_id": "phi-4"}


# =============================================================================
# Registered Handlers
# =============================================================================


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/busy")
    async def busy() -> None:
        raise AlreadyRunningError(run_id="run-1")

    @app.get("/unavailable")
    async def unavailable() -> None:
        raise ModelUnavailableError(
            AvailabilityStatus.DEVICE_INELIGIBLE,
            "This device is not eligible for the on-device model.",
        )

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("unexpected")

    return app


class TestRegisteredHandlers:
    def test_already_running_returns_409(self, error_app: FastAPI) -> None:
        client = TestClient(error_app)

        response = client.get("/busy")

        assert response.status_code == 409
        body = response.json()
        assert body["error"]["code"] == "ALREADY_RUNNING"
        assert body["error"]["details"] == {"run_id": "run-1"}

    def test_unavailable_returns_503(self, error_app: FastAPI) -> None:
        client = TestClient(error_app)

        response = client.get("/unavailable")

        assert response.status_code == 503
        assert response.json()["error"]["details"]["reason"] == "device_ineligible"

    def test_unexpected_error_returns_500(self, error_app: FastAPI) -> None:
        client = TestClient(error_app, raise_server_exceptions=False)

        response = client.get("/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["code"] == "DEMO_ERROR"
        assert "unexpected" in body["error"]["message"]
