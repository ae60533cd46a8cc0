"""Tests for the session endpoints (/v1/modes, /v1/mode, /v1/submit, /v1/cancel, /v1/output).

Runs execute on the TestClient's event loop, so each test keeps the
client open with a ``with`` block and polls /v1/output until idle.
"""

import time
from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from reasoning_demo.api.error_handlers import register_exception_handlers
from reasoning_demo.api.routes.session import router
from reasoning_demo.core.config import Settings
from reasoning_demo.main import init_app_state
from reasoning_demo.services.availability import AvailabilityStatus
from tests.unit.providers.mock_provider import ScriptedClient, StaticAvailability


POLL_TIMEOUT_SECONDS = 5.0


def _wait_idle(client: TestClient) -> dict:
    deadline = time.monotonic() + POLL_TIMEOUT_SECONDS
    while True:
        body = client.get("/v1/output").json()
        if body["state"] == "idle" or time.monotonic() > deadline:
            return body
        time.sleep(0.01)


@pytest.fixture
def model_client() -> ScriptedClient:
    return ScriptedClient(responses=["4"])


@pytest.fixture
def availability() -> StaticAvailability:
    return StaticAvailability()


@pytest.fixture
def app(model_client: ScriptedClient, availability: StaticAvailability) -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix="/v1")
    register_exception_handlers(app)
    init_app_state(app, Settings(), client=model_client, availability=availability)
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Modes
# =============================================================================


class TestModes:
    def test_list_modes(self, client: TestClient) -> None:
        body = client.get("/v1/modes").json()

        assert [m["label"] for m in body["modes"]] == [
            "Zero-Shot",
            "Zero-Shot-CoT",
            "Self-Consistency",
        ]
        assert body["selected"]["mode"] == "none"
        assert body["selected"]["description"] == "Please select a mode"

    def test_select_mode(self, client: TestClient) -> None:
        response = client.put("/v1/mode", json={"mode": "zero_shot_cot"})

        assert response.status_code == 200
        assert response.json()["label"] == "Zero-Shot-CoT"
        assert client.get("/v1/modes").json()["selected"]["mode"] == "zero_shot_cot"

    def test_select_invalid_mode_returns_422(self, client: TestClient) -> None:
        response = client.put("/v1/mode", json={"mode": "tree_of_thought"})
        assert response.status_code == 422


# =============================================================================
# Submit
# =============================================================================


class TestSubmit:
    def test_zero_shot_round_trip(
        self, client: TestClient, model_client: ScriptedClient
    ) -> None:
        client.put("/v1/mode", json={"mode": "zero_shot"})

        response = client.post("/v1/submit", json={"text": "What is 2+2?"})

        assert response.status_code == 202
        assert response.json()["mode"] == "zero_shot"
        body = _wait_idle(client)
        assert body["output"] == "4"
        assert body["kind"] == "result"
        assert model_client.instructions == [""]

    def test_submit_without_mode_returns_400(
        self, client: TestClient, model_client: ScriptedClient
    ) -> None:
        response = client.post("/v1/submit", json={"text": "Q"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NO_MODE_SELECTED"
        assert client.get("/v1/output").json()["output"] == "Please select a mode"
        assert model_client.calls == []

    def test_empty_question_returns_400(
        self, client: TestClient, model_client: ScriptedClient
    ) -> None:
        client.put("/v1/mode", json={"mode": "zero_shot"})

        response = client.post("/v1/submit", json={"text": "   "})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please enter a question."
        assert model_client.calls == []

    def test_unavailable_model_returns_503(
        self,
        client: TestClient,
        availability: StaticAvailability,
        model_client: ScriptedClient,
    ) -> None:
        availability.status = AvailabilityStatus.FEATURE_DISABLED
        client.put("/v1/mode", json={"mode": "self_consistency"})

        response = client.post("/v1/submit", json={"text": "Q"})

        assert response.status_code == 503
        assert response.json()["error"]["details"]["reason"] == "feature_disabled"
        assert model_client.calls == []


# =============================================================================
# Busy / Cancel
# =============================================================================


@pytest.fixture
def slow_client() -> ScriptedClient:
    return ScriptedClient(responses=["late"], delays=[0.5])


@pytest.fixture
def slow_app(slow_client: ScriptedClient) -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix="/v1")
    register_exception_handlers(app)
    init_app_state(app, Settings(), client=slow_client, availability=StaticAvailability())
    return app


class TestBusyAndCancel:
    def test_second_submit_returns_409(self, slow_app: FastAPI) -> None:
        with TestClient(slow_app) as client:
            client.put("/v1/mode", json={"mode": "zero_shot"})

            assert client.post("/v1/submit", json={"text": "Q1"}).status_code == 202
            response = client.post("/v1/submit", json={"text": "Q2"})

            assert response.status_code == 409
            assert response.json()["error"]["code"] == "ALREADY_RUNNING"
            assert _wait_idle(client)["output"] == "late"

    def test_cancel_discards_answer(self, slow_app: FastAPI) -> None:
        with TestClient(slow_app) as client:
            client.put("/v1/mode", json={"mode": "zero_shot"})
            client.post("/v1/submit", json={"text": "Q"})

            response = client.post("/v1/cancel")

            assert response.json() == {"cancelled": True, "status": "Canceled."}
            body = _wait_idle(client)
            assert body["output"] == "Canceled."
            assert body["state"] == "idle"

    def test_cancel_when_idle(self, client: TestClient) -> None:
        response = client.post("/v1/cancel")

        assert response.json() == {
            "cancelled": False,
            "status": "Output will appear here.",
        }

    def test_mode_change_does_not_affect_running_run(
        self, slow_app: FastAPI, slow_client: ScriptedClient
    ) -> None:
        with TestClient(slow_app) as client:
            client.put("/v1/mode", json={"mode": "zero_shot"})
            client.post("/v1/submit", json={"text": "Q"})
            client.put("/v1/mode", json={"mode": "self_consistency"})

            _wait_idle(client)

            assert len(slow_client.calls) == 1
            assert slow_client.instructions == [""]
