"""pytest configuration and fixtures for reasoning-demo tests.

Fixtures are minimal and focused: a scripted model client, a fixed
availability service, and a task controller wired to an output panel.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from reasoning_demo.core.config import get_settings
from reasoning_demo.core.logging import reset_logging
from reasoning_demo.orchestration.orchestrator import PromptOrchestrator
from reasoning_demo.providers.base import GenerationOptions
from reasoning_demo.services.availability import AvailabilityGate
from reasoning_demo.services.output_panel import OutputPanel
from reasoning_demo.services.task_controller import TaskController
from tests.unit.providers.mock_provider import ScriptedClient, StaticAvailability


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_env_vars() -> dict[str, str]:
    """Provide test environment variables."""
    return {
        "REASONING_PORT": "8086",
        "REASONING_HOST": "127.0.0.1",
        "REASONING_LOG_LEVEL": "DEBUG",
        "REASONING_MODEL_PATH": "test-models/model.gguf",
        "REASONING_MODEL_ID": "test-model",
    }


@pytest.fixture
def mock_env(test_env_vars: dict[str, str], monkeypatch: pytest.MonkeyPatch) -> None:
    """Set test environment variables."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop the cached Settings singleton around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    reset_logging()


# =============================================================================
# Model / Orchestration Fixtures
# =============================================================================


@pytest.fixture
def options() -> GenerationOptions:
    """Sampling options used in production (top-k 5, temperature 0.2)."""
    return GenerationOptions(top_k=5, temperature=0.2)


@pytest.fixture
def scripted_client() -> ScriptedClient:
    """Client answering every call with the default mock response."""
    return ScriptedClient()


@pytest.fixture
def availability() -> StaticAvailability:
    """Availability service reporting AVAILABLE."""
    return StaticAvailability()


@pytest.fixture
def panel() -> OutputPanel:
    return OutputPanel()


@pytest.fixture
def make_controller(
    options: GenerationOptions,
    availability: StaticAvailability,
    panel: OutputPanel,
):
    """Factory building a TaskController around a given client."""

    def _make(client: ScriptedClient) -> TaskController:
        orchestrator = PromptOrchestrator(client=client, options=options)
        return TaskController(orchestrator, AvailabilityGate(availability), listener=panel)

    return _make
