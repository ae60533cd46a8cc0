"""FastAPI application entrypoint for reasoning-demo.

Patterns applied:
- asynccontextmanager lifespan
- logging configured by the lifespan, before any component logs
- Health endpoints (/health, /health/ready)
- Docs disabled in production

Run with:
    uvicorn reasoning_demo.main:app --port 8086
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from reasoning_demo import __version__
from reasoning_demo.api.error_handlers import register_exception_handlers
from reasoning_demo.api.routes.health import router as health_router
from reasoning_demo.api.routes.session import router as session_router
from reasoning_demo.core.config import Settings, get_settings
from reasoning_demo.core.logging import configure_logging, get_logger
from reasoning_demo.orchestration.orchestrator import PromptOrchestrator
from reasoning_demo.orchestration.strategy import StrategySelector
from reasoning_demo.providers.base import ModelClient
from reasoning_demo.providers.llamacpp import LlamaCppClient
from reasoning_demo.services.availability import (
    AvailabilityGate,
    AvailabilityService,
    LocalModelAvailability,
)
from reasoning_demo.services.output_panel import OutputPanel
from reasoning_demo.services.task_controller import TaskController


# =============================================================================
# Application Metadata
# =============================================================================
APP_NAME = "reasoning-demo"
APP_DESCRIPTION = "Zero-shot, chain-of-thought and self-consistency prompting on a local model"


def init_app_state(
    app: FastAPI,
    settings: Settings,
    client: ModelClient | None = None,
    availability: AvailabilityService | None = None,
) -> None:
    """Wire the selector, gate, orchestrator and controller onto app.state.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
        client: Model client. Defaults to a llama.cpp client for settings.model_path.
        availability: Availability service. Defaults to the local model check.
    """
    if client is None:
        # The file may still be downloading; the gate reports that before any call
        client = LlamaCppClient(
            model_path=settings.model_path,
            model_id=settings.model_id,
            context_length=settings.context_length,
            n_gpu_layers=settings.gpu_layers,
            validate_path=False,
        )
    if availability is None:
        availability = LocalModelAvailability(
            model_path=settings.model_path,
            enabled=settings.model_enabled,
        )

    gate = AvailabilityGate(availability)
    panel = OutputPanel()
    orchestrator = PromptOrchestrator(client=client, options=settings.generation_options())

    app.state.service_name = settings.service_name
    app.state.client = client
    app.state.model_id = client.model_info.model_id
    app.state.gate = gate
    app.state.selector = StrategySelector()
    app.state.panel = panel
    app.state.controller = TaskController(orchestrator, gate, listener=panel)


# =============================================================================
# Lifespan Context Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and wire app.state on startup.

    On shutdown the active run (if any) is stopped before the model is
    released.
    """
    settings = get_settings()

    configure_logging(level=settings.log_level)
    logger = get_logger(__name__)

    logger.info(
        "Application starting",
        service=settings.service_name,
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        model_id=settings.model_id,
    )

    init_app_state(app, settings)
    app.state.initialized = True

    yield

    logger.info("Application shutting down", service=settings.service_name)
    await app.state.controller.shutdown()
    await app.state.client.unload()
    app.state.initialized = False


# =============================================================================
# FastAPI Application Instance
# =============================================================================
settings = get_settings()

app = FastAPI(
    title=APP_NAME,
    description=APP_DESCRIPTION,
    version=__version__,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(session_router, prefix="/v1")

register_exception_handlers(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "reasoning_demo.main:app",
        host=settings.host,
        port=settings.port,
    )
