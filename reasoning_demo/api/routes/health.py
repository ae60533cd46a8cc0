"""Health check API routes for reasoning-demo.

Provides liveness (/health) and readiness (/health/ready) endpoints.
Readiness is answered by the availability gate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from reasoning_demo import __version__
from reasoning_demo.core.constants import DEFAULT_SERVICE_NAME
from reasoning_demo.services.availability import AvailabilityStatus, message_for


if TYPE_CHECKING:
    from reasoning_demo.services.availability import AvailabilityGate


STATUS_OK = "ok"
STATUS_READY = "ready"
STATUS_NOT_READY = "not_ready"
REASON_NOT_INITIALIZED = "not_initialized"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /health liveness endpoint."""

    status: str = Field(default=STATUS_OK, description="Service health status")
    service: str = Field(default=DEFAULT_SERVICE_NAME, description="Service name")
    version: str = Field(default=__version__, description="Service version")


class ReadinessResponse(BaseModel):
    """Response model for /health/ready readiness endpoint."""

    status: str = Field(description="Readiness status", examples=["ready", "not_ready"])
    model_id: str | None = Field(default=None, description="Configured model ID")
    reason: str | None = Field(
        default=None,
        description="Availability status when not ready",
        examples=["model_downloading"],
    )
    message: str | None = Field(default=None, description="User-visible reason")


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def health_check(request: Request) -> HealthResponse:
    """Process is up; says nothing about the model."""
    service_name = getattr(request.app.state, "service_name", DEFAULT_SERVICE_NAME)
    return HealthResponse(service=service_name)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Model is available", "model": ReadinessResponse},
        503: {"description": "Model is not available", "model": ReadinessResponse},
    },
    summary="Readiness check",
)
async def readiness_check(request: Request) -> JSONResponse:
    """Ready exactly when the availability gate would accept a submission.

    503 responses carry the same reason and message a rejected submission
    would show.
    """
    gate: AvailabilityGate | None = getattr(request.app.state, "gate", None)
    model_id: str | None = getattr(request.app.state, "model_id", None)

    if gate is None:
        response = ReadinessResponse(status=STATUS_NOT_READY, reason=REASON_NOT_INITIALIZED)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(exclude_none=True),
        )

    availability = gate.status()
    if availability is not AvailabilityStatus.AVAILABLE:
        response = ReadinessResponse(
            status=STATUS_NOT_READY,
            model_id=model_id,
            reason=availability.value,
            message=message_for(availability),
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(exclude_none=True),
        )

    response = ReadinessResponse(status=STATUS_READY, model_id=model_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(exclude_none=True),
    )
