"""Exception → HTTP response mapping.

Every failure leaves the API in one envelope:

    {"error": {"code": "EMPTY_INPUT", "message": "Please enter a question.",
               "provider": "reasoning-demo", "details": null}}

Submission rejections map to 4xx/503 so a client can tell a bad request
from a busy controller or an unavailable model; failed model calls are 502.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from reasoning_demo.core.exceptions import (
    AlreadyRunningError,
    EmptyInputError,
    ErrorCode,
    ModelUnavailableError,
    NoModeSelectedError,
    ReasoningDemoError,
    ServiceError,
)


PROVIDER_NAME = "reasoning-demo"

DETAIL_ATTRIBUTES = ("model_id", "run_id", "reason", "stage")

_STATUS_BY_TYPE: tuple[tuple[type[Exception], int], ...] = (
    (EmptyInputError, 400),
    (NoModeSelectedError, 400),
    (AlreadyRunningError, 409),
    (ModelUnavailableError, 503),
    (ServiceError, 502),
)


class ErrorDetail(BaseModel):
    code: str
    message: str
    provider: str = PROVIDER_NAME
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


# =============================================================================
# Mapping
# =============================================================================


def get_status_code_for_error(error: Exception) -> int:
    """First matching entry of _STATUS_BY_TYPE, 500 for anything else."""
    for error_type, status_code in _STATUS_BY_TYPE:
        if isinstance(error, error_type):
            return status_code
    return 500


def extract_error_details(error: Exception) -> dict[str, Any]:
    """Collect the identifying attributes an exception carries.

    Enum values (e.g. an AvailabilityStatus reason) are reported by value.
    """
    details: dict[str, Any] = {}
    for attr in DETAIL_ATTRIBUTES:
        value = getattr(error, attr, None)
        if value is not None:
            details[attr] = value.value if isinstance(value, Enum) else value
    return details


def build_error_response(error: Exception) -> ErrorResponse:
    return ErrorResponse(
        error=ErrorDetail(
            code=getattr(error, "error_code", ErrorCode.DEMO_ERROR.value),
            message=getattr(error, "message", str(error)),
            details=extract_error_details(error) or None,
        )
    )


# =============================================================================
# Handlers
# =============================================================================


async def demo_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a ReasoningDemoError with its mapped status code."""
    if not isinstance(exc, ReasoningDemoError):
        return await generic_error_handler(request, exc)

    return JSONResponse(
        status_code=get_status_code_for_error(exc),
        content=build_error_response(exc).model_dump(),
    )


async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: 500 with the exception text."""
    body = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.DEMO_ERROR.value,
            message=f"Internal server error: {exc!s}",
        )
    )
    return JSONResponse(status_code=500, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReasoningDemoError, demo_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
