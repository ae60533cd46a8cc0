"""Custom exceptions for reasoning-demo.

All custom exceptions end in "Error" and carry a machine-readable ErrorCode.

Exception Hierarchy:
    ReasoningDemoError (base)
    ├── ServiceError (model call failed or was rejected)
    │   ├── ModelFileNotFoundError
    │   └── ModelLoadError
    ├── AlreadyRunningError
    ├── EmptyInputError
    ├── NoModeSelectedError
    ├── ModelUnavailableError
    └── RunCancelledError

None of these are retried automatically; a failed run must be resubmitted.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from reasoning_demo.core.constants import STATUS_CANCELED, STATUS_EMPTY_INPUT, STATUS_NO_MODE


if TYPE_CHECKING:
    from reasoning_demo.services.availability import AvailabilityStatus


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Stable identifiers reported as `error.code` in API error bodies."""

    DEMO_ERROR = "DEMO_ERROR"

    SERVICE_ERROR = "SERVICE_ERROR"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    MODEL_LOAD_FAILED = "MODEL_LOAD_FAILED"

    ALREADY_RUNNING = "ALREADY_RUNNING"
    EMPTY_INPUT = "EMPTY_INPUT"
    NO_MODE_SELECTED = "NO_MODE_SELECTED"
    MODEL_UNAVAILABLE = "MODEL_UNAVAILABLE"
    RUN_CANCELLED = "RUN_CANCELLED"


# =============================================================================
# Base Exception
# =============================================================================


class ReasoningDemoError(Exception):
    """Root of the reasoning-demo exception tree.

    `message` is what the user sees; `error_code` is the ErrorCode value.
    Extra keyword arguments become attributes and are surfaced as error
    details by the API.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.DEMO_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Model Service Errors
# =============================================================================


class ServiceError(ReasoningDemoError):
    """A model call failed, was rejected, or was aborted mid-flight.

    Attributes:
        model_id: ID of the model that failed, if known.
    """

    def __init__(
        self,
        message: str,
        model_id: str | None = None,
        error_code: str | ErrorCode = ErrorCode.SERVICE_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.model_id = model_id


class ModelFileNotFoundError(ServiceError):
    """The configured model file does not exist on disk."""

    def __init__(self, message: str, model_id: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message,
            model_id=model_id,
            error_code=ErrorCode.MODEL_NOT_FOUND,
            **kwargs,
        )


class ModelLoadError(ServiceError):
    """The model could not be loaded into memory."""

    def __init__(self, message: str, model_id: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message,
            model_id=model_id,
            error_code=ErrorCode.MODEL_LOAD_FAILED,
            **kwargs,
        )


# =============================================================================
# Submission Errors (raised before a run starts)
# =============================================================================


class AlreadyRunningError(ReasoningDemoError):
    """A submission arrived while another run is still active.

    Attributes:
        run_id: ID of the run that is currently active.
    """

    def __init__(self, run_id: str | None = None, **kwargs: Any) -> None:
        message = "A run is already in progress"
        if run_id:
            message = f"Run {run_id} is already in progress"
        super().__init__(message, error_code=ErrorCode.ALREADY_RUNNING, **kwargs)
        self.run_id = run_id


class EmptyInputError(ReasoningDemoError):
    """The submitted question is blank after trimming."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(STATUS_EMPTY_INPUT, error_code=ErrorCode.EMPTY_INPUT, **kwargs)


class NoModeSelectedError(ReasoningDemoError):
    """Submission attempted while no prompting mode is selected."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(STATUS_NO_MODE, error_code=ErrorCode.NO_MODE_SELECTED, **kwargs)


class ModelUnavailableError(ReasoningDemoError):
    """The availability gate rejected the submission.

    Attributes:
        reason: The AvailabilityStatus that caused the rejection.
    """

    def __init__(
        self,
        reason: AvailabilityStatus,
        message: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code=ErrorCode.MODEL_UNAVAILABLE, **kwargs)
        self.reason = reason


# =============================================================================
# Cancellation
# =============================================================================


class RunCancelledError(ReasoningDemoError):
    """The user cancelled the run. Not a failure.

    Attributes:
        run_id: ID of the cancelled run.
        stage: Stage at which the cancellation was observed.
    """

    def __init__(
        self,
        run_id: str | None = None,
        stage: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(STATUS_CANCELED, error_code=ErrorCode.RUN_CANCELLED, **kwargs)
        self.run_id = run_id
        self.stage = stage
