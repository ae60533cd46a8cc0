"""Availability gate for the on-device model.

The gate is consulted synchronously before a run starts. The availability
service reports one AvailabilityStatus; every status other than AVAILABLE
rejects the submission with its own stable user-visible message, and no
model call is made.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

from reasoning_demo.core.exceptions import ModelUnavailableError
from reasoning_demo.core.logging import get_logger
from reasoning_demo.providers.llamacpp import llama_cpp_installed


class AvailabilityStatus(str, Enum):
    """States reported by the availability service."""

    AVAILABLE = "available"
    DEVICE_INELIGIBLE = "device_ineligible"
    FEATURE_DISABLED = "feature_disabled"
    MODEL_DOWNLOADING = "model_downloading"
    UNKNOWN_UNAVAILABLE = "unknown_unavailable"


UNAVAILABLE_MESSAGES: MappingProxyType[AvailabilityStatus, str] = MappingProxyType(
    {
        AvailabilityStatus.DEVICE_INELIGIBLE: (
            "This device is not eligible for the on-device model."
        ),
        AvailabilityStatus.FEATURE_DISABLED: (
            "The on-device model is turned off. Enable it in the settings to continue."
        ),
        AvailabilityStatus.MODEL_DOWNLOADING: (
            "The model is still downloading or not ready yet. Please try again later."
        ),
        AvailabilityStatus.UNKNOWN_UNAVAILABLE: (
            "The on-device model is unavailable right now."
        ),
    }
)

PARTIAL_DOWNLOAD_SUFFIX = ".part"


class AvailabilityService(Protocol):
    """Reports whether the model can be used right now."""

    def check(self) -> AvailabilityStatus: ...


class LocalModelAvailability:
    """Availability of a local GGUF model served through llama.cpp.

    - backend not installed → DEVICE_INELIGIBLE
    - feature switched off → FEATURE_DISABLED
    - model file missing, empty or still being downloaded → MODEL_DOWNLOADING
    - filesystem error while probing → UNKNOWN_UNAVAILABLE
    """

    def __init__(
        self,
        model_path: Path | str,
        enabled: bool = True,
        backend_installed: Callable[[], bool] = llama_cpp_installed,
    ) -> None:
        self._model_path = Path(model_path)
        self._enabled = enabled
        self._backend_installed = backend_installed

    @property
    def model_path(self) -> Path:
        return self._model_path

    def check(self) -> AvailabilityStatus:
        if not self._backend_installed():
            return AvailabilityStatus.DEVICE_INELIGIBLE
        if not self._enabled:
            return AvailabilityStatus.FEATURE_DISABLED

        partial = self._model_path.with_name(self._model_path.name + PARTIAL_DOWNLOAD_SUFFIX)
        try:
            if partial.exists() or not self._model_path.is_file():
                return AvailabilityStatus.MODEL_DOWNLOADING
            if self._model_path.stat().st_size == 0:
                return AvailabilityStatus.MODEL_DOWNLOADING
        except OSError:
            return AvailabilityStatus.UNKNOWN_UNAVAILABLE

        return AvailabilityStatus.AVAILABLE


def message_for(status: AvailabilityStatus) -> str | None:
    """User-visible message for an unavailability reason (None when available)."""
    return UNAVAILABLE_MESSAGES.get(status)


class AvailabilityGate:
    """Precondition check consulted before every run.

    Example:
        gate = AvailabilityGate(LocalModelAvailability("/models/phi-4.gguf"))
        gate.ensure_available()  # raises ModelUnavailableError when rejected
    """

    def __init__(self, service: AvailabilityService) -> None:
        self._service = service
        self._logger = get_logger(__name__)

    @property
    def service(self) -> AvailabilityService:
        return self._service

    def status(self) -> AvailabilityStatus:
        return AvailabilityStatus(self._service.check())

    def ensure_available(self) -> None:
        """Proceed, or reject with the reason reported by the service.

        Raises:
            ModelUnavailableError: If the service reports anything but AVAILABLE.
        """
        status = self.status()
        if status is AvailabilityStatus.AVAILABLE:
            return

        message = UNAVAILABLE_MESSAGES[status]
        self._logger.warning("Model unavailable", reason=status.value)
        raise ModelUnavailableError(reason=status, message=message)
