"""Settings for reasoning-demo, read from REASONING_* environment variables.

Sampling (top-k, temperature) is part of the settings so it stays fixed for
the lifetime of the process; nothing tunes it per request.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from reasoning_demo.core.constants import (
    DEFAULT_CONTEXT_LENGTH,
    DEFAULT_ENVIRONMENT,
    DEFAULT_GPU_LAYERS,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODEL_ID,
    DEFAULT_MODEL_PATH,
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_K,
)
from reasoning_demo.providers.base import GenerationOptions


LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Runtime configuration.

    Example:
        REASONING_MODEL_PATH=/models/phi-4.gguf REASONING_MODEL_ENABLED=false

    model_enabled=False makes the availability gate reject every submission
    with the "turned off" message. top_k and temperature become the
    GenerationOptions passed unchanged to every model call.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Name reported by /health and in logs",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="Port the API listens on",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        description="Interface the API binds to",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default=DEFAULT_ENVIRONMENT,
        description="development, staging or production (docs are off in production)",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Lowest emitted log level",
    )

    # =========================================================================
    # Model Configuration
    # =========================================================================
    model_path: str = Field(
        default=DEFAULT_MODEL_PATH,
        description="Path to the GGUF model file",
    )
    model_id: str = Field(
        default=DEFAULT_MODEL_ID,
        description="Model identifier",
    )
    context_length: int = Field(
        default=DEFAULT_CONTEXT_LENGTH,
        ge=256,
        description="Context window in tokens",
    )
    gpu_layers: int = Field(
        default=DEFAULT_GPU_LAYERS,
        description="Layers offloaded to GPU or Metal, -1 for all",
    )
    model_enabled: bool = Field(
        default=True,
        description="Whether the on-device model feature is enabled",
    )

    # =========================================================================
    # Sampling (fixed, no runtime tuning)
    # =========================================================================
    top_k: int = Field(
        default=DEFAULT_TOP_K,
        ge=1,
        description="Restrict sampling to the top-k candidates",
    )
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )

    # =========================================================================
    # Settings Source
    # =========================================================================
    model_config = {
        "env_prefix": "REASONING_",
        "case_sensitive": False,
        "extra": "ignore",
        "protected_namespaces": (),
    }

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Upper-case the level name and reject unknown levels."""
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}, got '{value}'")
        return normalized

    def generation_options(self) -> GenerationOptions:
        """Build the sampling options passed to every model call."""
        return GenerationOptions(top_k=self.top_k, temperature=self.temperature)


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, read from the environment on first call."""
    return Settings()
