"""Base classes for model clients.

Defines the ModelClient ABC (Abstract Base Class) that all concrete
model adapters must implement, plus the sampling options passed to
every call.

Patterns applied:
- ABC with @abstractmethod decorator
- Template method: generate() = prewarm() + complete()
- Frozen dataclass for immutable sampling options
- PEP 604 union syntax (X | None)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from reasoning_demo.core.exceptions import ServiceError
from reasoning_demo.core.logging import get_logger


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling options passed unchanged to every model call.

    Attributes:
        top_k: Restrict sampling to the k most likely candidates.
        temperature: Sampling temperature.
    """

    top_k: int = 5
    temperature: float = 0.2


@dataclass
class ModelMetadata:
    """Static information about the model behind a client.

    Attributes:
        model_id: Unique model identifier (e.g., "phi-4").
        context_length: Maximum context window in tokens.
        status: Current status ("available", "loaded").
        file_path: Path to model file (for local models).
    """

    model_id: str
    context_length: int
    status: str = "available"
    file_path: str | None = None


class ModelClient(ABC):
    """Abstract base class for language model clients.

    ModelClient is the "port" the orchestrator talks to; concrete
    adapters (LlamaCppClient, test doubles) implement complete().

    Every call to generate() is a warm-up followed by a single
    request/response exchange. The warm-up only prepares the session
    and never changes the output.

    Example:
        class MyClient(ModelClient):
            async def complete(self, instruction, prompt, options):
                return "..."
    """

    @property
    @abstractmethod
    def model_info(self) -> ModelMetadata:
        """Get model metadata."""
        ...

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Check if the model is loaded and ready."""
        ...

    @abstractmethod
    async def complete(
        self, instruction: str, prompt: str, options: GenerationOptions
    ) -> str:
        """Run one request/response exchange against the model.

        Args:
            instruction: System-level behavior directive ("" for none).
            prompt: User prompt.
            options: Sampling options.

        Returns:
            Generated text.
        """
        ...

    async def prewarm(self, instruction: str) -> None:  # noqa: B027
        """Prepare a session for the given instruction.

        Default implementation does nothing.
        """

    async def generate(
        self, instruction: str, prompt: str, options: GenerationOptions
    ) -> str:
        """Warm up, then generate a completion.

        Args:
            instruction: System-level behavior directive ("" for none).
            prompt: User prompt.
            options: Sampling options, passed through unchanged.

        Returns:
            Generated text.

        Raises:
            ServiceError: If the model is unavailable or the call fails.
        """
        model_id = self.model_info.model_id
        logger = get_logger(__name__)
        start_time = time.perf_counter()

        try:
            await self.prewarm(instruction)
            text = await self.complete(instruction, prompt, options)
        except ServiceError:
            raise
        except Exception as e:
            raise ServiceError(
                f"Generation failed for {model_id}: {e}", model_id=model_id
            ) from e

        logger.debug(
            "Model call completed",
            model_id=model_id,
            instruction_chars=len(instruction),
            prompt_chars=len(prompt),
            output_chars=len(text),
            latency_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return text

    async def load(self) -> None:  # noqa: B027
        """Load the model into memory.

        Default implementation does nothing.
        """

    async def unload(self) -> None:  # noqa: B027
        """Unload the model from memory.

        Default implementation does nothing.
        """

    async def __aenter__(self) -> ModelClient:
        await self.load()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.unload()
