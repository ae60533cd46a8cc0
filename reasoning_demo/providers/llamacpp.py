"""LlamaCpp-based model client.

Runs a local GGUF model through llama-cpp-python (Metal acceleration on Mac),
which stands in for the on-device language model.

Patterns applied:
- ModelClient ABC implementation
- load/unload through the ModelClient async context manager
- Blocking llama.cpp calls moved off the event loop with asyncio.to_thread
- Exception classes ending in "Error"
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any

from reasoning_demo.core.constants import DEFAULT_CONTEXT_LENGTH
from reasoning_demo.core.exceptions import (
    ModelFileNotFoundError,
    ModelLoadError,
    ServiceError,
)
from reasoning_demo.core.logging import get_logger
from reasoning_demo.providers.base import GenerationOptions, ModelClient, ModelMetadata


# Optional backend; tests patch this name. None means the "llama" extra is missing.
try:
    from llama_cpp import Llama
except ImportError:
    Llama = None  # type: ignore[misc, assignment]

if TYPE_CHECKING:
    from llama_cpp import Llama as LlamaType


# =============================================================================
# Constants
# =============================================================================

STATUS_AVAILABLE = "available"
STATUS_LOADED = "loaded"


def llama_cpp_installed() -> bool:
    """Check whether the llama-cpp-python backend can be used on this machine."""
    return Llama is not None


class LlamaCppClient(ModelClient):
    """llama.cpp model client.

    Each generate() call builds a fresh chat (system instruction + user
    prompt), so calls never share conversation state.

    Args:
        model_path: GGUF file to load.
        model_id: Name reported in metadata, logs and errors.
        context_length: n_ctx passed to llama.cpp.
        n_gpu_layers: Layers offloaded to GPU or Metal, -1 for all.
        validate_path: Check the model file at construction. When False the
            check is deferred to load().

    Raises:
        ModelFileNotFoundError: If model file does not exist.

    Example:
        >>> client = LlamaCppClient(model_path=Path("/models/phi-4.gguf"), model_id="phi-4")
        >>> async with client:
        ...     text = await client.generate("", "What is 2+2?", GenerationOptions())
    """

    def __init__(
        self,
        model_path: Path | str,
        model_id: str,
        context_length: int = DEFAULT_CONTEXT_LENGTH,
        n_gpu_layers: int = 0,
        validate_path: bool = True,
    ) -> None:
        self._model_path = Path(model_path)
        self._model_id = model_id
        self._context_length = context_length
        self._n_gpu_layers = n_gpu_layers

        self._model: LlamaType | None = None
        self._is_loaded = False
        self._load_lock = asyncio.Lock()

        # llama-cpp-python is NOT thread-safe for concurrent llama_decode() calls;
        # concurrent generate() calls are serialized here.
        self._inference_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

        if validate_path:
            self._ensure_model_file()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def model_info(self) -> ModelMetadata:
        status = STATUS_LOADED if self._is_loaded else STATUS_AVAILABLE
        return ModelMetadata(
            model_id=self._model_id,
            context_length=self._context_length,
            status=status,
            file_path=str(self._model_path),
        )

    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    # =========================================================================
    # Load / Unload
    # =========================================================================

    async def load(self) -> None:
        """Load model into memory.

        Idempotent. Concurrent callers wait for a single load.

        Raises:
            ModelLoadError: If the backend is missing or the model fails to load.
        """
        async with self._load_lock:
            if self._is_loaded:
                return

            if Llama is None:
                raise ModelLoadError(
                    "llama-cpp-python is not installed. "
                    "Install with: pip install llama-cpp-python",
                    model_id=self._model_id,
                )

            self._ensure_model_file()

            try:
                self._model = await asyncio.to_thread(
                    Llama,
                    model_path=str(self._model_path),
                    n_ctx=self._context_length,
                    n_gpu_layers=self._n_gpu_layers,
                    verbose=False,
                )
            except Exception as e:
                raise ModelLoadError(
                    f"Failed to load model {self._model_id}: {e}",
                    model_id=self._model_id,
                ) from e

            self._is_loaded = True
            self._logger.info(
                "Model loaded",
                model_id=self._model_id,
                model_path=str(self._model_path),
            )

    async def unload(self) -> None:
        self._model = None
        self._is_loaded = False

    # =========================================================================
    # Generation
    # =========================================================================

    async def prewarm(self, instruction: str) -> None:
        """Make sure the model is loaded before the request is sent."""
        await self.load()

    async def complete(
        self, instruction: str, prompt: str, options: GenerationOptions
    ) -> str:
        """Run one chat completion.

        Raises:
            ServiceError: If the model is not loaded or generation fails.
        """
        if not self._is_loaded or self._model is None:
            raise ServiceError(
                f"Model {self._model_id} is not loaded. Call load() first.",
                model_id=self._model_id,
            )

        messages = self._build_messages(instruction, prompt)

        try:
            async with self._inference_lock:
                result = await asyncio.to_thread(
                    self._model.create_chat_completion,
                    messages=messages,  # type: ignore[arg-type]
                    top_k=options.top_k,
                    temperature=options.temperature,
                )
        except Exception as e:
            raise ServiceError(
                f"Generation failed for {self._model_id}: {e}",
                model_id=self._model_id,
            ) from e

        return self._extract_content(result)  # type: ignore[arg-type]

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _ensure_model_file(self) -> None:
        if not self._model_path.exists():
            raise ModelFileNotFoundError(
                f"Model file not found: {self._model_path}", model_id=self._model_id
            )

    def _build_messages(self, instruction: str, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if instruction:
            messages.append({"role": "system", "content": instruction})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _extract_content(self, result: dict[str, Any]) -> str:
        choices = result.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""
