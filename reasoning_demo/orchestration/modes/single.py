"""Single-call modes - zero-shot and zero-shot chain-of-thought.

SingleMode sends the raw question to the model once, under a fixed
instruction, and returns the generated text verbatim.

Flow:
    Question → Model(instruction) → Answer

- zero-shot: empty instruction
- zero-shot-CoT: "Let's think step by step."
"""

from __future__ import annotations

import time

from reasoning_demo.core.constants import (
    COT_INSTRUCTION,
    STATUS_LOADING_ZERO_SHOT,
    STATUS_LOADING_ZERO_SHOT_COT,
    ZERO_SHOT_INSTRUCTION,
)
from reasoning_demo.core.logging import get_logger
from reasoning_demo.orchestration.context import Run, StatusCallback
from reasoning_demo.providers.base import GenerationOptions, ModelClient


class SingleMode:
    """One model call, no post-processing.

    Attributes:
        client: The model client used for generation.
        instruction: System instruction sent with the question.
        status_message: Progress string emitted before the call.

    Example:
        mode = SingleMode.zero_shot_cot(client, options)
        answer = await mode.execute(run, on_status)
    """

    def __init__(
        self,
        client: ModelClient,
        options: GenerationOptions,
        instruction: str,
        status_message: str,
    ) -> None:
        self._client = client
        self._options = options
        self._instruction = instruction
        self._status_message = status_message
        self._logger = get_logger(__name__)

    @classmethod
    def zero_shot(cls, client: ModelClient, options: GenerationOptions) -> SingleMode:
        return cls(client, options, ZERO_SHOT_INSTRUCTION, STATUS_LOADING_ZERO_SHOT)

    @classmethod
    def zero_shot_cot(
        cls, client: ModelClient, options: GenerationOptions
    ) -> SingleMode:
        return cls(client, options, COT_INSTRUCTION, STATUS_LOADING_ZERO_SHOT_COT)

    @property
    def client(self) -> ModelClient:
        return self._client

    @property
    def instruction(self) -> str:
        return self._instruction

    @property
    def status_message(self) -> str:
        return self._status_message

    async def execute(self, run: Run, on_status: StatusCallback) -> str:
        """Generate the answer with a single call.

        Args:
            run: The active run (input text and cancellation flag).
            on_status: Receives the progress string.

        Returns:
            The model's text, unchanged.

        Raises:
            RunCancelledError: If the run was cancelled before or during the call.
            ServiceError: If the model call fails.
        """
        run.raise_if_cancelled("generate")
        on_status(self._status_message)

        start_time = time.perf_counter()
        answer = await self._client.generate(
            self._instruction, run.input_text, self._options
        )

        # The request could not be stopped; its result is discarded
        run.raise_if_cancelled("generate")

        self._logger.info(
            "Single call completed",
            mode=run.mode.value,
            inference_time_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return answer
