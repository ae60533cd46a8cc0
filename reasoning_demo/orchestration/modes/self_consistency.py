"""Self-consistency mode - 3 CoT samples (parallel) → Evaluate → Finalize.

SelfConsistencyMode approximates a majority vote without parsing answers:
1. Three chain-of-thought answers are generated concurrently
2. An evaluation call compares them and merges the two most similar
3. A finalization call rephrases that merge into one definitive answer

Flow:
    Question → [CoT x3](parallel) → Evaluate → Finalize → Answer

Reducing three answers to two and then two to one is more reliable for an
instruction-following model than asking for a three-way vote in one shot.
"""

from __future__ import annotations

import asyncio
import time

from reasoning_demo.core.constants import (
    COT_INSTRUCTION,
    SELF_CONSISTENCY_EVALUATION_INSTRUCTION,
    SELF_CONSISTENCY_RESULT_INSTRUCTION,
    SELF_CONSISTENCY_SAMPLES,
    SOLUTION_TAG_TEMPLATE,
    STATUS_LOADING_EVALUATION,
    STATUS_LOADING_INITIAL_ANSWERS,
    STATUS_LOADING_RESULT,
)
from reasoning_demo.core.logging import get_logger
from reasoning_demo.orchestration.context import Run, StatusCallback
from reasoning_demo.providers.base import GenerationOptions, ModelClient


# =============================================================================
# Candidate Helpers
# =============================================================================


def format_solutions(candidates: list[str]) -> str:
    """Lay out candidate answers for the evaluation call.

    Example:
        >>> format_solutions(["Yes", "Yes", "No"])
        'SOLUTION 1: Yes SOLUTION 2: Yes SOLUTION 3: No'
    """
    return " ".join(
        SOLUTION_TAG_TEMPLATE.format(index=i, answer=answer)
        for i, answer in enumerate(candidates, 1)
    )


def calculate_pairwise_agreement(candidates: list[str]) -> float:
    """Average pairwise word overlap (Jaccard) between candidate answers.

    Used for logging only; the answer itself is chosen by the model.

    Example:
        >>> calculate_pairwise_agreement(["Paris is capital", "Paris is capital"])
        1.0
    """
    if len(candidates) <= 1:
        return 1.0

    similarities: list[float] = []
    for i in range(len(candidates)):
        for j in range(i + 1, len(candidates)):
            similarities.append(_jaccard_similarity(candidates[i], candidates[j]))

    return sum(similarities) / len(similarities)


def _jaccard_similarity(text_a: str, text_b: str) -> float:
    words_a = set(text_a.lower().split())
    words_b = set(text_b.lower().split())

    union = words_a | words_b
    if not union:
        return 1.0

    return len(words_a & words_b) / len(union)


# =============================================================================
# SelfConsistencyMode Implementation
# =============================================================================


class SelfConsistencyMode:
    """Five model calls: three concurrent samples, evaluation, finalization.

    Attributes:
        client: The model client used for every call.
        samples: Number of initial chain-of-thought answers (3).

    Example:
        mode = SelfConsistencyMode(client=client, options=options)
        answer = await mode.execute(run, on_status)
    """

    def __init__(
        self,
        client: ModelClient,
        options: GenerationOptions,
        samples: int = SELF_CONSISTENCY_SAMPLES,
    ) -> None:
        self._client = client
        self._options = options
        self._samples = samples
        self._logger = get_logger(__name__)

    @property
    def client(self) -> ModelClient:
        return self._client

    @property
    def samples(self) -> int:
        return self._samples

    # -------------------------------------------------------------------------
    # Main Execution
    # -------------------------------------------------------------------------

    async def execute(self, run: Run, on_status: StatusCallback) -> str:
        """Execute self-consistency orchestration.

        Args:
            run: The active run (input text and cancellation flag).
            on_status: Receives one progress string per stage, in stage order.

        Returns:
            The finalization call's output.

        Raises:
            RunCancelledError: If the run was cancelled at a stage boundary.
            ServiceError: If any call fails. No partial output is produced.
        """
        start_time = time.perf_counter()

        # Phase 1: concurrent chain-of-thought samples
        run.raise_if_cancelled("initial_answers")
        on_status(STATUS_LOADING_INITIAL_ANSWERS)
        candidates = await self._parallel_generate(run)

        agreement = calculate_pairwise_agreement(candidates)
        self._logger.info(
            "Initial answers joined",
            samples=len(candidates),
            agreement_score=round(agreement, 3),
        )

        # Phase 2: evaluation (merge to two)
        run.raise_if_cancelled("evaluation")
        on_status(STATUS_LOADING_EVALUATION)
        evaluation = await self._client.generate(
            SELF_CONSISTENCY_EVALUATION_INSTRUCTION,
            format_solutions(candidates),
            self._options,
        )
        self._logger.debug("Evaluation completed", output_chars=len(evaluation))

        # Phase 3: finalization (merge to one)
        run.raise_if_cancelled("result")
        on_status(STATUS_LOADING_RESULT)
        result = await self._client.generate(
            SELF_CONSISTENCY_RESULT_INSTRUCTION,
            evaluation,
            self._options,
        )
        run.raise_if_cancelled("result")

        self._logger.info(
            "Self-consistency completed",
            total_calls=self._samples + 2,
            inference_time_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return result

    # -------------------------------------------------------------------------
    # Phase 1: Parallel Generation
    # -------------------------------------------------------------------------

    async def _parallel_generate(self, run: Run) -> list[str]:
        """Generate the initial answers concurrently.

        asyncio.gather keeps the results in dispatch order, so candidate k
        is always the k-th call regardless of which finishes first.

        Raises:
            RunCancelledError: If the run is cancelled before a call is dispatched.
            ServiceError: If any call fails. The remaining samples are
                cancelled before the error propagates.
        """
        loop = asyncio.get_running_loop()
        tasks = [
            loop.create_task(self._sample(run, index), name=f"{run.run_id}-sample-{index}")
            for index in range(1, self._samples + 1)
        ]
        try:
            candidates = await asyncio.gather(*tasks)
        except BaseException:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            self._logger.info("Initial answers abandoned", cancelled_samples=len(pending))
            raise
        return list(candidates)

    async def _sample(self, run: Run, index: int) -> str:
        run.raise_if_cancelled(f"initial_answer_{index}")
        answer = await self._client.generate(
            COT_INSTRUCTION, run.input_text, self._options
        )
        self._logger.debug("Initial answer received", sample=index, output_chars=len(answer))
        return answer
