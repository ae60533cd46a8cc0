"""PromptOrchestrator - maps (mode, question) to a final answer.

The orchestrator is the entry point for one run. It dispatches to the
mode implementation that drives the model calls for that strategy:

- zero_shot: one call, no instruction
- zero_shot_cot: one call, chain-of-thought nudge
- self_consistency: 3 parallel CoT calls → evaluation → finalization
"""

from reasoning_demo.core.exceptions import NoModeSelectedError
from reasoning_demo.core.logging import get_logger
from reasoning_demo.orchestration.context import Run, StatusCallback
from reasoning_demo.orchestration.modes.self_consistency import SelfConsistencyMode
from reasoning_demo.orchestration.modes.single import SingleMode
from reasoning_demo.orchestration.strategy import Mode
from reasoning_demo.providers.base import GenerationOptions, ModelClient


class PromptOrchestrator:
    """Main orchestration dispatcher.

    Attributes:
        client: The model client shared by every mode.
        options: Sampling options passed to every call.

    Example:
        client = LlamaCppClient(model_path="phi-4.gguf", model_id="phi-4")
        orchestrator = PromptOrchestrator(client=client, options=GenerationOptions())
        answer = await orchestrator.execute(run, on_status=print)
    """

    def __init__(self, client: ModelClient, options: GenerationOptions) -> None:
        self._client = client
        self._options = options
        self._logger = get_logger(__name__)

    @property
    def client(self) -> ModelClient:
        """Get the model client."""
        return self._client

    @property
    def options(self) -> GenerationOptions:
        """Get the sampling options."""
        return self._options

    def build_mode(self, mode: Mode) -> SingleMode | SelfConsistencyMode:
        """Create the mode implementation for a prompting mode.

        Raises:
            NoModeSelectedError: If mode is Mode.NONE.
        """
        if mode is Mode.ZERO_SHOT:
            return SingleMode.zero_shot(self._client, self._options)
        if mode is Mode.ZERO_SHOT_COT:
            return SingleMode.zero_shot_cot(self._client, self._options)
        if mode is Mode.SELF_CONSISTENCY:
            return SelfConsistencyMode(self._client, self._options)

        raise NoModeSelectedError()

    async def execute(self, run: Run, on_status: StatusCallback) -> str:
        """Run the call pattern of run.mode and return the final answer.

        Args:
            run: The active run.
            on_status: Receives progress strings in stage order.

        Returns:
            The final answer string.

        Raises:
            NoModeSelectedError: If run.mode is Mode.NONE.
            RunCancelledError: If the run was cancelled at a stage boundary.
            ServiceError: If any model call fails.
        """
        mode_impl = self.build_mode(run.mode)
        self._logger.info("Orchestration started", mode=run.mode.value)
        return await mode_impl.execute(run, on_status)
