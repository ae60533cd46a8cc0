"""Task controller - lifecycle of the single in-flight run.

State machine:
    IDLE → RUNNING → {COMPLETED, CANCELLED, FAILED} → IDLE

- start() validates the submission, consults the availability gate and
  schedules the orchestrator as an asyncio.Task.
- cancel() is cooperative: it flags the run and reports "Canceled."
  right away; a model call already in flight finishes in the background
  and its result is discarded.
- At most one run exists at a time. A second start() is rejected, not
  queued, including while a cancelled run is still draining.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from enum import Enum
from typing import Protocol

from reasoning_demo.core.constants import ERROR_PREFIX, STATUS_CANCELED
from reasoning_demo.core.exceptions import (
    AlreadyRunningError,
    EmptyInputError,
    ModelUnavailableError,
    NoModeSelectedError,
    ReasoningDemoError,
    RunCancelledError,
)
from reasoning_demo.core.logging import get_logger, set_run_id
from reasoning_demo.orchestration.context import Run
from reasoning_demo.orchestration.orchestrator import PromptOrchestrator
from reasoning_demo.orchestration.strategy import Mode
from reasoning_demo.services.availability import AvailabilityGate


class TaskState(str, Enum):
    """Lifecycle states of the task controller."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class RunListener(Protocol):
    """Receives the outcome of runs (the UI collaborator)."""

    def on_status(self, message: str) -> None: ...

    def on_result(self, answer: str) -> None: ...

    def on_error(self, message: str) -> None: ...


def format_error(error: BaseException) -> str:
    """Build the user-visible message for a failed run."""
    message = error.message if isinstance(error, ReasoningDemoError) else str(error)
    return f"{ERROR_PREFIX}{message}"


class TaskController:
    """Owns the one active Run.

    Attributes:
        state: Current lifecycle state.
        active_run: The run in flight, if any.
        last_outcome: Terminal state of the most recent finished run.

    Example:
        controller = TaskController(orchestrator, gate, listener=panel)
        controller.start(Mode.ZERO_SHOT, "What is 2+2?")
        await controller.wait()
    """

    def __init__(
        self,
        orchestrator: PromptOrchestrator,
        gate: AvailabilityGate,
        listener: RunListener,
    ) -> None:
        self._orchestrator = orchestrator
        self._gate = gate
        self._listener = listener

        self._state = TaskState.IDLE
        self._run: Run | None = None
        self._task: asyncio.Task[None] | None = None
        self._last_outcome: TaskState | None = None
        self._logger = get_logger(__name__)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def active_run(self) -> Run | None:
        return self._run

    @property
    def is_busy(self) -> bool:
        return self._state is not TaskState.IDLE

    @property
    def last_outcome(self) -> TaskState | None:
        return self._last_outcome

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start(self, mode: Mode | str, input_text: str) -> Run:
        """Start a run for the given mode and question.

        Must be called from within a running event loop.

        Args:
            mode: Prompting mode for this run.
            input_text: The user's question, passed to the model unchanged.

        Returns:
            The newly created Run.

        Raises:
            AlreadyRunningError: If a run is still active.
            NoModeSelectedError: If mode is Mode.NONE.
            EmptyInputError: If the question is blank after trimming.
            ModelUnavailableError: If the availability gate rejects.
        """
        if self._state is not TaskState.IDLE:
            active_id = self._run.run_id if self._run else None
            self._logger.info("Submission rejected", reason="already_running", active_run=active_id)
            raise AlreadyRunningError(run_id=active_id)

        try:
            mode = Mode(mode)
            if mode is Mode.NONE:
                raise NoModeSelectedError()
            if not input_text.strip():
                raise EmptyInputError()
            self._gate.ensure_available()
        except (NoModeSelectedError, EmptyInputError, ModelUnavailableError) as e:
            self._listener.on_status(e.message)
            raise

        run = Run(mode=mode, input_text=input_text)
        self._run = run
        self._state = TaskState.RUNNING
        self._task = asyncio.get_running_loop().create_task(
            self._execute(run), name=run.run_id
        )
        return run

    def cancel(self) -> bool:
        """Request cancellation of the active run.

        Returns:
            True if a running run was cancelled, False otherwise.
        """
        if self._state is not TaskState.RUNNING or self._run is None:
            return False

        self._run.cancel()
        self._state = TaskState.CANCELLED
        self._logger.info("Run cancellation requested", run_id=self._run.run_id)
        self._listener.on_status(STATUS_CANCELED)
        return True

    async def wait(self) -> None:
        """Wait until the active run (if any) has finished."""
        task = self._task
        if task is not None:
            await task

    async def shutdown(self) -> None:
        """Cancel the active run and stop its task."""
        task = self._task
        if task is None:
            return

        self.cancel()
        task.cancel()
        run = self._run
        with contextlib.suppress(asyncio.CancelledError):
            await task

        # A task cancelled before its first step never runs its finally block
        if self._task is task and run is not None:
            self._release(run)

    # -------------------------------------------------------------------------
    # Run Execution
    # -------------------------------------------------------------------------

    async def _execute(self, run: Run) -> None:
        set_run_id(run.run_id)
        start_time = time.perf_counter()
        self._logger.info("Run started", mode=run.mode.value)

        def on_status(message: str) -> None:
            if not run.cancelled:
                self._listener.on_status(message)

        try:
            answer = await self._orchestrator.execute(run, on_status)
        except RunCancelledError as e:
            self._finish(TaskState.CANCELLED)
            self._logger.info("Run cancelled", stage=e.stage)
        except Exception as e:
            if run.cancelled:
                self._finish(TaskState.CANCELLED)
                self._logger.info("Discarded failure of cancelled run", error=str(e))
            else:
                self._finish(TaskState.FAILED)
                self._logger.error(
                    "Run failed",
                    error=str(e),
                    error_code=getattr(e, "error_code", None),
                    exc_info=not isinstance(e, ReasoningDemoError),
                )
                self._listener.on_error(format_error(e))
        else:
            if run.cancelled:
                self._finish(TaskState.CANCELLED)
                self._logger.info("Discarded result of cancelled run")
            else:
                self._finish(TaskState.COMPLETED)
                self._logger.info(
                    "Run completed",
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
                )
                self._listener.on_result(answer)
        finally:
            self._release(run)
            set_run_id(None)

    def _release(self, run: Run) -> None:
        run.completed = True
        self._state = TaskState.IDLE
        self._run = None
        self._task = None

    def _finish(self, outcome: TaskState) -> None:
        self._state = outcome
        self._last_outcome = outcome
