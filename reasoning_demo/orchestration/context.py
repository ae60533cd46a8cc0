"""Run state shared between the task controller and the orchestrator.

A Run is created by the TaskController when a submission is accepted.
The orchestrator only reads the cancellation flag; the controller owns
every other transition.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from reasoning_demo.core.exceptions import RunCancelledError
from reasoning_demo.orchestration.strategy import Mode


StatusCallback = Callable[[str], None]


def _new_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:12]}"


@dataclass
class Run:
    """One in-flight orchestration.

    Attributes:
        mode: Prompting mode captured at submission time.
        input_text: The user's question.
        run_id: Unique identifier, also bound to log lines.
        cancelled: Set by cancel(); checked at every stage boundary.
        completed: Set once the orchestrator has finished, failed or stopped.
    """

    mode: Mode
    input_text: str
    run_id: str = field(default_factory=_new_run_id)
    cancelled: bool = False
    completed: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def raise_if_cancelled(self, stage: str) -> None:
        """Stop the run at a stage boundary if cancellation was requested.

        Raises:
            RunCancelledError: If the run has been cancelled.
        """
        if self.cancelled:
            raise RunCancelledError(run_id=self.run_id, stage=stage)
