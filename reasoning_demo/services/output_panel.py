"""Output panel - the text the UI shows below the question field.

OutputPanel is the RunListener behind the HTTP surface. Every status,
result or error replaces the displayed text, mirroring a single
scrolling output area.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reasoning_demo.core.constants import STATUS_IDLE


@dataclass
class OutputPanel:
    """Latest user-visible text plus the kind of message that produced it.

    Attributes:
        text: Currently displayed text.
        kind: "status", "result" or "error".
        history: Every message received, oldest first.
    """

    text: str = STATUS_IDLE
    kind: str = "status"
    history: list[str] = field(default_factory=list)

    def on_status(self, message: str) -> None:
        self._show(message, "status")

    def on_result(self, answer: str) -> None:
        self._show(answer, "result")

    def on_error(self, message: str) -> None:
        self._show(message, "error")

    def _show(self, text: str, kind: str) -> None:
        self.text = text
        self.kind = kind
        self.history.append(text)
