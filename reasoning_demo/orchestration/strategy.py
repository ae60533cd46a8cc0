"""Prompting strategies and the selector that holds the active one.

Mode carries a fixed label and description per variant. StrategySelector
is pure state: selecting a mode replaces the previous one outright and
never touches a run that is already in flight.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Mode(str, Enum):
    """Available prompting modes.

    - none: nothing selected, submission disabled
    - zero_shot: one call, no instruction
    - zero_shot_cot: one call with a chain-of-thought nudge
    - self_consistency: three CoT samples, evaluate, finalize
    """

    NONE = "none"
    ZERO_SHOT = "zero_shot"
    ZERO_SHOT_COT = "zero_shot_cot"
    SELF_CONSISTENCY = "self_consistency"

    @property
    def label(self) -> str:
        return MODE_DESCRIPTORS[self].label

    @property
    def description(self) -> str:
        return MODE_DESCRIPTORS[self].description


@dataclass(frozen=True)
class ModeDescriptor:
    """Human-readable label and description of a mode."""

    label: str
    description: str


MODE_DESCRIPTORS: MappingProxyType[Mode, ModeDescriptor] = MappingProxyType(
    {
        Mode.NONE: ModeDescriptor(
            label="Select Mode",
            description="Please select a mode",
        ),
        Mode.ZERO_SHOT: ModeDescriptor(
            label="Zero-Shot",
            description="This mode will process your prompt without any instructions.",
        ),
        Mode.ZERO_SHOT_COT: ModeDescriptor(
            label="Zero-Shot-CoT",
            description=(
                "This mode will process your input as a simple "
                "Chain-of-Thought prompt."
            ),
        ),
        Mode.SELF_CONSISTENCY: ModeDescriptor(
            label="Self-Consistency",
            description=(
                "This mode will first generate three CoT answers to your prompt "
                "and choose the most common one for its final answer."
            ),
        ),
    }
)

SELECTABLE_MODES: tuple[Mode, ...] = (
    Mode.ZERO_SHOT,
    Mode.ZERO_SHOT_COT,
    Mode.SELF_CONSISTENCY,
)


class StrategySelector:
    """Holds the active prompting mode.

    Example:
        selector = StrategySelector()
        selector.select("zero_shot_cot")
        selector.label  # "Zero-Shot-CoT"
    """

    def __init__(self, mode: Mode | str = Mode.NONE) -> None:
        self._mode = Mode(mode)

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def label(self) -> str:
        return self._mode.label

    @property
    def description(self) -> str:
        return self._mode.description

    @property
    def can_submit(self) -> bool:
        """False while no mode is selected."""
        return self._mode is not Mode.NONE

    def select(self, mode: Mode | str) -> Mode:
        """Replace the active mode.

        Args:
            mode: Mode or its string value.

        Returns:
            The newly active mode.

        Raises:
            ValueError: If the string is not a valid Mode.
        """
        self._mode = Mode(mode)
        return self._mode
