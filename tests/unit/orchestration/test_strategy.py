"""Tests for Mode and StrategySelector."""

import pytest

from reasoning_demo.orchestration.strategy import (
    MODE_DESCRIPTORS,
    SELECTABLE_MODES,
    Mode,
    StrategySelector,
)


class TestMode:
    """Test Mode labels and descriptions."""

    @pytest.mark.parametrize(
        ("mode", "label"),
        [
            (Mode.NONE, "Select Mode"),
            (Mode.ZERO_SHOT, "Zero-Shot"),
            (Mode.ZERO_SHOT_COT, "Zero-Shot-CoT"),
            (Mode.SELF_CONSISTENCY, "Self-Consistency"),
        ],
    )
    def test_labels(self, mode: Mode, label: str) -> None:
        assert mode.label == label

    def test_none_description_prompts_selection(self) -> None:
        assert Mode.NONE.description == "Please select a mode"

    def test_every_mode_has_a_descriptor(self) -> None:
        assert set(MODE_DESCRIPTORS) == set(Mode)

    def test_descriptors_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            MODE_DESCRIPTORS[Mode.NONE] = MODE_DESCRIPTORS[Mode.ZERO_SHOT]  # type: ignore[index]

    def test_selectable_modes_exclude_none(self) -> None:
        assert Mode.NONE not in SELECTABLE_MODES
        assert len(SELECTABLE_MODES) == 3

    def test_mode_from_string_value(self) -> None:
        assert Mode("self_consistency") is Mode.SELF_CONSISTENCY


class TestStrategySelector:
    """Test StrategySelector state."""

    def test_starts_with_none(self) -> None:
        selector = StrategySelector()
        assert selector.mode is Mode.NONE
        assert selector.label == "Select Mode"
        assert selector.description == "Please select a mode"
        assert selector.can_submit is False

    def test_select_replaces_mode(self) -> None:
        selector = StrategySelector()

        selector.select(Mode.ZERO_SHOT)
        selector.select(Mode.ZERO_SHOT_COT)

        assert selector.mode is Mode.ZERO_SHOT_COT
        assert selector.label == "Zero-Shot-CoT"
        assert selector.can_submit is True

    def test_select_accepts_string(self) -> None:
        selector = StrategySelector()
        assert selector.select("self_consistency") is Mode.SELF_CONSISTENCY

    def test_select_back_to_none_disables_submit(self) -> None:
        selector = StrategySelector(Mode.ZERO_SHOT)
        selector.select(Mode.NONE)
        assert selector.can_submit is False

    def test_select_invalid_raises(self) -> None:
        selector = StrategySelector()
        with pytest.raises(ValueError):
            selector.select("tree_of_thought")
        assert selector.mode is Mode.NONE
