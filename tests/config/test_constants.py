import re

from pddl_trace.config.constants import (
    BACKGROUND_SPRITE,
    BLOCK_SIZE,
    FLUSH_THRESHOLD,
    MAX_STEPS,
    MOVE_PREFIX,
    NUM_SIMULATIONS,
    NUMERIC_COLUMN_MARKER,
    PICK_RESOURCE_SUFFIX,
    PLACEHOLDER_MARKER,
    PLACEHOLDER_PATTERN,
    TURN_PREFIX,
)


def test_background_key_is_reserved_name() -> None:
    assert BACKGROUND_SPRITE == "background"


def test_lookahead_bound_is_ten() -> None:
    assert NUM_SIMULATIONS == 10


def test_placeholder_pattern_starts_with_marker() -> None:
    assert PLACEHOLDER_PATTERN.startswith(re.escape(PLACEHOLDER_MARKER))
    assert re.fullmatch(PLACEHOLDER_PATTERN, "?cell_2")
    assert not re.fullmatch(PLACEHOLDER_PATTERN, "?2cell")
    assert not re.fullmatch(PLACEHOLDER_PATTERN, "cell")


def test_block_size_is_positive() -> None:
    assert isinstance(BLOCK_SIZE, int) and BLOCK_SIZE > 0


def test_max_steps_is_positive() -> None:
    assert isinstance(MAX_STEPS, int) and MAX_STEPS > 0


def test_action_name_fragments() -> None:
    assert PICK_RESOURCE_SUFFIX == "_PICK_RESOURCE"
    assert (MOVE_PREFIX, TURN_PREFIX) == ("MOVE", "TURN")
    assert NUMERIC_COLUMN_MARKER == NUMERIC_COLUMN_MARKER.lower()


def test_flush_threshold_is_large() -> None:
    assert isinstance(FLUSH_THRESHOLD, int) and FLUSH_THRESHOLD >= 1024
