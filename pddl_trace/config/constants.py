"""Centralized constants for grounding and trace recording.

Values shared by the grounding engine, the reference simulation and the
episode engine are defined here. Consuming modules should import from this
module rather than defining their own inline literals.
"""

from __future__ import annotations

PLACEHOLDER_MARKER = "?"
"""Character that opens a template placeholder (``?a``, ``?cell``)."""

PLACEHOLDER_PATTERN = r"\?[A-Za-z][A-Za-z0-9_]*"
"""Full-token pattern of a template placeholder."""

BACKGROUND_SPRITE = "background"
"""Reserved sprite key standing for an empty cell."""

NUM_SIMULATIONS = 10
"""Forward-model probes per turn when looking ahead for a terminal state."""

BLOCK_SIZE = 10
"""Pixel width/height of one grid cell in the reference simulation."""

MAX_STEPS = 500
"""Default game-tick cap after which the reference simulation ends."""

NUMERIC_COLUMN_MARKER = "column"
"""Predicate-name fragment that selects the x coordinate for numeric fluents."""

PICK_RESOURCE_SUFFIX = "_PICK_RESOURCE"
"""Appended to a movement action name when the move picks up a resource."""

MOVE_PREFIX = "MOVE"
"""Prefix of movement action names."""

TURN_PREFIX = "TURN"
"""Prefix replacing ``MOVE`` for actions that only rotate the avatar."""

FLUSH_THRESHOLD = 8_192
"""Flush trace rows to Parquet once this in-memory row count is reached."""
