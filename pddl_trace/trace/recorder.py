"""Per-episode trace of grounded states and actions.

The recorder probes the forward model after every action to catch the end of
the episode: the host stops calling the agent once the game is over, so the
final state would otherwise never be grounded. A probe that reports a
terminal state is only provisional. If the host calls the agent again, the
game went on, and the speculative state is dropped before the new turn is
recorded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pddl_trace.config.constants import NUM_SIMULATIONS
from pddl_trace.domain.atoms import Atom, GroundAtom

if TYPE_CHECKING:
    from pddl_trace.simulation.protocol import Simulation

logger = logging.getLogger(__name__)


class RecorderState(Enum):
    RECORDING = "recording"
    PENDING_TERMINAL = "pending_terminal"


@dataclass
class Trace:
    """Ordered ``(turn, state)`` and ``(turn, action)`` entries."""

    states: list[tuple[int, tuple[GroundAtom, ...]]] = field(default_factory=list)
    actions: list[tuple[int, Atom]] = field(default_factory=list)


class TraceRecorder:
    """Collects one episode's trace, with terminal lookahead and rollback."""

    def __init__(self, lookahead_simulations: int = NUM_SIMULATIONS) -> None:
        if lookahead_simulations < 1:
            raise ValueError("lookahead_simulations must be >= 1")
        self.lookahead_simulations = lookahead_simulations
        self.state = RecorderState.RECORDING
        self.trace = Trace()
        self._turn = 0

    @property
    def turn(self) -> int:
        return self._turn

    def begin_turn(self) -> None:
        """Discard a provisional terminal state if the episode went on."""
        if self.state is RecorderState.PENDING_TERMINAL:
            dropped_turn, _ = self.trace.states.pop()
            logger.debug("Episode continued; dropping provisional terminal state %d", dropped_turn)
            self.state = RecorderState.RECORDING

    def record(self, state: tuple[GroundAtom, ...], action: Atom) -> None:
        self.trace.states.append((self._turn, state))
        self.trace.actions.append((self._turn, action))
        self._turn += 1

    def probe_terminal(
        self,
        post_action: Simulation,
        resimulate: Callable[[], Simulation],
        ground: Callable[[Simulation], tuple[GroundAtom, ...]],
    ) -> bool:
        """Look for a terminal successor, retrying a non-deterministic model.

        ``post_action`` is checked first; each retry asks ``resimulate`` for a
        fresh copy of the pre-action state advanced by the same action. The
        first terminal snapshot found is grounded and appended once.
        """
        candidate = post_action
        for attempt in range(self.lookahead_simulations):
            if candidate.is_game_over():
                self.trace.states.append((self._turn, ground(candidate)))
                self.state = RecorderState.PENDING_TERMINAL
                logger.debug("Terminal state predicted on probe %d", attempt + 1)
                return True
            if attempt + 1 < self.lookahead_simulations:
                candidate = resimulate()
        return False

    def finish(self) -> Trace:
        """End of episode: hand over the trace."""
        return self.trace
