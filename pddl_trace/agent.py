"""Random-acting agent that grounds every turn it plays.

One turn, as seen from the host game loop:

1. drop a provisional terminal state if the game went on;
2. pick an action;
3. ground the current snapshot (ledger as it stood before the action);
4. advance a copy of the simulation by that action and update the ledger;
5. ground the action and record the ``(state, action)`` pair;
6. probe the forward model for a terminal successor.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence

from pddl_trace.config.types import DomainConfig, GroundingMode
from pddl_trace.domain.atoms import GroundAtom
from pddl_trace.domain.connectivity import ConnectivityGraph
from pddl_trace.domain.grid import Action, Cell, cell_to_pixel, shift
from pddl_trace.domain.ledger import ResourceLedger
from pddl_trace.domain.strategies import make_strategy
from pddl_trace.domain.templates import TemplateIndex
from pddl_trace.grounding import ActionGrounder, PredicateGrounder
from pddl_trace.simulation.protocol import (
    Simulation,
    advanced_copy,
    avatar_cell,
    snapshot_grid,
)
from pddl_trace.trace.recorder import TraceRecorder

logger = logging.getLogger(__name__)


class RandomPolicy:
    """Uniform choice over the available actions."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def choose(self, actions: Sequence[Action]) -> Action:
        if not actions:
            raise ValueError("no actions available")
        return actions[self.rng.randrange(len(actions))]


class TraceAgent:
    """Plays one episode and grounds each turn into a ``TraceRecorder``.

    Connectivity is computed from the first observation and reused for the
    whole episode; the grid dimensions must not change afterwards.
    """

    def __init__(
        self,
        config: DomainConfig,
        simulation: Simulation,
        policy: RandomPolicy,
        mode: GroundingMode = GroundingMode.CELL,
    ) -> None:
        self.config = config
        self.policy = policy
        self.index = TemplateIndex(config)
        self.strategy = make_strategy(mode, config, self.index)
        self.connectivity = ConnectivityGraph.build(config, snapshot_grid(simulation))
        self.ledger = ResourceLedger.for_config(config)
        self.predicates = PredicateGrounder(config, self.index, self.connectivity, self.strategy)
        self.actions = ActionGrounder(self.strategy)

    def ground_state(self, simulation: Simulation) -> tuple[GroundAtom, ...]:
        return self.predicates.ground(
            snapshot_grid(simulation),
            simulation.avatar_orientation(),
            self.ledger.snapshot(),
        )

    def act(self, simulation: Simulation, recorder: TraceRecorder) -> Action:
        """Choose, ground and record one turn; ``simulation`` is left untouched."""
        recorder.begin_turn()
        action = self.policy.choose(simulation.available_actions())

        state = self.ground_state(simulation)
        grid_before = snapshot_grid(simulation)
        from_cell = avatar_cell(simulation)
        orientation_before = simulation.avatar_orientation()

        successor = advanced_copy(simulation, action)
        deltas = self.ledger.update(grid_before, snapshot_grid(successor))
        picked_resource = self._picked_resource(simulation, action, from_cell, deltas)

        atom = self.actions.ground(
            action,
            from_cell,
            orientation_before,
            successor.avatar_orientation(),
            picked_resource,
        )
        recorder.record(state, atom)
        logger.debug("Turn %d: %s", recorder.turn - 1, atom.render())

        recorder.probe_terminal(
            successor,
            lambda: advanced_copy(simulation, action),
            self.ground_state,
        )
        return action

    def _picked_resource(
        self,
        simulation: Simulation,
        action: Action,
        from_cell: Cell,
        deltas: Mapping[str, int],
    ) -> str | None:
        """Resource key collected on the move's target cell, if any.

        A resource is attributed to the move only when the ledger grew and the
        pre-pickup world held that resource exactly on the target cell.
        """
        direction = action.direction
        if direction is None or not any(deltas.values()):
            return None
        target = shift(from_cell, direction.vector)
        reference = cell_to_pixel(target, simulation.block_size)
        for observation in simulation.resource_positions(reference):
            if observation.sq_dist == 0 and deltas.get(observation.sprite_key, 0) > 0:
                return observation.sprite_key
        logger.debug("Ledger grew on %s but no resource lay on %s", action.value, target)
        return None
