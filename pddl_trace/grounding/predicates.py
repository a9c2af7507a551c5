"""Grounding of a world snapshot into an ordered sequence of atoms.

The sequence is, in order:

1. sprite atoms, visiting cells row-major and each cell's distinct sprite
   keys in observation order (with the avatar's orientation atom placed just
   before the first atom that mentions the avatar);
2. one pickup atom per resource already collected;
3. the cached connectivity atoms.

The rendered text of this sequence is what downstream plan mining parses, so
the order and casing are part of the output contract.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from pddl_trace.domain.atoms import GroundAtom, render_state
from pddl_trace.domain.grid import CellGrid, Direction, Orientation

if TYPE_CHECKING:
    from pddl_trace.config.types import DomainConfig
    from pddl_trace.domain.connectivity import ConnectivityGraph
    from pddl_trace.domain.strategies import GroundingStrategy
    from pddl_trace.domain.templates import TemplateIndex


class PredicateGrounder:
    """Turns a grid snapshot, avatar orientation and ledger into ground atoms."""

    def __init__(
        self,
        config: DomainConfig,
        index: TemplateIndex,
        connectivity: ConnectivityGraph,
        strategy: GroundingStrategy,
    ) -> None:
        self.config = config
        self.index = index
        self.connectivity = connectivity
        self.strategy = strategy

    def _orientation_atom(self, orientation: Orientation) -> GroundAtom | None:
        if self.config.orientations is None:
            return None
        direction = Direction.from_orientation(orientation)
        if direction is None:
            return None
        template = self.config.orientations[direction]
        return template.instantiate({self.config.avatar_variable: self.strategy.avatar})

    def ground(
        self,
        grid: CellGrid,
        avatar_orientation: Orientation,
        picked: Mapping[str, int],
    ) -> tuple[GroundAtom, ...]:
        atoms: list[GroundAtom] = []
        avatar_variable = self.config.avatar_variable
        # Emitted at most once per pass, even if several templates mention the avatar.
        orientation_pending = True

        for cell, sprites in grid.iter_row_major():
            for sprite_key in dict.fromkeys(sprites):
                for template in self.index.templates_of(sprite_key):
                    if orientation_pending and template.uses(avatar_variable):
                        orientation_pending = False
                        orientation_atom = self._orientation_atom(avatar_orientation)
                        if orientation_atom is not None:
                            atoms.append(orientation_atom)
                    atoms.append(self.strategy.ground_cell_predicate(template, cell))

        for resource, template in self.config.picked_resources.items():
            if picked.get(resource, 0) > 0:
                atoms.append(template.instantiate({avatar_variable: self.strategy.avatar}))

        if self.strategy.includes_connectivity:
            atoms.extend(self.connectivity.atoms)
        return tuple(atoms)

    def render(
        self,
        grid: CellGrid,
        avatar_orientation: Orientation,
        picked: Mapping[str, int],
    ) -> str:
        return render_state(self.ground(grid, avatar_orientation, picked))
