"""The simulation API consumed by the grounding agent.

Any forward-model game engine can be traced as long as it offers these
queries. ``SpriteWorld`` is the implementation shipped with the package.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pddl_trace.domain.grid import Action, Cell, CellGrid, Orientation, pixel_to_cell


@dataclass(frozen=True)
class ResourceObservation:
    """A resource sprite and its squared pixel distance to a reference point."""

    sprite_key: str
    position: tuple[float, float]
    sq_dist: float


class Simulation(Protocol):
    @property
    def block_size(self) -> int: ...

    def observation_grid(self) -> Sequence[Sequence[Sequence[str]]]:
        """Sprite keys per cell, indexed ``[x][y]``; empty cells are empty."""
        ...

    def avatar_position(self) -> tuple[float, float]: ...

    def avatar_orientation(self) -> Orientation: ...

    def resource_positions(
        self, reference: tuple[float, float] | None = None
    ) -> list[ResourceObservation]:
        """Resource sprites sorted by distance to ``reference`` (default: avatar)."""
        ...

    def available_actions(self) -> list[Action]: ...

    def copy(self) -> Simulation: ...

    def advance(self, action: Action) -> None: ...

    def is_game_over(self) -> bool: ...


def snapshot_grid(simulation: Simulation) -> CellGrid:
    return CellGrid.from_observation_grid(simulation.observation_grid())


def avatar_cell(simulation: Simulation) -> Cell:
    return pixel_to_cell(simulation.avatar_position(), simulation.block_size)


def advanced_copy(simulation: Simulation, action: Action) -> Simulation:
    """Forward-model step: copy ``simulation`` and advance the copy by ``action``."""
    successor = simulation.copy()
    successor.advance(action)
    return successor
