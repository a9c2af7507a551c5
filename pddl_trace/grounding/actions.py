"""Grounding of the chosen primitive action into one action atom.

Precedence, checked in order:

* a change of orientation is a turn, ``(TURN_<DIR> AVATAR - TYPE)``, whatever
  the primitive action was;
* USE targets the cell the avatar faced before acting;
* anything else is a move to ``from_cell`` + the action's displacement,
  suffixed ``_PICK_RESOURCE`` when a resource was collected there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pddl_trace.config.constants import MOVE_PREFIX, TURN_PREFIX
from pddl_trace.domain.atoms import Atom
from pddl_trace.domain.grid import Action, Cell, Orientation, shift

if TYPE_CHECKING:
    from pddl_trace.domain.strategies import GroundingStrategy


def is_turn(orientation_before: Orientation, orientation_after: Orientation) -> bool:
    return tuple(orientation_before) != tuple(orientation_after)


class ActionGrounder:
    """Turns a primitive action plus before/after avatar state into an atom."""

    def __init__(self, strategy: GroundingStrategy) -> None:
        self.strategy = strategy

    def ground(
        self,
        action: Action,
        from_cell: Cell,
        orientation_before: Orientation,
        orientation_after: Orientation,
        picked_resource: str | None = None,
    ) -> Atom:
        if is_turn(orientation_before, orientation_after):
            name = action.action_name.replace(MOVE_PREFIX, TURN_PREFIX)
            return Atom(name=name, args=(self.strategy.avatar,))

        if action is Action.USE:
            target = shift(from_cell, orientation_before)
            return self.strategy.ground_use_action(from_cell, target)

        direction = action.direction
        if direction is None:
            raise ValueError(f"{action} has no direction")
        target = shift(from_cell, direction.vector)
        return self.strategy.ground_move_action(
            action.action_name, from_cell, target, picked_resource
        )
