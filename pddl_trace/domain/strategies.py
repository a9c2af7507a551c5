"""Grounding strategies: how cell-bound predicates and actions are named.

``CellObjectStrategy`` grounds every cell as an object (``cell_x_y``) linked
by connectivity atoms. ``NumericStrategy`` instead asserts raw coordinates as
numeric fluents (``(= (COLUMN AVATAR - AVATAR) 3)``) and keeps actions
avatar-centric. The strategy is chosen once, when an agent is built.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pddl_trace.config.constants import NUMERIC_COLUMN_MARKER, PICK_RESOURCE_SUFFIX
from pddl_trace.domain.atoms import Argument, Atom, FluentAtom, GroundAtom, GroundedObject
from pddl_trace.domain.grid import Cell
from pddl_trace.domain.templates import Template, TemplateIndex

if TYPE_CHECKING:
    from pddl_trace.config.types import DomainConfig, GroundingMode

logger = logging.getLogger(__name__)


class GroundingStrategy(ABC):
    """Grounds cell predicates, movement actions and USE actions."""

    includes_connectivity: bool = True

    def __init__(self, config: DomainConfig, index: TemplateIndex) -> None:
        self.config = config
        self.index = index
        self.avatar = config.avatar_object()

    def bind(self, template: Template, cell: Cell) -> dict[str, Argument]:
        """Avatar variable -> avatar singleton; any other -> object at ``cell``."""
        return {
            variable: self.avatar
            if variable == self.config.avatar_variable
            else self.config.object_at(variable, cell)
            for variable in template.variables
        }

    def resource_object(self, sprite_key: str, cell: Cell) -> GroundedObject | None:
        """Object standing for a resource of ``sprite_key`` lying at ``cell``."""
        variable = self.index.resource_variable(sprite_key)
        if variable is None:
            logger.warning("Resource %s has no object variable; pickup not grounded", sprite_key)
            return None
        return self.config.object_at(variable, cell)

    def _with_pickup(self, atom: Atom, picked_resource: str | None, cell: Cell) -> Atom:
        if picked_resource is None:
            return atom
        resource = self.resource_object(picked_resource, cell)
        if resource is None:
            return atom
        return atom.with_suffix(PICK_RESOURCE_SUFFIX).with_args(resource)

    @abstractmethod
    def ground_cell_predicate(self, template: Template, cell: Cell) -> GroundAtom:
        """Ground one sprite template found at ``cell``."""

    @abstractmethod
    def ground_move_action(
        self, action_name: str, from_cell: Cell, to_cell: Cell, picked_resource: str | None
    ) -> Atom:
        """Ground a move; ``picked_resource`` is the sprite key picked at ``to_cell``."""

    @abstractmethod
    def ground_use_action(self, from_cell: Cell, target_cell: Cell) -> Atom:
        """Ground a USE aimed at ``target_cell``."""


class CellObjectStrategy(GroundingStrategy):
    """Cells are objects; actions name the cells they connect."""

    def ground_cell_predicate(self, template: Template, cell: Cell) -> GroundAtom:
        return template.instantiate(self.bind(template, cell))

    def ground_move_action(
        self, action_name: str, from_cell: Cell, to_cell: Cell, picked_resource: str | None
    ) -> Atom:
        atom = Atom(
            name=action_name,
            args=(
                self.avatar,
                self.config.cell_object(from_cell),
                self.config.cell_object(to_cell),
            ),
        )
        return self._with_pickup(atom, picked_resource, to_cell)

    def ground_use_action(self, from_cell: Cell, target_cell: Cell) -> Atom:
        return Atom(
            name="USE",
            args=(
                self.avatar,
                self.config.cell_object(from_cell),
                self.config.cell_object(target_cell),
            ),
        )


class NumericStrategy(GroundingStrategy):
    """Positions are numeric fluents; there are no cell objects."""

    includes_connectivity = False

    def ground_cell_predicate(self, template: Template, cell: Cell) -> GroundAtom:
        x, y = cell
        coordinate = x if NUMERIC_COLUMN_MARKER in template.name.lower() else y
        return FluentAtom(atom=template.instantiate(self.bind(template, cell)), value=coordinate)

    def ground_move_action(
        self, action_name: str, from_cell: Cell, to_cell: Cell, picked_resource: str | None
    ) -> Atom:
        atom = Atom(name=action_name, args=(self.avatar,))
        return self._with_pickup(atom, picked_resource, to_cell)

    def ground_use_action(self, from_cell: Cell, target_cell: Cell) -> Atom:
        return Atom(name="USE", args=(self.avatar,))


def make_strategy(
    mode: GroundingMode, config: DomainConfig, index: TemplateIndex
) -> GroundingStrategy:
    from pddl_trace.config.types import GroundingMode

    if mode is GroundingMode.NUMERIC:
        return NumericStrategy(config, index)
    return CellObjectStrategy(config, index)
