"""Static adjacency atoms between grid cells.

The grid topology is assumed invariant for a whole episode, so the
connectivity atoms are built once from the first snapshot and appended
verbatim to every grounded state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from pddl_trace.domain.atoms import Atom
from pddl_trace.domain.grid import Cell, CellGrid, Direction, shift

if TYPE_CHECKING:
    from pddl_trace.config.types import DomainConfig


class ConnectivityGraph:
    """Directed cell adjacency plus its grounded atoms, in emission order."""

    def __init__(self, graph: nx.DiGraph, atoms: tuple[Atom, ...]) -> None:
        self.graph = graph
        self.atoms = atoms

    @classmethod
    def build(cls, config: DomainConfig, grid: CellGrid) -> ConnectivityGraph:
        """Ground every direction template for every in-bounds neighbour.

        Cells are visited row-major; per cell the directions follow
        ``Direction`` order. The atom sequence keeps first insertion order and
        drops exact duplicates.
        """
        graph = nx.DiGraph()
        atoms: dict[Atom, None] = {}
        for cell, _ in grid.iter_row_major():
            graph.add_node(cell)
            current = config.cell_object(cell)
            for direction in Direction:
                neighbor = shift(cell, direction.vector)
                if not grid.in_bounds(neighbor):
                    continue
                graph.add_edge(cell, neighbor, direction=direction)
                template = config.connections[direction]
                binding = {
                    variable: current
                    if variable == config.cell_variable
                    else config.cell_object(neighbor)
                    for variable in template.variables
                }
                atoms.setdefault(template.instantiate(binding), None)
        return cls(graph=graph, atoms=tuple(atoms))

    def __len__(self) -> int:
        return len(self.atoms)

    def __iter__(self):
        return iter(self.atoms)

    def neighbor(self, cell: Cell, direction: Direction) -> Cell | None:
        """In-bounds neighbour of ``cell`` towards ``direction``, if any."""
        if cell not in self.graph:
            return None
        for _, target, data in self.graph.out_edges(cell, data=True):
            if data["direction"] is direction:
                return target
        return None
