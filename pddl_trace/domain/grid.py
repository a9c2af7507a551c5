"""Cell grid snapshots, directions and primitive actions.

Coordinates are ``(x, y)`` with ``x`` growing right and ``y`` growing down,
the convention used by the observation grids the simulation hands out
(indexed ``grid[x][y]``).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

from pddl_trace.config.constants import BACKGROUND_SPRITE, MOVE_PREFIX

Cell = tuple[int, int]
"""Grid cell coordinates ``(x, y)``."""

Orientation = tuple[float, float]
"""Avatar orientation vector as reported by the simulation."""


class Direction(Enum):
    """Grid directions, in the order connectivity atoms are emitted."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def vector(self) -> Cell:
        return _DIRECTION_VECTORS[self]

    @classmethod
    def from_orientation(cls, orientation: Orientation) -> Direction | None:
        """Map an orientation vector to the direction it faces.

        The x component is checked first, so a diagonal vector resolves to
        LEFT/RIGHT. Returns ``None`` when neither component is a unit value.
        """
        ox, oy = orientation
        if ox == 1.0:
            return cls.RIGHT
        if ox == -1.0:
            return cls.LEFT
        if oy == 1.0:
            return cls.DOWN
        if oy == -1.0:
            return cls.UP
        return None


_DIRECTION_VECTORS: dict[Direction, Cell] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Action(Enum):
    """Primitive avatar actions offered by the simulation."""

    UP = "ACTION_UP"
    DOWN = "ACTION_DOWN"
    LEFT = "ACTION_LEFT"
    RIGHT = "ACTION_RIGHT"
    USE = "ACTION_USE"

    @property
    def direction(self) -> Direction | None:
        """Movement direction, or ``None`` for USE."""
        if self is Action.USE:
            return None
        return Direction[self.name]

    @property
    def action_name(self) -> str:
        """Name of the grounded action (``MOVE_UP`` ... or ``USE``)."""
        if self is Action.USE:
            return "USE"
        return f"{MOVE_PREFIX}_{self.name}"


def shift(cell: Cell, vector: Sequence[float]) -> Cell:
    """Return ``cell`` displaced by an integer-valued ``vector``."""
    return cell[0] + int(vector[0]), cell[1] + int(vector[1])


def pixel_to_cell(position: Sequence[float], block_size: int) -> Cell:
    """Convert a pixel position to the grid cell containing it."""
    return int(position[0]) // block_size, int(position[1]) // block_size


def cell_to_pixel(cell: Cell, block_size: int) -> tuple[float, float]:
    """Return the pixel position of a cell's top-left corner."""
    return float(cell[0] * block_size), float(cell[1] * block_size)


@dataclass(frozen=True)
class CellGrid:
    """Sprite keys present in each cell of a W x H grid for one turn.

    ``cells[x][y]`` holds the multiset of sprite keys (in observation order)
    at ``(x, y)``. A cell is never empty: empty cells hold the background key.
    """

    width: int
    height: int
    cells: tuple[tuple[tuple[str, ...], ...], ...]

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("grid must be at least 1x1")
        if len(self.cells) != self.width:
            raise ValueError("cells must have one column per x coordinate")
        for column in self.cells:
            if len(column) != self.height:
                raise ValueError("every column must have one entry per y coordinate")
            if any(not sprites for sprites in column):
                raise ValueError("cells must not be empty; use the background key")

    @classmethod
    def from_observation_grid(cls, grid: Sequence[Sequence[Iterable[str]]]) -> CellGrid:
        """Build a grid from an x-major observation grid of sprite keys."""
        if not grid or not grid[0]:
            raise ValueError("observation grid must not be empty")
        width, height = len(grid), len(grid[0])
        cells = tuple(
            tuple(tuple(sprites) or (BACKGROUND_SPRITE,) for sprites in column) for column in grid
        )
        return cls(width=width, height=height, cells=cells)

    def sprites_at(self, cell: Cell) -> tuple[str, ...]:
        x, y = cell
        return self.cells[x][y]

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def iter_row_major(self) -> Iterator[tuple[Cell, tuple[str, ...]]]:
        """Yield ``((x, y), sprites)`` row by row, left to right."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y), self.cells[x][y]

    def count(self, sprite_keys: Iterable[str]) -> Counter[str]:
        """Count occurrences of each of ``sprite_keys`` across the grid."""
        wanted = set(sprite_keys)
        counts: Counter[str] = Counter({key: 0 for key in wanted})
        for column in self.cells:
            for sprites in column:
                for sprite in sprites:
                    if sprite in wanted:
                        counts[sprite] += 1
        return counts
