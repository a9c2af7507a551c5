"""Bounded grid world of keyed sprites with a single avatar.

Rules per tick:

- A movement action moves the avatar one cell unless the target is out of
  bounds or holds a solid sprite. With ``rotate_in_place`` the avatar first
  turns to face a new direction without moving; otherwise its orientation is
  fixed for the whole game.
- Resource sprites on the cell the avatar enters are collected (removed from
  the grid, added to the inventory).
- Entering a goal sprite's cell ends the game as a win; reaching
  ``max_steps`` ticks ends it as a loss.
- USE has no effect on the world.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace

from pddl_trace.config.constants import BLOCK_SIZE, MAX_STEPS
from pddl_trace.config.types import GameDescription
from pddl_trace.domain.grid import Action, Cell, Orientation, cell_to_pixel, shift
from pddl_trace.simulation.protocol import ResourceObservation


@dataclass
class Sprite:
    """A single keyed sprite in the world."""

    sprite_id: int
    key: str
    x: int
    y: int


class SpriteWorld:
    """Deterministic forward model implementing the ``Simulation`` protocol."""

    def __init__(
        self,
        width: int,
        height: int,
        sprites: dict[int, Sprite],
        avatar_id: int,
        orientation: Orientation = (1.0, 0.0),
        *,
        resources: frozenset[str] = frozenset(),
        solids: frozenset[str] = frozenset({"wall"}),
        goals: frozenset[str] = frozenset(),
        rotate_in_place: bool = False,
        max_steps: int = MAX_STEPS,
        block_size: int = BLOCK_SIZE,
    ) -> None:
        if avatar_id not in sprites:
            raise ValueError(f"avatar sprite {avatar_id} not in sprites")
        self.width = width
        self.height = height
        self.sprites = sprites
        self.avatar_id = avatar_id
        self.orientation: Orientation = (float(orientation[0]), float(orientation[1]))
        self.resources = resources
        self.solids = solids
        self.goals = goals
        self.rotate_in_place = rotate_in_place
        self.max_steps = max_steps
        self._block_size = block_size
        self.tick = 0
        self.won = False
        self.game_over = False
        self.inventory: Counter[str] = Counter()

    @classmethod
    def from_description(cls, description: GameDescription) -> SpriteWorld:
        """Place one sprite per legend key of every level character."""
        sprites: dict[int, Sprite] = {}
        avatar_id = -1
        for y, row in enumerate(description.level):
            for x, char in enumerate(row):
                for key in description.legend[char]:
                    sprite_id = len(sprites)
                    sprites[sprite_id] = Sprite(sprite_id=sprite_id, key=key, x=x, y=y)
                    if key == description.avatar_key:
                        avatar_id = sprite_id
        dx, dy = description.orientation.vector
        return cls(
            width=len(description.level[0]),
            height=len(description.level),
            sprites=sprites,
            avatar_id=avatar_id,
            orientation=(float(dx), float(dy)),
            resources=description.resources,
            solids=description.solids,
            goals=description.goals,
            rotate_in_place=description.rotate_in_place,
            max_steps=description.max_steps,
        )

    # -- queries --------------------------------------------------------------

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def avatar(self) -> Sprite:
        return self.sprites[self.avatar_id]

    def observation_grid(self) -> list[list[list[str]]]:
        grid: list[list[list[str]]] = [[[] for _ in range(self.height)] for _ in range(self.width)]
        for sprite_id in sorted(self.sprites):
            sprite = self.sprites[sprite_id]
            grid[sprite.x][sprite.y].append(sprite.key)
        return grid

    def sprites_at(self, cell: Cell) -> list[Sprite]:
        return [s for s in self.sprites.values() if (s.x, s.y) == cell]

    def avatar_position(self) -> tuple[float, float]:
        return cell_to_pixel((self.avatar.x, self.avatar.y), self._block_size)

    def avatar_orientation(self) -> Orientation:
        return self.orientation

    def resource_positions(
        self, reference: tuple[float, float] | None = None
    ) -> list[ResourceObservation]:
        rx, ry = reference if reference is not None else self.avatar_position()
        observations: list[ResourceObservation] = []
        for sprite_id in sorted(self.sprites):
            sprite = self.sprites[sprite_id]
            if sprite.key not in self.resources:
                continue
            px, py = cell_to_pixel((sprite.x, sprite.y), self._block_size)
            observations.append(
                ResourceObservation(
                    sprite_key=sprite.key,
                    position=(px, py),
                    sq_dist=(px - rx) ** 2 + (py - ry) ** 2,
                )
            )
        observations.sort(key=lambda obs: obs.sq_dist)
        return observations

    def available_actions(self) -> list[Action]:
        return list(Action)

    def is_game_over(self) -> bool:
        return self.game_over

    # -- forward model --------------------------------------------------------

    def copy(self) -> SpriteWorld:
        clone = SpriteWorld(
            width=self.width,
            height=self.height,
            sprites={sid: replace(sprite) for sid, sprite in self.sprites.items()},
            avatar_id=self.avatar_id,
            orientation=self.orientation,
            resources=self.resources,
            solids=self.solids,
            goals=self.goals,
            rotate_in_place=self.rotate_in_place,
            max_steps=self.max_steps,
            block_size=self._block_size,
        )
        clone.tick = self.tick
        clone.won = self.won
        clone.game_over = self.game_over
        clone.inventory = Counter(self.inventory)
        return clone

    def advance(self, action: Action) -> None:
        """Advance one tick. A finished game ignores further actions."""
        if self.game_over:
            return
        self.tick += 1
        direction = action.direction
        if direction is not None:
            dx, dy = direction.vector
            facing: Orientation = (float(dx), float(dy))
            if not self.rotate_in_place:
                self._try_move(shift((self.avatar.x, self.avatar.y), direction.vector))
            elif facing != self.orientation:
                self.orientation = facing
            else:
                self._try_move(shift((self.avatar.x, self.avatar.y), direction.vector))
        if self.tick >= self.max_steps:
            self.game_over = True

    def _try_move(self, target: Cell) -> None:
        """Move the avatar to ``target`` if it is inside the grid and not solid."""
        x, y = target
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        occupants = self.sprites_at(target)
        if any(s.key in self.solids for s in occupants):
            return
        avatar = self.avatar
        avatar.x, avatar.y = x, y
        for sprite in occupants:
            if sprite.key in self.resources:
                del self.sprites[sprite.sprite_id]
                self.inventory[sprite.key] += 1
        if any(s.key in self.goals for s in occupants):
            self.won = True
            self.game_over = True
