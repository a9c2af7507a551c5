"""Configuration dataclasses for grounding, games and trace runs.

``DomainConfig`` is the immutable grounding schema loaded once per run;
``GameDescription`` parameterises the reference simulation; ``RunConfig``
holds the per-run knobs. All of them validate in ``__post_init__``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from pddl_trace.config.constants import MAX_STEPS, NUM_SIMULATIONS
from pddl_trace.domain.atoms import GroundedObject
from pddl_trace.domain.grid import Cell, Direction
from pddl_trace.domain.templates import (
    Template,
    TemplateSyntaxError,
    is_placeholder,
)

__all__ = [
    "DomainConfig",
    "DomainConfigError",
    "EpisodeResult",
    "GameDescription",
    "GroundingMode",
    "RunConfig",
]


class DomainConfigError(ValueError):
    """Raised when a domain correspondence file is missing or inconsistent."""


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EpisodeResult:
    """Top-level result for one traced episode."""

    episode_id: str
    seed: int
    turns: int
    n_states: int
    n_actions: int
    picked_resources: dict[str, int] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Domain schema
# ---------------------------------------------------------------------------


def _parse_directions(raw: object, section: str) -> dict[Direction, Template]:
    if not isinstance(raw, Mapping):
        raise DomainConfigError(f"{section} must be a mapping of direction -> template")
    parsed: dict[Direction, Template] = {}
    for key, source in raw.items():
        try:
            direction = Direction(str(key).upper())
        except ValueError as exc:
            valid = ", ".join(d.value for d in Direction)
            raise DomainConfigError(f"{section} key {key!r} must be one of {valid}") from exc
        parsed[direction] = _parse_template(source, section)
    return parsed


def _parse_template(source: object, section: str) -> Template:
    try:
        return Template.parse(source)  # type: ignore[arg-type]
    except TemplateSyntaxError as exc:
        raise DomainConfigError(f"{section}: {exc}") from exc


def _require_mapping(raw: Mapping[str, object], key: str) -> Mapping[object, object]:
    value = raw.get(key)
    if not isinstance(value, Mapping):
        raise DomainConfigError(f"{key} must be a mapping")
    return value


def _require_str(raw: Mapping[str, object], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise DomainConfigError(f"{key} must be a non-empty string")
    return value


@dataclass(frozen=True)
class DomainConfig:
    """Declarative correspondence between sprites and predicate templates."""

    avatar_variable: str
    cell_variable: str
    variables_types: Mapping[str, str]
    game_elements: Mapping[str, tuple[Template, ...]]
    picked_resources: Mapping[str, Template]
    connections: Mapping[Direction, Template]
    orientations: Mapping[Direction, Template] | None = None

    def __post_init__(self) -> None:
        for role, variable in (
            ("avatarVariable", self.avatar_variable),
            ("cellVariable", self.cell_variable),
        ):
            if not is_placeholder(variable):
                raise DomainConfigError(f"{role} {variable!r} is not a placeholder")
            if variable not in self.variables_types:
                raise DomainConfigError(f"{role} {variable!r} has no entry in variablesTypes")
        if self.avatar_variable == self.cell_variable:
            raise DomainConfigError("avatarVariable and cellVariable must differ")

        for sprite_key, templates in self.game_elements.items():
            for template in templates:
                self._check_declared(template, f"gameElementsCorrespondence[{sprite_key}]")

        for resource, template in self.picked_resources.items():
            self._check_avatar_only(template, f"pickedResourcesPredicates[{resource}]")

        missing = [d.value for d in Direction if d not in self.connections]
        if missing:
            raise DomainConfigError(f"connections missing directions: {', '.join(missing)}")
        for direction, template in self.connections.items():
            self._check_connection(template, f"connections[{direction.value}]")

        if self.orientations is not None:
            missing = [d.value for d in Direction if d not in self.orientations]
            if missing:
                raise DomainConfigError(
                    f"orientationCorrespondence missing directions: {', '.join(missing)}"
                )
            for direction, template in self.orientations.items():
                self._check_avatar_only(template, f"orientationCorrespondence[{direction.value}]")

    def _check_declared(self, template: Template, where: str) -> None:
        for variable in template.variables:
            if variable not in self.variables_types:
                raise DomainConfigError(
                    f"{where}: variable {variable} in {template.source!r} is not declared "
                    "in variablesTypes"
                )

    def _check_avatar_only(self, template: Template, where: str) -> None:
        self._check_declared(template, where)
        others = [v for v in template.variables if v != self.avatar_variable]
        if others:
            raise DomainConfigError(
                f"{where}: only {self.avatar_variable} may appear in {template.source!r}"
            )

    def _check_connection(self, template: Template, where: str) -> None:
        self._check_declared(template, where)
        if self.cell_variable not in template.variables:
            raise DomainConfigError(f"{where}: {template.source!r} must use {self.cell_variable}")
        neighbors = [v for v in template.variables if v != self.cell_variable]
        if len(neighbors) != 1:
            raise DomainConfigError(
                f"{where}: {template.source!r} needs exactly one neighbour placeholder"
            )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> DomainConfig:
        """Build a config from the camelCase keys of a domain file."""
        if not isinstance(raw, Mapping):
            raise DomainConfigError("domain config must be a mapping")
        variables_types = {
            str(variable): str(type_name)
            for variable, type_name in _require_mapping(raw, "variablesTypes").items()
        }

        game_elements: dict[str, tuple[Template, ...]] = {}
        for sprite_key, sources in _require_mapping(raw, "gameElementsCorrespondence").items():
            section = f"gameElementsCorrespondence[{sprite_key}]"
            if isinstance(sources, str) or not isinstance(sources, list):
                raise DomainConfigError(f"{section} must be a list of templates")
            game_elements[str(sprite_key)] = tuple(
                _parse_template(source, section) for source in sources
            )

        picked_raw = raw.get("pickedResourcesPredicates") or {}
        if not isinstance(picked_raw, Mapping):
            raise DomainConfigError("pickedResourcesPredicates must be a mapping")
        picked_resources = {
            str(resource): _parse_template(source, f"pickedResourcesPredicates[{resource}]")
            for resource, source in picked_raw.items()
        }

        orientation_raw = raw.get("orientationCorrespondence")
        orientations = (
            None
            if orientation_raw is None
            else _parse_directions(orientation_raw, "orientationCorrespondence")
        )

        return cls(
            avatar_variable=_require_str(raw, "avatarVariable"),
            cell_variable=_require_str(raw, "cellVariable"),
            variables_types=variables_types,
            game_elements=game_elements,
            picked_resources=picked_resources,
            connections=_parse_directions(raw.get("connections"), "connections"),
            orientations=orientations,
        )

    def type_of(self, variable: str) -> str:
        return self.variables_types[variable]

    def avatar_object(self) -> GroundedObject:
        return GroundedObject.singleton(self.avatar_variable, self.type_of(self.avatar_variable))

    def object_at(self, variable: str, cell: Cell) -> GroundedObject:
        return GroundedObject.at_cell(variable, cell[0], cell[1], self.type_of(variable))

    def cell_object(self, cell: Cell) -> GroundedObject:
        return self.object_at(self.cell_variable, cell)


# ---------------------------------------------------------------------------
# Run and game configuration
# ---------------------------------------------------------------------------


class GroundingMode(Enum):
    """How cell-bound predicates are grounded."""

    CELL = "cell"
    NUMERIC = "numeric"


@dataclass(frozen=True)
class RunConfig:
    """Per-run knobs shared by single-episode and batch runs."""

    lookahead_simulations: int = NUM_SIMULATIONS
    grounding_mode: GroundingMode = GroundingMode.CELL
    max_steps: int | None = None

    def __post_init__(self) -> None:
        if self.lookahead_simulations < 1:
            raise ValueError("lookahead_simulations must be >= 1")
        if self.max_steps is not None and self.max_steps < 1:
            raise ValueError("max_steps must be >= 1")


@dataclass(frozen=True)
class GameDescription:
    """ASCII level plus legend for the reference sprite simulation."""

    level: tuple[str, ...]
    legend: Mapping[str, tuple[str, ...]]
    resources: frozenset[str] = frozenset()
    solids: frozenset[str] = frozenset({"wall"})
    goals: frozenset[str] = frozenset()
    avatar_key: str = "avatar"
    orientation: Direction = Direction.RIGHT
    rotate_in_place: bool = False
    max_steps: int = MAX_STEPS

    def __post_init__(self) -> None:
        if not self.level:
            raise ValueError("level must have at least one row")
        width = len(self.level[0])
        if width == 0:
            raise ValueError("level rows must not be empty")
        if any(len(row) != width for row in self.level):
            raise ValueError("level rows must all have the same width")
        unknown = sorted({ch for row in self.level for ch in row} - set(self.legend))
        if unknown:
            raise ValueError(f"level uses characters missing from legend: {''.join(unknown)}")
        avatars = sum(
            self.legend[ch].count(self.avatar_key) for row in self.level for ch in row
        )
        if avatars != 1:
            raise ValueError(f"level must contain exactly one {self.avatar_key!r}, got {avatars}")
        if self.max_steps < 1:
            raise ValueError("max_steps must be >= 1")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> GameDescription:
        """Build a description from the keys of a game file."""
        level_raw = raw.get("level")
        if isinstance(level_raw, str):
            rows = tuple(row for row in level_raw.splitlines() if row.strip())
        elif isinstance(level_raw, list):
            rows = tuple(str(row) for row in level_raw)
        else:
            raise ValueError("level must be a string or a list of rows")
        legend_raw = raw.get("legend")
        if not isinstance(legend_raw, Mapping):
            raise ValueError("legend must be a mapping of character -> sprite keys")
        legend: dict[str, tuple[str, ...]] = {}
        for char, sprites in legend_raw.items():
            if not isinstance(char, str) or len(char) != 1:
                raise ValueError(f"legend key {char!r} must be a single character")
            if isinstance(sprites, str):
                legend[char] = (sprites,)
            else:
                legend[char] = tuple(str(s) for s in sprites or ())
        try:
            orientation = Direction(str(raw.get("orientation", "RIGHT")).upper())
        except ValueError as exc:
            valid = ", ".join(d.value for d in Direction)
            raise ValueError(f"orientation must be one of {valid}") from exc
        return cls(
            level=rows,
            legend=legend,
            resources=frozenset(str(k) for k in raw.get("resources") or ()),
            solids=frozenset(str(k) for k in raw.get("solids", ("wall",)) or ()),
            goals=frozenset(str(k) for k in raw.get("goals") or ()),
            avatar_key=str(raw.get("avatar", "avatar")),
            orientation=orientation,
            rotate_in_place=bool(raw.get("rotate_in_place", False)),
            max_steps=int(raw.get("max_steps", MAX_STEPS)),  # type: ignore[call-overload]
        )
