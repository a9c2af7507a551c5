"""Structured ground atoms and their text rendering.

Atoms stay structured (name plus typed arguments) until they are rendered;
``render`` and ``render_state`` are the only places that produce the
uppercase PDDL text consumed downstream.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeAlias

from pddl_trace.config.constants import PLACEHOLDER_MARKER


def strip_marker(variable: str) -> str:
    """Drop the placeholder marker from a variable name (``?cell`` -> ``cell``)."""
    return variable.replace(PLACEHOLDER_MARKER, "")


@dataclass(frozen=True)
class GroundedObject:
    """A resolved object symbol together with its type label."""

    name: str
    type_name: str

    @classmethod
    def singleton(cls, variable: str, type_name: str) -> GroundedObject:
        """Object named after its variable alone (the avatar)."""
        return cls(name=strip_marker(variable), type_name=type_name)

    @classmethod
    def at_cell(cls, variable: str, x: int, y: int, type_name: str) -> GroundedObject:
        """Object keyed by grid cell: ``<variable>_<x>_<y>``."""
        return cls(name=f"{strip_marker(variable)}_{x}_{y}", type_name=type_name)

    def render(self) -> str:
        return f"{self.name} - {self.type_name}"


@dataclass(frozen=True)
class Constant:
    """A literal template argument, rendered bare."""

    value: str

    def render(self) -> str:
        return self.value


Argument: TypeAlias = GroundedObject | Constant


@dataclass(frozen=True)
class Atom:
    """A ground predicate: name plus ordered arguments."""

    name: str
    args: tuple[Argument, ...] = ()

    def with_suffix(self, suffix: str) -> Atom:
        return Atom(name=f"{self.name}{suffix}", args=self.args)

    def with_args(self, *extra: Argument) -> Atom:
        return Atom(name=self.name, args=self.args + extra)

    def render(self) -> str:
        parts = [self.name, *(arg.render() for arg in self.args)]
        return f"({' '.join(parts)})".upper()


@dataclass(frozen=True)
class FluentAtom:
    """Numeric fluent assignment ``(= <atom> <value>)``."""

    atom: Atom
    value: int

    def render(self) -> str:
        return f"(= {self.atom.render()} {self.value})"


GroundAtom: TypeAlias = Atom | FluentAtom


def render_state(atoms: Iterable[GroundAtom]) -> str:
    """Render a grounded state as ``(ATOM1 ATOM2 ... ATOMN)``."""
    return f"({' '.join(atom.render() for atom in atoms)})"
