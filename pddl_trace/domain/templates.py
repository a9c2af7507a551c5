"""Predicate templates and the per-sprite template index.

A template such as ``(at ?a ?c)`` is tokenised once, at load time, into its
predicate name and an ordered list of argument tokens (placeholder or
literal). Instantiation is then a single pass over the tokens, so a
placeholder that is a textual prefix of another (``?c`` and ``?cell``) is
never substituted by mistake.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from pddl_trace.config.constants import PLACEHOLDER_MARKER, PLACEHOLDER_PATTERN
from pddl_trace.domain.atoms import Argument, Atom, Constant

if TYPE_CHECKING:
    from pddl_trace.config.types import DomainConfig

_PLACEHOLDER_RE = re.compile(PLACEHOLDER_PATTERN)


class TemplateSyntaxError(ValueError):
    """Raised when a predicate template cannot be tokenised."""


def is_placeholder(token: str) -> bool:
    return _PLACEHOLDER_RE.fullmatch(token) is not None


@dataclass(frozen=True)
class Placeholder:
    variable: str


@dataclass(frozen=True)
class Literal:
    text: str


Token: TypeAlias = Placeholder | Literal


@dataclass(frozen=True)
class Template:
    """A tokenised predicate skeleton."""

    source: str
    name: str
    tokens: tuple[Token, ...]

    @classmethod
    def parse(cls, source: str) -> Template:
        """Tokenise ``(<name> <arg>*)``; each arg is a placeholder or a literal."""
        if not isinstance(source, str):
            raise TemplateSyntaxError(f"template must be a string, got {source!r}")
        text = source.strip()
        if not (text.startswith("(") and text.endswith(")")):
            raise TemplateSyntaxError(f"template must be wrapped in parentheses: {source!r}")
        parts = text[1:-1].split()
        if not parts:
            raise TemplateSyntaxError(f"template has no predicate name: {source!r}")
        name, *args = parts
        if PLACEHOLDER_MARKER in name or "(" in name or ")" in name:
            raise TemplateSyntaxError(f"invalid predicate name {name!r} in {source!r}")
        tokens: list[Token] = []
        for arg in args:
            if is_placeholder(arg):
                tokens.append(Placeholder(arg))
            elif PLACEHOLDER_MARKER in arg or "(" in arg or ")" in arg:
                raise TemplateSyntaxError(f"malformed argument {arg!r} in {source!r}")
            else:
                tokens.append(Literal(arg))
        return cls(source=source, name=name, tokens=tuple(tokens))

    @property
    def variables(self) -> tuple[str, ...]:
        """Placeholders in order of first appearance, without repeats."""
        seen: dict[str, None] = {}
        for token in self.tokens:
            if isinstance(token, Placeholder):
                seen.setdefault(token.variable, None)
        return tuple(seen)

    def uses(self, variable: str) -> bool:
        return variable in self.variables

    def instantiate(self, binding: Mapping[str, Argument]) -> Atom:
        """Bind every placeholder; literals pass through unchanged."""
        args: list[Argument] = []
        for token in self.tokens:
            if isinstance(token, Placeholder):
                try:
                    args.append(binding[token.variable])
                except KeyError as exc:
                    raise KeyError(
                        f"no binding for {token.variable} in template {self.source!r}"
                    ) from exc
            else:
                args.append(Constant(token.text))
        return Atom(name=self.name, args=tuple(args))


class TemplateIndex:
    """Per-sprite-key templates and the set of variables they mention.

    Built once per agent. Sprite keys absent from the domain simply have no
    templates; they are skipped during grounding.
    """

    def __init__(self, config: DomainConfig) -> None:
        self._templates: dict[str, tuple[Template, ...]] = dict(config.game_elements)
        self._variables: dict[str, frozenset[str]] = {
            sprite_key: frozenset(v for template in templates for v in template.variables)
            for sprite_key, templates in self._templates.items()
        }
        self._resource_variables: dict[str, str | None] = {}
        excluded = {config.cell_variable, config.avatar_variable}
        for sprite_key, templates in self._templates.items():
            candidates = (v for t in templates for v in t.variables if v not in excluded)
            self._resource_variables[sprite_key] = next(candidates, None)

    def __contains__(self, sprite_key: object) -> bool:
        return sprite_key in self._templates

    def variables_of(self, sprite_key: str) -> frozenset[str]:
        return self._variables.get(sprite_key, frozenset())

    def templates_of(self, sprite_key: str) -> tuple[Template, ...]:
        return self._templates.get(sprite_key, ())

    def resource_variable(self, sprite_key: str) -> str | None:
        """First variable of a sprite's templates that names the sprite itself.

        This is the variable used to ground the object consumed by a pickup;
        the cell and avatar variables never qualify.
        """
        return self._resource_variables.get(sprite_key)
