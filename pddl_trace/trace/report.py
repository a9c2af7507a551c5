"""Two-section text report parsed by the plan-mining tool.

Layout::

    ##Tasks##
    [0, 1]: (MOVE_RIGHT ...)
    ...


    ##States##
    [0]: ((AT ...) ...)

    ...

Indices are zero-based positions in each section.
"""

from __future__ import annotations

from pathlib import Path

from pddl_trace.domain.atoms import render_state
from pddl_trace.trace.recorder import Trace


def rendered_actions(trace: Trace) -> list[str]:
    return [action.render() for _, action in trace.actions]


def rendered_states(trace: Trace) -> list[str]:
    return [render_state(state) for _, state in trace.states]


def format_report(trace: Trace) -> str:
    lines = ["##Tasks##"]
    lines.extend(f"[{i}, {i + 1}]: {action}" for i, action in enumerate(rendered_actions(trace)))
    lines.append("\n\n##States##")
    lines.extend(f"[{i}]: {state}\n" for i, state in enumerate(rendered_states(trace)))
    return "\n".join(lines) + "\n"


def write_report(trace: Trace, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_report(trace), encoding="utf-8")
    return path
