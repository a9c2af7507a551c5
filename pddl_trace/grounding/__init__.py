"""Grounding layer: state (predicate) and action grounders."""

from pddl_trace.grounding.actions import ActionGrounder
from pddl_trace.grounding.predicates import PredicateGrounder

__all__ = [
    "ActionGrounder",
    "PredicateGrounder",
]
