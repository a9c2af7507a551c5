"""Grounded PDDL trace recording for turn-based grid games."""

__version__ = "0.1.0"
