"""Simulation layer: the consumed simulation protocol, the reference sprite
world, and the episode engine.

Import from the submodules; the engine depends on the agent, which depends on
the protocol, so this package does not re-export.
"""
