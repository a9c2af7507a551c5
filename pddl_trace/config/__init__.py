"""Configuration layer: constants, typed config dataclasses and file loaders.

Import from the submodules (``pddl_trace.config.types``,
``pddl_trace.config.loader``); the domain layer depends on the constants
module, so this package does not re-export.
"""
