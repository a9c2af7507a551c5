"""YAML loading for domain correspondence and game description files."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from pddl_trace.config.types import DomainConfig, DomainConfigError, GameDescription

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> object:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_domain_config(path: Path | str) -> DomainConfig:
    """Load and validate a domain correspondence file.

    Any problem (missing file, invalid YAML, undeclared variable, malformed
    template) surfaces here as :exc:`DomainConfigError`, before any episode
    starts.
    """
    path = Path(path)
    try:
        raw = _read_yaml(path)
    except OSError as exc:
        raise DomainConfigError(f"Domain config not readable: {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise DomainConfigError(f"Domain config is not valid YAML: {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise DomainConfigError(f"Domain config must be a YAML mapping: {path}")
    config = DomainConfig.from_mapping(raw)
    logger.info(
        "Loaded domain config %s: %d sprite keys, %d resources, orientation=%s",
        path,
        len(config.game_elements),
        len(config.picked_resources),
        config.orientations is not None,
    )
    return config


def load_game_description(path: Path | str) -> GameDescription:
    """Load a game description (level, legend, sprite roles) from YAML."""
    path = Path(path)
    try:
        raw = _read_yaml(path)
    except OSError as exc:
        raise ValueError(f"Game file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Game file is not valid YAML: {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"Game file must be a YAML mapping: {path}")
    return GameDescription.from_mapping(raw)
