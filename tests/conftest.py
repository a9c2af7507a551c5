"""Shared domain and game fixtures."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest
import yaml

from pddl_trace.config.types import DomainConfig, GameDescription

DOMAIN_MAPPING: dict[str, object] = {
    "avatarVariable": "?avatar_0",
    "cellVariable": "?cell",
    "variablesTypes": {
        "?avatar_0": "avatarType",
        "?cell": "cellType",
        "?next": "cellType",
        "?gem": "gemType",
        "?wall": "wallType",
    },
    "gameElementsCorrespondence": {
        "avatar": ["(at ?avatar_0 ?cell)"],
        "gem": ["(gem-at ?gem ?cell)"],
        "wall": ["(wall-at ?wall ?cell)"],
    },
    "pickedResourcesPredicates": {"gem": "(got-gem ?avatar_0)"},
    "connections": {
        "UP": "(connected-up ?cell ?next)",
        "DOWN": "(connected-down ?cell ?next)",
        "LEFT": "(connected-left ?cell ?next)",
        "RIGHT": "(connected-right ?cell ?next)",
    },
    "orientationCorrespondence": {
        "UP": "(oriented-up ?avatar_0)",
        "DOWN": "(oriented-down ?avatar_0)",
        "LEFT": "(oriented-left ?avatar_0)",
        "RIGHT": "(oriented-right ?avatar_0)",
    },
}

NUMERIC_DOMAIN_MAPPING: dict[str, object] = {
    **DOMAIN_MAPPING,
    "gameElementsCorrespondence": {
        "avatar": ["(avatar-column ?avatar_0)", "(avatar-row ?avatar_0)"],
        "gem": ["(gem-column ?gem)", "(gem-row ?gem)"],
    },
    "orientationCorrespondence": None,
}

# Avatar at (1, 1), gem at (3, 1), exit at (4, 3); "exit" has no templates.
GAME_MAPPING: dict[str, object] = {
    "level": [
        "wwwwww",
        "wA.g.w",
        "w....w",
        "w...xw",
        "wwwwww",
    ],
    "legend": {"w": ["wall"], "A": ["avatar"], ".": [], "g": ["gem"], "x": ["exit"]},
    "resources": ["gem"],
    "solids": ["wall"],
    "goals": ["exit"],
    "orientation": "RIGHT",
    "max_steps": 30,
}


@pytest.fixture
def domain_mapping() -> dict[str, object]:
    return copy.deepcopy(DOMAIN_MAPPING)


@pytest.fixture
def domain_config() -> DomainConfig:
    return DomainConfig.from_mapping(copy.deepcopy(DOMAIN_MAPPING))


@pytest.fixture
def numeric_domain_config() -> DomainConfig:
    return DomainConfig.from_mapping(copy.deepcopy(NUMERIC_DOMAIN_MAPPING))


@pytest.fixture
def game_mapping() -> dict[str, object]:
    return copy.deepcopy(GAME_MAPPING)


@pytest.fixture
def game_description() -> GameDescription:
    return GameDescription.from_mapping(copy.deepcopy(GAME_MAPPING))


@pytest.fixture
def domain_file(tmp_path: Path) -> Path:
    path = tmp_path / "domain.yaml"
    path.write_text(yaml.safe_dump(DOMAIN_MAPPING), encoding="utf-8")
    return path


@pytest.fixture
def game_file(tmp_path: Path) -> Path:
    path = tmp_path / "game.yaml"
    path.write_text(yaml.safe_dump(GAME_MAPPING), encoding="utf-8")
    return path
