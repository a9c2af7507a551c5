"""Tests for domain/game configuration types and their YAML loaders."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pddl_trace.config.loader import load_domain_config, load_game_description
from pddl_trace.config.types import (
    DomainConfig,
    DomainConfigError,
    GameDescription,
    GroundingMode,
    RunConfig,
)
from pddl_trace.domain.grid import Direction


class TestDomainConfigFromMapping:
    def test_parses_all_sections(self, domain_config: DomainConfig) -> None:
        assert domain_config.avatar_variable == "?avatar_0"
        assert domain_config.cell_variable == "?cell"
        assert set(domain_config.game_elements) == {"avatar", "gem", "wall"}
        assert list(domain_config.picked_resources) == ["gem"]
        assert set(domain_config.connections) == set(Direction)
        assert domain_config.orientations is not None

    def test_object_naming(self, domain_config: DomainConfig) -> None:
        assert domain_config.avatar_object().render() == "avatar_0 - avatarType"
        assert domain_config.cell_object((2, 3)).render() == "cell_2_3 - cellType"
        assert domain_config.object_at("?gem", (3, 3)).render() == "gem_3_3 - gemType"

    def test_orientation_section_is_optional(self, domain_mapping: dict[str, object]) -> None:
        del domain_mapping["orientationCorrespondence"]
        assert DomainConfig.from_mapping(domain_mapping).orientations is None

    def test_direction_keys_are_case_insensitive(self, domain_mapping: dict[str, object]) -> None:
        connections = domain_mapping["connections"]
        assert isinstance(connections, dict)
        domain_mapping["connections"] = {k.lower(): v for k, v in connections.items()}
        assert set(DomainConfig.from_mapping(domain_mapping).connections) == set(Direction)


class TestDomainConfigValidation:
    def test_undeclared_variable(self, domain_mapping: dict[str, object]) -> None:
        domain_mapping["gameElementsCorrespondence"] = {"key": ["(key-at ?key ?cell)"]}
        with pytest.raises(DomainConfigError, match="not declared"):
            DomainConfig.from_mapping(domain_mapping)

    def test_malformed_template(self, domain_mapping: dict[str, object]) -> None:
        domain_mapping["gameElementsCorrespondence"] = {"gem": ["gem-at ?gem ?cell"]}
        with pytest.raises(DomainConfigError, match="parentheses"):
            DomainConfig.from_mapping(domain_mapping)

    def test_missing_connection_direction(self, domain_mapping: dict[str, object]) -> None:
        connections = domain_mapping["connections"]
        assert isinstance(connections, dict)
        del connections["LEFT"]
        with pytest.raises(DomainConfigError, match="connections missing directions: LEFT"):
            DomainConfig.from_mapping(domain_mapping)

    def test_missing_orientation_direction(self, domain_mapping: dict[str, object]) -> None:
        orientations = domain_mapping["orientationCorrespondence"]
        assert isinstance(orientations, dict)
        del orientations["UP"]
        with pytest.raises(DomainConfigError, match="orientationCorrespondence missing"):
            DomainConfig.from_mapping(domain_mapping)

    def test_unknown_direction_key(self, domain_mapping: dict[str, object]) -> None:
        connections = domain_mapping["connections"]
        assert isinstance(connections, dict)
        connections["NORTH"] = "(connected-up ?cell ?next)"
        with pytest.raises(DomainConfigError, match="NORTH"):
            DomainConfig.from_mapping(domain_mapping)

    def test_connection_without_cell_variable(self, domain_mapping: dict[str, object]) -> None:
        connections = domain_mapping["connections"]
        assert isinstance(connections, dict)
        connections["UP"] = "(connected-up ?next ?gem)"
        with pytest.raises(DomainConfigError, match="must use"):
            DomainConfig.from_mapping(domain_mapping)

    def test_connection_with_undeclared_neighbour(self, domain_mapping: dict[str, object]) -> None:
        connections = domain_mapping["connections"]
        assert isinstance(connections, dict)
        connections["UP"] = "(connected-up ?cell ?undeclared)"
        with pytest.raises(DomainConfigError, match="not declared"):
            DomainConfig.from_mapping(domain_mapping)

    def test_connection_needs_exactly_one_neighbour(
        self, domain_mapping: dict[str, object]
    ) -> None:
        connections = domain_mapping["connections"]
        assert isinstance(connections, dict)
        connections["UP"] = "(connected-up ?cell)"
        with pytest.raises(DomainConfigError, match="exactly one neighbour"):
            DomainConfig.from_mapping(domain_mapping)

    def test_pickup_template_is_avatar_only(self, domain_mapping: dict[str, object]) -> None:
        domain_mapping["pickedResourcesPredicates"] = {"gem": "(got ?avatar_0 ?gem)"}
        with pytest.raises(DomainConfigError, match="only \\?avatar_0"):
            DomainConfig.from_mapping(domain_mapping)

    def test_avatar_and_cell_must_differ(self, domain_mapping: dict[str, object]) -> None:
        domain_mapping["cellVariable"] = "?avatar_0"
        with pytest.raises(DomainConfigError, match="must differ"):
            DomainConfig.from_mapping(domain_mapping)

    def test_role_variable_must_be_placeholder(self, domain_mapping: dict[str, object]) -> None:
        domain_mapping["avatarVariable"] = "avatar_0"
        with pytest.raises(DomainConfigError, match="not a placeholder"):
            DomainConfig.from_mapping(domain_mapping)

    def test_missing_section(self, domain_mapping: dict[str, object]) -> None:
        del domain_mapping["variablesTypes"]
        with pytest.raises(DomainConfigError, match="variablesTypes"):
            DomainConfig.from_mapping(domain_mapping)


class TestRunConfig:
    def test_defaults(self) -> None:
        config = RunConfig()
        assert config.lookahead_simulations == 10
        assert config.grounding_mode is GroundingMode.CELL
        assert config.max_steps is None

    def test_rejects_zero_lookahead(self) -> None:
        with pytest.raises(ValueError, match="lookahead_simulations"):
            RunConfig(lookahead_simulations=0)

    def test_rejects_zero_max_steps(self) -> None:
        with pytest.raises(ValueError, match="max_steps"):
            RunConfig(max_steps=0)


class TestGameDescription:
    def test_from_mapping(self, game_description: GameDescription) -> None:
        assert len(game_description.level) == 5
        assert game_description.legend["."] == ()
        assert game_description.resources == frozenset({"gem"})
        assert game_description.goals == frozenset({"exit"})
        assert game_description.orientation is Direction.RIGHT
        assert game_description.max_steps == 30

    def test_level_may_be_a_block_string(self, game_mapping: dict[str, object]) -> None:
        level = game_mapping["level"]
        assert isinstance(level, list)
        game_mapping["level"] = "\n".join(level) + "\n"
        assert GameDescription.from_mapping(game_mapping).level == tuple(level)

    def test_rejects_ragged_level(self, game_mapping: dict[str, object]) -> None:
        game_mapping["level"] = ["wwww", "wA.w", "www"]
        with pytest.raises(ValueError, match="same width"):
            GameDescription.from_mapping(game_mapping)

    def test_rejects_unknown_character(self, game_mapping: dict[str, object]) -> None:
        game_mapping["level"] = ["wwww", "wA?w", "wwww"]
        with pytest.raises(ValueError, match="missing from legend"):
            GameDescription.from_mapping(game_mapping)

    def test_requires_exactly_one_avatar(self, game_mapping: dict[str, object]) -> None:
        game_mapping["level"] = ["wwww", "wAAw", "wwww"]
        with pytest.raises(ValueError, match="exactly one"):
            GameDescription.from_mapping(game_mapping)

    def test_rejects_unknown_orientation(self, game_mapping: dict[str, object]) -> None:
        game_mapping["orientation"] = "NORTH"
        with pytest.raises(ValueError, match="orientation"):
            GameDescription.from_mapping(game_mapping)


class TestLoaders:
    def test_load_domain_config(self, domain_file: Path) -> None:
        config = load_domain_config(domain_file)
        assert config.avatar_variable == "?avatar_0"

    def test_load_domain_config_accepts_str_path(self, domain_file: Path) -> None:
        assert load_domain_config(str(domain_file)).cell_variable == "?cell"

    def test_missing_domain_file(self, tmp_path: Path) -> None:
        with pytest.raises(DomainConfigError, match="not readable"):
            load_domain_config(tmp_path / "absent.yaml")

    def test_domain_path_is_a_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DomainConfigError, match="not readable"):
            load_domain_config(tmp_path)

    def test_invalid_domain_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("variablesTypes: [unclosed\n", encoding="utf-8")
        with pytest.raises(DomainConfigError, match="not valid YAML"):
            load_domain_config(path)

    def test_domain_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text(yaml.safe_dump(["a", "b"]), encoding="utf-8")
        with pytest.raises(DomainConfigError, match="mapping"):
            load_domain_config(path)

    def test_load_game_description(self, game_file: Path) -> None:
        game = load_game_description(game_file)
        assert game.level[1] == "wA.g.w"

    def test_missing_game_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Game file not found"):
            load_game_description(tmp_path / "absent.yaml")

    def test_game_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("- wwww\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_game_description(path)
