"""Tests for the pddl-trace command line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pddl_trace.config.types import GroundingMode
from pddl_trace.experiments.run import main


def _base_args(domain_file: Path, game_file: Path, out_dir: Path) -> list[str]:
    return ["--domain", str(domain_file), "--game", str(game_file), "--out-dir", str(out_dir)]


def test_end_to_end_prints_summary(
    tmp_path: Path, domain_file: Path, game_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out_dir = tmp_path / "out"
    main([*_base_args(domain_file, game_file, out_dir), "--episodes", "2", "--seed", "3"])
    summary = json.loads(capsys.readouterr().out)
    assert summary["episodes"] == 2
    assert summary["grounding_mode"] == "cell"
    assert summary["total_states"] == summary["total_turns"] + 2
    assert set(summary["picked_resources"]) == {"gem"}
    assert (out_dir / "logs" / "trace_log.parquet").exists()
    assert (out_dir / "traces" / "episode_s3.txt").exists()
    assert (out_dir / "episodes" / "episode_s4.json").exists()


def test_print_report(
    tmp_path: Path, domain_file: Path, game_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main([*_base_args(domain_file, game_file, tmp_path / "out"), "--print-report"])
    out = capsys.readouterr().out
    assert out.startswith("##Tasks##\n[0, 1]: (")
    assert "##States##" in out


def test_config_file_values_and_cli_override(
    tmp_path: Path,
    domain_file: Path,
    game_file: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def _fake_batch(**kwargs: object) -> list[object]:
        captured.update(kwargs)
        return []

    monkeypatch.setattr("pddl_trace.experiments.run.run_trace_batch", _fake_batch)
    config_path = tmp_path / "run.json"
    config_path.write_text(
        json.dumps(
            {
                "domain": str(domain_file),
                "game": str(game_file),
                "episodes": 4,
                "seed": 11,
                "lookahead": 3,
                "grounding_mode": "numeric",
                "max_steps": 12,
            }
        )
    )
    main(["--config", str(config_path), "--seed", "20", "--out-dir", str(tmp_path / "o")])
    capsys.readouterr()

    assert captured["n_episodes"] == 4
    assert captured["base_seed"] == 20
    run_config = captured["config"]
    assert run_config.lookahead_simulations == 3  # type: ignore[attr-defined]
    assert run_config.grounding_mode is GroundingMode.NUMERIC  # type: ignore[attr-defined]
    assert run_config.max_steps == 12  # type: ignore[attr-defined]


def test_missing_domain_is_usage_error(game_file: Path, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--game", str(game_file), "--out-dir", str(tmp_path)])
    assert excinfo.value.code == 2


def test_invalid_domain_is_usage_error(
    tmp_path: Path, game_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("avatarVariable: avatar\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(_base_args(broken, game_file, tmp_path / "out"))
    assert excinfo.value.code == 2
    assert "Invalid domain file" in capsys.readouterr().err


def test_missing_game_is_usage_error(
    tmp_path: Path, domain_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(_base_args(domain_file, tmp_path / "nope.yaml", tmp_path / "out"))
    assert excinfo.value.code == 2
    assert "Game file not found" in capsys.readouterr().err


def test_missing_config_file_is_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--config", str(tmp_path / "absent.json")])


def test_rejects_unknown_grounding_mode(
    tmp_path: Path, domain_file: Path, game_file: Path
) -> None:
    with pytest.raises(SystemExit):
        main([*_base_args(domain_file, game_file, tmp_path), "--grounding-mode", "pixels"])
