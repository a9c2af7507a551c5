"""CLI entrypoint: trace random-play episodes of a grid game.

Example::

    pddl-trace --domain domain.yaml --game game.yaml --episodes 5 --out-dir data
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pddl_trace.config.constants import NUM_SIMULATIONS
from pddl_trace.config.loader import load_domain_config, load_game_description
from pddl_trace.config.types import DomainConfigError, GroundingMode, RunConfig
from pddl_trace.io.paths import trace_log_path, trace_report_path
from pddl_trace.simulation.engine import run_trace_batch

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_grounding_mode(raw_mode: str) -> GroundingMode:
    try:
        return GroundingMode(raw_mode)
    except ValueError as exc:
        valid = ", ".join(mode.value for mode in GroundingMode)
        raise ValueError(f"grounding-mode must be one of {valid}") from exc


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_str(raw: object, key: str) -> str:
    """Coerce raw value to str; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Record grounded PDDL traces of random play")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--domain", type=Path, default=None, help="Domain correspondence YAML")
    parser.add_argument("--game", type=Path, default=None, help="Game description YAML")
    parser.add_argument("--episodes", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--lookahead",
        type=int,
        default=None,
        help="Forward-model probes per turn when looking for a terminal state",
    )
    parser.add_argument("--max-steps", type=int, default=None, help="Override the game's tick cap")
    parser.add_argument(
        "--grounding-mode",
        type=str,
        choices=[mode.value for mode in GroundingMode],
        default=None,
    )
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--print-report",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Also print the first episode's report to stdout",
    )
    parser.add_argument("--log-level", type=str.upper, choices=_LOG_LEVELS, default=None)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for trace recording.

    Supports ``--config path/to/config.json`` for reproducible runs. CLI
    arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    log_level = _get_str(args.log_level, "log_level", file_cfg, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    domain_raw = _get_val(args.domain, "domain", file_cfg, None)
    game_raw = _get_val(args.game, "game", file_cfg, None)
    if domain_raw is None or game_raw is None:
        parser.error("--domain and --game are required (on the command line or in --config)")
    episodes = _get_int(args.episodes, "episodes", file_cfg, 1)
    seed = _get_int(args.seed, "seed", file_cfg, 0)
    out_dir = Path(_get_str(args.out_dir, "out_dir", file_cfg, "data"))
    print_report = _get_bool(args.print_report, "print_report", file_cfg, False)
    max_steps_raw = _get_val(args.max_steps, "max_steps", file_cfg, None)

    try:
        grounding_mode = _parse_grounding_mode(
            _get_str(args.grounding_mode, "grounding_mode", file_cfg, GroundingMode.CELL.value)
        )
        lookahead = _get_int(args.lookahead, "lookahead", file_cfg, NUM_SIMULATIONS)
        run_config = RunConfig(
            lookahead_simulations=lookahead,
            grounding_mode=grounding_mode,
            max_steps=None if max_steps_raw is None else _coerce_int(max_steps_raw, "max_steps"),
        )
        domain_config = load_domain_config(_coerce_str(domain_raw, "domain"))
        game = load_game_description(_coerce_str(game_raw, "game"))
    except DomainConfigError as exc:
        parser.error(f"Invalid domain file: {exc}")
    except ValueError as exc:
        parser.error(str(exc))

    results = run_trace_batch(
        n_episodes=episodes,
        game=game,
        domain_config=domain_config,
        out_dir=out_dir,
        config=run_config,
        base_seed=seed,
    )

    if print_report:
        print(trace_report_path(out_dir, results[0].episode_id).read_text(), end="")

    summary = {
        "episodes": len(results),
        "grounding_mode": run_config.grounding_mode.value,
        "total_turns": sum(r.turns for r in results),
        "total_states": sum(r.n_states for r in results),
        "picked_resources": {
            key: sum(r.picked_resources.get(key, 0) for r in results)
            for key in domain_config.picked_resources
        },
        "trace_log": str(trace_log_path(out_dir)),
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
