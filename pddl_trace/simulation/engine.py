"""Episode engine: play seeded episodes and persist their traces."""

from __future__ import annotations

import dataclasses
import json
import logging
import random
from pathlib import Path

import pyarrow.parquet as pq

from pddl_trace.agent import RandomPolicy, TraceAgent
from pddl_trace.config.constants import FLUSH_THRESHOLD
from pddl_trace.config.types import DomainConfig, EpisodeResult, GameDescription, RunConfig
from pddl_trace.io.paths import (
    episode_summary_path,
    episodes_dir,
    logs_dir,
    trace_log_path,
    trace_report_path,
    traces_dir,
)
from pddl_trace.io.schemas import TRACE_SCHEMA_VERSION
from pddl_trace.simulation.protocol import Simulation
from pddl_trace.simulation.sprite_world import SpriteWorld
from pddl_trace.trace.persistence import (
    append_trace_rows,
    flush_trace_columns,
    new_trace_columns,
)
from pddl_trace.trace.recorder import Trace, TraceRecorder
from pddl_trace.trace.report import write_report

logger = logging.getLogger(__name__)


def _deterministic_episode_id(seed: int) -> str:
    """Build reproducible episode ID stable across runs for identical seeds."""
    return f"episode_s{seed}"


def run_episode(
    simulation: Simulation,
    domain_config: DomainConfig,
    run_config: RunConfig,
    rng: random.Random,
    episode_id: str = "episode",
    seed: int = 0,
) -> tuple[EpisodeResult, Trace]:
    """Play ``simulation`` to the end with a random agent and return its trace.

    The host loop owns the world: it asks the agent for an action, then
    advances the world by it, until the game is over.
    """
    agent = TraceAgent(
        domain_config, simulation, RandomPolicy(rng), mode=run_config.grounding_mode
    )
    recorder = TraceRecorder(lookahead_simulations=run_config.lookahead_simulations)
    while not simulation.is_game_over():
        action = agent.act(simulation, recorder)
        simulation.advance(action)
    trace = recorder.finish()

    result = EpisodeResult(
        episode_id=episode_id,
        seed=seed,
        turns=recorder.turn,
        n_states=len(trace.states),
        n_actions=len(trace.actions),
        picked_resources=agent.ledger.snapshot(),
    )
    logger.info(
        "Episode %s finished after %d turns (%d states)",
        episode_id,
        result.turns,
        result.n_states,
    )
    return result, trace


def run_trace_batch(
    n_episodes: int,
    game: GameDescription,
    domain_config: DomainConfig,
    out_dir: Path,
    config: RunConfig | None = None,
    base_seed: int = 0,
) -> list[EpisodeResult]:
    """Run seeded episodes of ``game`` and persist reports, JSON and Parquet."""
    if n_episodes < 1:
        raise ValueError("n_episodes must be >= 1")
    run_config = config or RunConfig()
    if run_config.max_steps is not None:
        game = dataclasses.replace(game, max_steps=run_config.max_steps)

    out_dir = Path(out_dir)
    for directory in (logs_dir(out_dir), traces_dir(out_dir), episodes_dir(out_dir)):
        directory.mkdir(parents=True, exist_ok=True)

    trace_writer: pq.ParquetWriter | None = None
    trace_columns = new_trace_columns()
    results: list[EpisodeResult] = []

    try:
        for i in range(n_episodes):
            seed = base_seed + i
            episode_id = _deterministic_episode_id(seed)
            world = SpriteWorld.from_description(game)
            result, trace = run_episode(
                world,
                domain_config,
                run_config,
                random.Random(seed),
                episode_id=episode_id,
                seed=seed,
            )

            write_report(trace, trace_report_path(out_dir, episode_id))
            payload = {
                "schema_version": TRACE_SCHEMA_VERSION,
                **dataclasses.asdict(result),
                "won": world.won,
                "grounding_mode": run_config.grounding_mode.value,
                "lookahead_simulations": run_config.lookahead_simulations,
            }
            episode_summary_path(out_dir, episode_id).write_text(
                json.dumps(payload, ensure_ascii=False, indent=2)
            )

            append_trace_rows(trace_columns, episode_id, trace)
            if len(trace_columns["episode_id"]) >= FLUSH_THRESHOLD:
                trace_writer = flush_trace_columns(
                    trace_columns, trace_log_path(out_dir), trace_writer
                )
            results.append(result)

        trace_writer = flush_trace_columns(trace_columns, trace_log_path(out_dir), trace_writer)
    finally:
        if trace_writer is not None:
            trace_writer.close()

    return results
