"""Path construction helpers for trace output directories."""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def traces_dir(out_dir: Path) -> Path:
    """Return path to the per-episode text reports."""
    return out_dir / "traces"


def episodes_dir(out_dir: Path) -> Path:
    """Return path to the per-episode JSON summaries."""
    return out_dir / "episodes"


def trace_log_path(out_dir: Path) -> Path:
    """Return path to the trace log Parquet file."""
    return logs_dir(out_dir) / "trace_log.parquet"


def trace_report_path(out_dir: Path, episode_id: str) -> Path:
    return traces_dir(out_dir) / f"{episode_id}.txt"


def episode_summary_path(out_dir: Path, episode_id: str) -> Path:
    return episodes_dir(out_dir) / f"{episode_id}.json"
