"""Parquet persistence helpers for the trace log stream."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.parquet as pq

from pddl_trace.io.schemas import TRACE_KINDS, TRACE_SCHEMA
from pddl_trace.trace.recorder import Trace
from pddl_trace.trace.report import rendered_actions, rendered_states


def new_trace_columns() -> dict[str, list[int | str]]:
    return {field.name: [] for field in TRACE_SCHEMA}


def append_trace_rows(
    trace_columns: dict[str, list[int | str]], episode_id: str, trace: Trace
) -> None:
    """Append one row per state and per action of ``trace``."""
    sections = (
        (TRACE_KINDS[0], [turn for turn, _ in trace.states], rendered_states(trace)),
        (TRACE_KINDS[1], [turn for turn, _ in trace.actions], rendered_actions(trace)),
    )
    for kind, turns, atoms in sections:
        for index, (turn, atom) in enumerate(zip(turns, atoms, strict=True)):
            trace_columns["episode_id"].append(episode_id)
            trace_columns["kind"].append(kind)
            trace_columns["index"].append(index)
            trace_columns["turn"].append(turn)
            trace_columns["atom"].append(atom)


def flush_trace_columns(
    trace_columns: dict[str, list[int | str]],
    trace_log_path: Path,
    trace_writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated trace rows to Parquet and clear in-memory buffers."""
    if not trace_columns["episode_id"]:
        return trace_writer
    table = pa.Table.from_pydict(trace_columns, schema=TRACE_SCHEMA)
    if trace_writer is None:
        trace_writer = pq.ParquetWriter(trace_log_path, TRACE_SCHEMA)
    trace_writer.write_table(table)
    for values in trace_columns.values():
        values.clear()
    return trace_writer


def read_trace_log(trace_log_path: Path, episode_id: str | None = None) -> pa.Table:
    """Load the trace log, optionally restricted to one episode."""
    table = pq.read_table(trace_log_path)
    if episode_id is None:
        return table
    mask = pc.equal(table.column("episode_id"), episode_id)
    return table.filter(mask)
