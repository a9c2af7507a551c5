"""Parquet schema definitions for trace artifacts.

Every module that writes or reads the trace log works against these column
contracts.
"""

from __future__ import annotations

import pyarrow as pa

TRACE_SCHEMA_VERSION = 1

TRACE_SCHEMA = pa.schema(
    [
        ("episode_id", pa.string()),
        ("kind", pa.string()),
        ("index", pa.int64()),
        ("turn", pa.int64()),
        ("atom", pa.string()),
    ]
)
"""One row per rendered state or action; ``kind`` is ``state`` or ``action``."""

TRACE_KINDS = ("state", "action")
