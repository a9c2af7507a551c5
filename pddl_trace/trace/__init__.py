"""Trace layer: recorder state machine, text report and Parquet persistence."""

from pddl_trace.trace.recorder import RecorderState, Trace, TraceRecorder
from pddl_trace.trace.report import format_report, write_report

__all__ = [
    "RecorderState",
    "Trace",
    "TraceRecorder",
    "format_report",
    "write_report",
]
