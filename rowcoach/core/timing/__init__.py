"""
Split timing for rowing sessions.

Contains the timing engine, its domain models, formatting helpers and
the CSV export.
"""

from .clock import Clock, ManualClock, MonotonicClock
from .engine import TimingEngine
from .export import (
    EXPORT_FILENAME,
    BenchmarkProvider,
    ExportRow,
    SessionExport,
    build_export,
    compute_export_row,
    percent_vs_benchmark,
    render_csv,
)
from .models import (
    BenchmarkTime,
    Boat,
    BoatClass,
    BoatNotFoundError,
    InvalidConfigurationError,
    NonMonotonicSplitError,
    Session,
    SessionConfig,
    SessionNotRunningError,
    SessionNotStartedError,
    SessionRunningError,
    SessionState,
    Split,
    SplitLimitReachedError,
    TimingError,
)

__all__ = [
    "Clock",
    "ManualClock",
    "MonotonicClock",
    "TimingEngine",
    "EXPORT_FILENAME",
    "BenchmarkProvider",
    "ExportRow",
    "SessionExport",
    "build_export",
    "compute_export_row",
    "percent_vs_benchmark",
    "render_csv",
    "BenchmarkTime",
    "Boat",
    "BoatClass",
    "BoatNotFoundError",
    "InvalidConfigurationError",
    "NonMonotonicSplitError",
    "Session",
    "SessionConfig",
    "SessionNotRunningError",
    "SessionNotStartedError",
    "SessionRunningError",
    "SessionState",
    "Split",
    "SplitLimitReachedError",
    "TimingError",
]
