"""
Session export: benchmark comparison and CSV rendering.

Row computation is pure. The only I/O is the benchmark lookup, which
is fanned out concurrently, one request per boat, before any row is
assembled. A failed lookup costs that boat its WBT figure and nothing
else.
"""

import asyncio
import csv
import logging
from dataclasses import dataclass, field, replace
from io import StringIO
from typing import Optional, Protocol

from .formatting import format_pace, format_seconds, format_total_time, pace_seconds
from .models import (
    BenchmarkTime,
    Boat,
    BoatClass,
    Session,
    SessionNotStartedError,
)

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "rowing_data.csv"

HEADER = [
    "Session Date",
    "Session Time",
    "Session Distance",
    "Boat Name",
    "Boat Class",
    "Total Time",
    "Average Pace",
    "WBT (%)",
]


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class BenchmarkProvider(Protocol):
    """
    Interface for world-best-time sources.

    Lookups may be slow or fail. The export treats an exception, a
    missing result or a non-positive time the same way: no benchmark.
    """

    async def get_benchmark_time(self, boat_class: str) -> BenchmarkTime:
        """Return the reference time for a boat class."""
        ...

    async def get_boat_classes(self) -> list[BoatClass]:
        """List the boat classes this provider knows about."""
        ...


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExportRow:
    """One boat's line in the export, already formatted."""
    boat_name: str
    boat_class: str
    total_time: str
    average_pace: str
    percent_vs_benchmark: str
    split_times: list[str] = field(default_factory=list)

    def cells(self) -> list[str]:
        return [
            self.boat_name,
            self.boat_class,
            self.total_time,
            self.average_pace,
            self.percent_vs_benchmark,
            *self.split_times,
        ]


@dataclass(frozen=True)
class SessionExport:
    """Everything needed to write the CSV file."""
    session_date: str
    session_time: str
    session_distance: int
    split_columns: int
    rows: list[ExportRow]

    @property
    def header(self) -> list[str]:
        return HEADER + [f"Split Time {i}" for i in range(1, self.split_columns + 1)]


def percent_vs_benchmark(total_time_seconds: float, benchmark_seconds: float) -> float:
    """
    Performance relative to the benchmark, as a percentage.

    100 means matching the benchmark exactly; above 100 is faster. A
    missing benchmark (<= 0) yields 0.
    """
    if benchmark_seconds <= 0:
        return 0.0
    ratio = 1 - (total_time_seconds - benchmark_seconds) / benchmark_seconds
    return round(ratio * 100, 2)


def compute_export_row(
    boat: Boat,
    session_distance: int,
    benchmark_seconds: float,
    split_columns: Optional[int] = None,
) -> ExportRow:
    """
    Build the export row for one boat.

    Pure: reads the boat, never changes it. split_columns pads the
    interval cells with empty strings so every row has the same width.
    """
    total = boat.total_time_seconds
    average = pace_seconds(total, session_distance) if total > 0 else 0.0

    split_times = [format_seconds(t) for t in boat.interval_times]
    if split_columns is not None and split_columns > len(split_times):
        split_times.extend([""] * (split_columns - len(split_times)))

    return ExportRow(
        boat_name=boat.boat_name,
        boat_class=boat.boat_class,
        total_time=format_total_time(total),
        average_pace=format_pace(average),
        percent_vs_benchmark=format_seconds(percent_vs_benchmark(total, benchmark_seconds)),
        split_times=split_times,
    )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

async def lookup_benchmark(provider: BenchmarkProvider, boat_class: str) -> float:
    """
    Fetch one benchmark, reduced to seconds.

    Returns 0 when the provider fails or has nothing usable, so a single
    bad lookup never aborts an export.
    """
    try:
        benchmark = await provider.get_benchmark_time(boat_class)
    except Exception as e:
        logger.warning(
            "Benchmark lookup failed",
            extra={"boat_class": boat_class, "error": str(e)}
        )
        return 0.0

    if benchmark is None or not benchmark.is_available:
        logger.warning("No benchmark available", extra={"boat_class": boat_class})
        return 0.0

    return benchmark.time_in_seconds


async def build_export(session: Session, provider: BenchmarkProvider) -> SessionExport:
    """
    Assemble the export for every boat in the session.

    Boats are snapshotted before the first await so splits recorded
    while lookups are in flight do not leak into a half-built export.
    """
    if not session.is_started:
        raise SessionNotStartedError("Please start the session before exporting data.")

    snapshot = replace(
        session,
        boats=[replace(boat, splits=list(boat.splits)) for boat in session.boats],
    )
    boats = snapshot.boats
    session_distance = snapshot.config.session_distance
    started_at = snapshot.started_at

    benchmarks = await asyncio.gather(
        *(lookup_benchmark(provider, boat.boat_class) for boat in boats)
    )

    split_columns = snapshot.max_split_count
    rows = [
        compute_export_row(boat, session_distance, benchmark, split_columns)
        for boat, benchmark in zip(boats, benchmarks)
    ]

    logger.info(
        "Export built",
        extra={
            "boats": len(rows),
            "split_columns": split_columns,
            "missing_benchmarks": sum(1 for b in benchmarks if b <= 0),
        }
    )

    return SessionExport(
        session_date=started_at.strftime("%Y-%m-%d"),
        session_time=started_at.strftime("%H:%M:%S"),
        session_distance=session_distance,
        split_columns=split_columns,
        rows=rows,
    )


def render_csv(export: SessionExport) -> str:
    """Write the export as CSV text with CRLF line endings."""
    buf = StringIO()
    w = csv.writer(buf)
    w.writerow(export.header)
    for row in export.rows:
        w.writerow([
            export.session_date,
            export.session_time,
            export.session_distance,
            *row.cells(),
        ])
    return buf.getvalue()
