"""
World best time lookup.

There is no public feed for world best times that we depend on, so the
provider here serves a static table. It implements the async
BenchmarkProvider protocol anyway, which lets a networked provider
replace it without touching the export or the analyst.
"""

import logging
from typing import Optional

from rowcoach.core.timing.models import BenchmarkTime, BoatClass

logger = logging.getLogger(__name__)


BOAT_CLASS_CATALOGUE: dict[str, list[str]] = {
    "Male": ["M1X", "M2X", "M4+", "M4-", "M8+"],
    "Female": ["W1X", "W2X", "W4+", "W4-", "W8+"],
}

DEFAULT_BENCHMARK_SECONDS = 360.0


def normalize_boat_class(boat_class: str) -> str:
    """Boat classes are compared case-insensitively ("M1x" == "M1X")."""
    return boat_class.strip().upper()


def parse_benchmark_times(raw: str) -> dict[str, float]:
    """
    Parse "M1X=390.74,W1X=427.71" into a lookup table.

    Raises ValueError on malformed entries so a bad setting fails at
    startup rather than silently dropping a class.
    """
    times: dict[str, float] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ValueError(f"Invalid benchmark entry {entry!r}, expected CLASS=SECONDS")
        boat_class, seconds = entry.split("=", 1)
        times[normalize_boat_class(boat_class)] = float(seconds)
    return times


class StaticBenchmarkProvider:
    """
    Benchmark provider backed by an in-memory table.

    Classes missing from the table get default_seconds. Setting the
    default to 0 makes unknown classes report no benchmark.
    """

    def __init__(
        self,
        times: Optional[dict[str, float]] = None,
        default_seconds: float = DEFAULT_BENCHMARK_SECONDS,
    ) -> None:
        self._times = {
            normalize_boat_class(name): seconds
            for name, seconds in (times or {}).items()
        }
        self._default_seconds = default_seconds

        logger.debug(
            "Initialized static benchmark provider",
            extra={"classes": len(self._times), "default_seconds": default_seconds}
        )

    async def get_benchmark_time(self, boat_class: str) -> BenchmarkTime:
        seconds = self._times.get(normalize_boat_class(boat_class), self._default_seconds)
        return BenchmarkTime(boat_class=boat_class, time_in_seconds=seconds)

    async def get_boat_classes(self) -> list[BoatClass]:
        return [
            BoatClass(name=name, category=category)
            for category, names in BOAT_CLASS_CATALOGUE.items()
            for name in names
        ]


def create_benchmark_provider(
    benchmark_times: Optional[dict[str, float]] = None,
    default_seconds: float = DEFAULT_BENCHMARK_SECONDS,
) -> StaticBenchmarkProvider:
    return StaticBenchmarkProvider(times=benchmark_times, default_seconds=default_seconds)
