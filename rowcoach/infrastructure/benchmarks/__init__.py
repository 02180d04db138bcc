"""
World best time providers.

Implements the BenchmarkProvider protocol from core.timing.export.
"""

from .provider import (
    BOAT_CLASS_CATALOGUE,
    StaticBenchmarkProvider,
    create_benchmark_provider,
    parse_benchmark_times,
)

__all__ = [
    "BOAT_CLASS_CATALOGUE",
    "StaticBenchmarkProvider",
    "create_benchmark_provider",
    "parse_benchmark_times",
]
