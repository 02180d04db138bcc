"""
Rowing performance analysis.

Contains the analyst service that compares a boat's time with its
world best time and asks a text model for a coaching summary.
"""

from .coach import (
    BenchmarkUnavailableError,
    PerformanceAnalyst,
    PerformanceSummary,
    TextModelClient,
)

__all__ = [
    "BenchmarkUnavailableError",
    "PerformanceAnalyst",
    "PerformanceSummary",
    "TextModelClient",
]
