"""
Performance analysis prompts and the analyst service.

This module turns a boat's finished time into a short coaching summary
comparing it with the world best time. It's framework-agnostic and
doesn't know about HTTP or which model answers.

The prompts are here, not in config, because they're core business logic.
Changing them changes what the product says to coaches.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from ..timing.export import BenchmarkProvider, percent_vs_benchmark
from ..timing.formatting import format_total_time

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class TextModelClient(Protocol):
    """
    Interface for text-generation clients.

    The analyst doesn't know or care whether Claude or a test stub
    writes the summary.
    """

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the model's text answer."""
        ...


class BenchmarkUnavailableError(Exception):
    """Raised when a summary is requested for a class with no benchmark."""
    pass


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = """You are an experienced rowing coach providing insights on team performance.

Be concise and concrete. Coaches read this on the bank between pieces."""


ANALYSIS_USER_PROMPT_TEMPLATE = """Analyze the team's performance compared to the world record time for the specified boat class.

Boat Class: {boat_class}
Team's Total Time (seconds): {total_time_seconds:.2f} ({total_time_display})
World Best Time (seconds): {benchmark_seconds:.2f} ({benchmark_display})

Calculate the percentage difference between the team's time and the world record time.
Provide a concise summary of the team's performance, including the percentage difference from the world record."""


# ---------------------------------------------------------------------------
# Analyst Service
# ---------------------------------------------------------------------------

@dataclass
class PerformanceSummary:
    """A boat's time against its benchmark, with the coach's commentary."""
    boat_class: str
    total_time_seconds: float
    benchmark_seconds: float
    percent_vs_benchmark: float
    summary: str


class PerformanceAnalyst:
    """
    Writes natural-language performance summaries.

    Stateless apart from its collaborators; one instance can serve
    any number of requests.
    """

    def __init__(
        self,
        text_client: TextModelClient,
        benchmark_provider: BenchmarkProvider,
    ) -> None:
        self._text_client = text_client
        self._benchmarks = benchmark_provider

    async def analyze(self, boat_class: str, total_time_seconds: float) -> PerformanceSummary:
        if total_time_seconds <= 0:
            raise ValueError("Total time must be positive to analyze performance")

        benchmark = await self._benchmarks.get_benchmark_time(boat_class)
        if benchmark is None or not benchmark.is_available:
            raise BenchmarkUnavailableError(f"No world best time for boat class {boat_class}")

        user_prompt = ANALYSIS_USER_PROMPT_TEMPLATE.format(
            boat_class=boat_class,
            total_time_seconds=total_time_seconds,
            total_time_display=format_total_time(total_time_seconds),
            benchmark_seconds=benchmark.time_in_seconds,
            benchmark_display=format_total_time(benchmark.time_in_seconds),
        )

        summary = await self._text_client.complete(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=user_prompt,
        )

        logger.info(
            "Performance summary generated",
            extra={"boat_class": boat_class, "summary_length": len(summary)}
        )

        return PerformanceSummary(
            boat_class=boat_class,
            total_time_seconds=total_time_seconds,
            benchmark_seconds=benchmark.time_in_seconds,
            percent_vs_benchmark=percent_vs_benchmark(total_time_seconds, benchmark.time_in_seconds),
            summary=summary.strip(),
        )
