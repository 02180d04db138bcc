"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Routes never build their own collaborators, so tests
can swap any of them through app.dependency_overrides.

There is exactly one timing session per process. The engine lives in a
module-level global, created on first use and shared by every request.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status

from ..config.settings import Settings, get_settings
from ..core.analysis.coach import PerformanceAnalyst
from ..core.timing.engine import TimingEngine
from ..core.timing.export import BenchmarkProvider
from ..core.timing.models import SessionConfig
from ..infrastructure.anthropic.client import AnthropicConfig, AnthropicTextClient
from ..infrastructure.benchmarks.provider import create_benchmark_provider

logger = logging.getLogger(__name__)

# Process-wide session, shared across requests
_timing_engine: Optional[TimingEngine] = None


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

def get_timing_engine(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TimingEngine:
    """
    Provide the shared TimingEngine.

    Created lazily from the configured defaults so the first request
    sees the same session as every later one.
    """
    global _timing_engine

    if _timing_engine is None:
        config = SessionConfig(
            number_of_boats=settings.default_number_of_boats,
            session_distance=settings.default_session_distance,
            split_distance=settings.default_split_distance,
        )
        _timing_engine = TimingEngine(
            config=config,
            default_boat_class=settings.default_boat_class,
        )
        logger.info("Created shared timing engine")

    return _timing_engine


def reset_timing_engine() -> None:
    """Drop the shared engine; the next request creates a fresh session."""
    global _timing_engine
    _timing_engine = None


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_benchmark_provider(
    settings: Annotated[Settings, Depends(get_settings)],
) -> BenchmarkProvider:
    return create_benchmark_provider(
        benchmark_times=settings.benchmark_times_map,
        default_seconds=settings.benchmark_default_seconds,
    )


def get_performance_analyst(
    settings: Annotated[Settings, Depends(get_settings)],
    provider: Annotated[BenchmarkProvider, Depends(get_benchmark_provider)],
) -> PerformanceAnalyst:
    """
    Provide PerformanceAnalyst with an Anthropic client.

    Raises 503 when no API key is configured: timing works without the
    model, summaries do not.
    """
    if not settings.analysis_enabled:
        logger.warning("Performance analysis requested without ANTHROPIC_API_KEY")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Performance analysis is not configured",
        )

    config = AnthropicConfig(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.anthropic_max_tokens,
        temperature=settings.anthropic_temperature,
    )

    analyst = PerformanceAnalyst(
        text_client=AnthropicTextClient(config),
        benchmark_provider=provider,
    )

    logger.debug("Created PerformanceAnalyst instance")

    return analyst


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

TimingEngineDep = Annotated[TimingEngine, Depends(get_timing_engine)]
BenchmarkProviderDep = Annotated[BenchmarkProvider, Depends(get_benchmark_provider)]
PerformanceAnalystDep = Annotated[PerformanceAnalyst, Depends(get_performance_analyst)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
