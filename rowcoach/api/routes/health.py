"""
Health check endpoints.

We provide two endpoints:
- /health: Basic liveness check (is the process running?)
- /health/ready: Readiness check (can we serve traffic?)

The distinction matters in orchestration systems where liveness and
readiness have different behaviors.
"""

import logging
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from ... import __version__
from ..dependencies import BenchmarkProviderDep, SettingsDep, TimingEngineDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok", "disabled" or "error"
    error: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(engine: TimingEngineDep) -> HealthResponse:
    """
    Liveness check - is the process alive?

    Fast and dependency-free. Reports the session state so a glance at
    the endpoint shows whether a piece is in progress.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        details={
            "session": engine.session.state.value,
            "boats": len(engine.boats),
        }
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic. Checks configuration and benchmarks.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(
    response: Response,
    settings: SettingsDep,
    provider: BenchmarkProviderDep,
) -> ReadinessResponse:
    """
    Readiness check - can we serve traffic?

    Timing needs valid configuration and a benchmark provider. The AI
    summary is optional, so a missing Anthropic key is reported as
    disabled without failing readiness.
    """
    checks: list[ReadinessCheck] = []
    all_ok = True

    # Check configuration
    missing_fields = [
        f for f in settings.validate_required_fields()
        if f != "ANTHROPIC_API_KEY"
    ]
    if missing_fields:
        checks.append(ReadinessCheck(
            name="configuration",
            status="error",
            error=f"Invalid fields: {', '.join(missing_fields)}"
        ))
        all_ok = False
    else:
        checks.append(ReadinessCheck(name="configuration", status="ok"))

    # Check benchmark provider
    try:
        await provider.get_boat_classes()
        checks.append(ReadinessCheck(name="benchmarks", status="ok"))
    except Exception as e:
        logger.error("Benchmark health check failed", extra={"error": str(e)})
        checks.append(ReadinessCheck(name="benchmarks", status="error", error=str(e)))
        all_ok = False

    # Check Anthropic API key is set
    if settings.analysis_enabled:
        checks.append(ReadinessCheck(name="anthropic", status="ok"))
    else:
        checks.append(ReadinessCheck(
            name="anthropic",
            status="disabled",
            error="API key not configured"
        ))

    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Readiness check failed",
            extra={
                "checks": [
                    {"name": c.name, "status": c.status, "error": c.error}
                    for c in checks
                ]
            }
        )

    return ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
    )
