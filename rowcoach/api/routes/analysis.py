"""
Performance analysis API endpoints.

Asks the AI coach for a short summary of one boat's finished piece
against the world best time for its class. Split recording does not
wait on these calls; they only read the boat's history.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ...core.analysis.coach import BenchmarkUnavailableError
from ...core.timing.formatting import format_total_time
from ...core.timing.models import TimingError
from ..dependencies import PerformanceAnalystDep, TimingEngineDep
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


class PerformanceSummaryResponse(BaseModel):
    """Coach's summary for one boat."""
    boat_id: int = Field(description="Boat identifier")
    boat_class: str = Field(description="Boat class compared")
    total_time: str = Field(description="Boat's total time as MM:SS.cc")
    world_best_time: str = Field(description="Benchmark time as MM:SS.cc")
    percent_vs_benchmark: float = Field(description="100 means matching the world best time")
    summary: str = Field(description="Coaching summary")


@router.post(
    "/boats/{boat_id}",
    response_model=PerformanceSummaryResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze boat performance",
    description="Compare a boat's total time with the world best time and get a coaching summary",
)
async def analyze_boat(
    boat_id: int,
    engine: TimingEngineDep,
    analyst: PerformanceAnalystDep,
) -> PerformanceSummaryResponse:
    try:
        boat = engine.get_boat(boat_id)
    except TimingError as e:
        raise to_http_exception(e)

    if not boat.splits:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Record at least one split before requesting an analysis",
        )

    # Copy the values out before awaiting; the boat may gain splits meanwhile
    boat_class = boat.boat_class
    total = boat.total_time_seconds

    logger.info(
        "Analyzing boat performance",
        extra={"boat_id": boat_id, "boat_class": boat_class, "total_time_seconds": total}
    )

    try:
        result = await analyst.analyze(boat_class, total)
    except BenchmarkUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Performance analysis failed",
            extra={"boat_id": boat_id, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Analysis failed: {str(e)}"
        )

    return PerformanceSummaryResponse(
        boat_id=boat_id,
        boat_class=result.boat_class,
        total_time=format_total_time(result.total_time_seconds),
        world_best_time=format_total_time(result.benchmark_seconds),
        percent_vs_benchmark=result.percent_vs_benchmark,
        summary=result.summary,
    )
