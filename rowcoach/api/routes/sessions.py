"""
Timing session API endpoints.

Drives the single in-process session:
1. Configure boats and distances (PUT /config)
2. Label boats (PATCH /boats/{boat_id})
3. Start the stopwatch (POST /start)
4. Record splits as boats pass markers (POST /boats/{boat_id}/splits)
5. Stop and export (POST /stop, GET /export.csv)

Every handler calls the engine synchronously, so commands from the
coach are applied one at a time in arrival order.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
from starlette.responses import Response

from ...core.timing.engine import TimingEngine
from ...core.timing.export import EXPORT_FILENAME, build_export, render_csv
from ...core.timing.formatting import format_total_time
from ...core.timing.models import Boat, Split, TimingError
from ..dependencies import BenchmarkProviderDep, TimingEngineDep
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ConfigRequest(BaseModel):
    """New session configuration."""
    number_of_boats: int = Field(ge=1, description="Number of boats to time")
    session_distance: int = Field(ge=100, description="Total race distance in meters")
    split_distance: int = Field(ge=50, description="Distance between splits in meters")


class ConfigResponse(BaseModel):
    number_of_boats: int
    session_distance: int
    split_distance: int
    max_splits: int = Field(description="Splits that fit into the session distance")


class BoatUpdateRequest(BaseModel):
    """Boat label changes. Omitted fields are left as they are."""
    boat_class: Optional[str] = Field(None, description="Boat class, e.g. M1X")
    boat_name: Optional[str] = Field(None, max_length=200, description="Free-text boat name")


class SplitRequest(BaseModel):
    """Split request. Leave elapsed_seconds empty to use the session clock."""
    elapsed_seconds: Optional[float] = Field(
        None,
        gt=0,
        description="Elapsed seconds since start, for splits taken from another stopwatch"
    )


class SplitItem(BaseModel):
    """Single recorded split."""
    index: int = Field(description="1-based split number")
    distance: int = Field(description="Distance covered at this split in meters")
    cumulative_time_seconds: float
    cumulative_time: str = Field(description="Cumulative time as MM:SS.cc")
    interval_time_seconds: float
    pace: str = Field(description="Interval pace per 500m as M:SS.ss")
    interval_diff: str


class BoatItem(BaseModel):
    """A boat with its split history."""
    id: int
    boat_class: str
    boat_name: str
    is_running: bool
    can_split: bool = Field(description="Whether a split would be accepted now")
    splits: list[SplitItem]


class SessionStateResponse(BaseModel):
    """Complete session snapshot for display."""
    state: str = Field(description="idle or running")
    started_at: Optional[str] = Field(None, description="When the session started (ISO format)")
    elapsed_seconds: float
    elapsed: str = Field(description="Elapsed time as MM:SS.cc")
    config: ConfigResponse
    boats: list[BoatItem]


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------

def _split_item(split: Split) -> SplitItem:
    return SplitItem(
        index=split.index,
        distance=split.distance,
        cumulative_time_seconds=split.cumulative_time_seconds,
        cumulative_time=format_total_time(split.cumulative_time_seconds),
        interval_time_seconds=split.interval_time_seconds,
        pace=split.pace,
        interval_diff=split.interval_diff,
    )


def _boat_item(engine: TimingEngine, boat: Boat) -> BoatItem:
    return BoatItem(
        id=boat.id,
        boat_class=boat.boat_class,
        boat_name=boat.boat_name,
        is_running=boat.is_running,
        can_split=engine.can_record_split(boat.id),
        splits=[_split_item(s) for s in boat.splits],
    )


def _config_response(engine: TimingEngine) -> ConfigResponse:
    config = engine.config
    return ConfigResponse(
        number_of_boats=config.number_of_boats,
        session_distance=config.session_distance,
        split_distance=config.split_distance,
        max_splits=config.max_splits,
    )


def _state_response(engine: TimingEngine) -> SessionStateResponse:
    session = engine.session
    elapsed = engine.elapsed_seconds
    return SessionStateResponse(
        state=session.state.value,
        started_at=session.started_at.isoformat() if session.started_at else None,
        elapsed_seconds=elapsed,
        elapsed=format_total_time(elapsed),
        config=_config_response(engine),
        boats=[_boat_item(engine, boat) for boat in session.boats],
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=SessionStateResponse,
    status_code=status.HTTP_200_OK,
    summary="Get session state",
    description="Session clock, configuration and every boat's splits. Poll this to refresh the display.",
)
async def get_session_state(engine: TimingEngineDep) -> SessionStateResponse:
    return _state_response(engine)


@router.put(
    "/config",
    response_model=ConfigResponse,
    status_code=status.HTTP_200_OK,
    summary="Configure session",
    description="Set boat count and distances. Changing the boat count recreates all boats.",
)
async def configure_session(request: ConfigRequest, engine: TimingEngineDep) -> ConfigResponse:
    try:
        engine.configure(
            number_of_boats=request.number_of_boats,
            session_distance=request.session_distance,
            split_distance=request.split_distance,
        )
    except TimingError as e:
        logger.warning("Configuration rejected", extra={"error": str(e)})
        raise to_http_exception(e)

    return _config_response(engine)


@router.post(
    "/start",
    response_model=SessionStateResponse,
    status_code=status.HTTP_200_OK,
    summary="Start session",
    description="Start the stopwatch for every boat. Starting a running session does nothing.",
)
async def start_session(engine: TimingEngineDep) -> SessionStateResponse:
    engine.start_session()
    return _state_response(engine)


@router.post(
    "/stop",
    response_model=SessionStateResponse,
    status_code=status.HTTP_200_OK,
    summary="Stop session",
    description="Stop the stopwatch. Splits are kept for export.",
)
async def stop_session(engine: TimingEngineDep) -> SessionStateResponse:
    engine.stop_session()
    return _state_response(engine)


@router.patch(
    "/boats/{boat_id}",
    response_model=BoatItem,
    status_code=status.HTTP_200_OK,
    summary="Update boat",
    description="Change a boat's class (idle only) or name",
)
async def update_boat(
    boat_id: int,
    request: BoatUpdateRequest,
    engine: TimingEngineDep,
) -> BoatItem:
    try:
        if request.boat_class is not None:
            engine.set_boat_class(boat_id, request.boat_class)
        if request.boat_name is not None:
            engine.set_boat_name(boat_id, request.boat_name)
        boat = engine.get_boat(boat_id)
    except TimingError as e:
        logger.warning(
            "Boat update rejected",
            extra={"boat_id": boat_id, "error": str(e)}
        )
        raise to_http_exception(e)

    return _boat_item(engine, boat)


@router.post(
    "/boats/{boat_id}/splits",
    response_model=SplitItem,
    status_code=status.HTTP_201_CREATED,
    summary="Record split",
    description="Record a split for a boat at the current session time",
)
async def record_split(
    boat_id: int,
    engine: TimingEngineDep,
    request: Optional[SplitRequest] = None,
) -> SplitItem:
    elapsed = request.elapsed_seconds if request else None

    try:
        split = engine.record_split(boat_id, elapsed)
    except TimingError as e:
        raise to_http_exception(e)

    return _split_item(split)


@router.get(
    "/export.csv",
    status_code=status.HTTP_200_OK,
    summary="Export CSV",
    description="Session summary with world-best-time comparison, one row per boat",
    responses={
        200: {"content": {"text/csv": {}}},
        409: {"description": "Session not started"},
    },
)
async def export_csv(
    engine: TimingEngineDep,
    provider: BenchmarkProviderDep,
) -> Response:
    try:
        export = await build_export(engine.session, provider)
    except TimingError as e:
        logger.info("Export requested before session start")
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Export failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build export: {str(e)}"
        )

    return Response(
        content=render_csv(export),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
