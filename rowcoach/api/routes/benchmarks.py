"""
Benchmark lookup endpoints.

Lists the boat classes a coach can pick from and exposes the world
best time used for each in the export.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ..dependencies import BenchmarkProviderDep

logger = logging.getLogger(__name__)

router = APIRouter()


class BoatClassItem(BaseModel):
    name: str = Field(description="Boat class, e.g. M1X")
    category: str = Field(description="Male or Female")


class BenchmarkResponse(BaseModel):
    boat_class: str
    time_in_seconds: float
    available: bool = Field(description="False when no usable benchmark exists")


@router.get(
    "/classes",
    response_model=list[BoatClassItem],
    status_code=status.HTTP_200_OK,
    summary="List boat classes",
)
async def list_boat_classes(provider: BenchmarkProviderDep) -> list[BoatClassItem]:
    classes = await provider.get_boat_classes()
    return [BoatClassItem(name=c.name, category=c.category) for c in classes]


@router.get(
    "/{boat_class}",
    response_model=BenchmarkResponse,
    status_code=status.HTTP_200_OK,
    summary="Get world best time",
)
async def get_benchmark(boat_class: str, provider: BenchmarkProviderDep) -> BenchmarkResponse:
    benchmark = await provider.get_benchmark_time(boat_class)
    return BenchmarkResponse(
        boat_class=benchmark.boat_class,
        time_in_seconds=benchmark.time_in_seconds,
        available=benchmark.is_available,
    )
