"""Schemas for the benchmark endpoint."""

from typing import Optional

from pydantic import BaseModel, Field

from app.core.config import settings


class BenchmarkRequest(BaseModel):
    center_lat: float = Field(settings.benchmark_center_lat, gt=-90.0, lt=90.0)
    center_lon: float = Field(settings.benchmark_center_lon, ge=-180.0, le=180.0)
    radius_m: float = Field(settings.benchmark_radius_m, ge=0)
    fetch_radius_m: float = Field(settings.benchmark_fetch_radius_m, gt=0, le=50000)
    iterations: int = Field(settings.benchmark_iterations, ge=1, le=100)
    amenity: str = "restaurant"


class TimingStatsOut(BaseModel):
    """Mean / population std in milliseconds over n recorded iterations."""
    mean_ms: float
    std_ms: float
    n: int


class BenchmarkStats(BaseModel):
    build: TimingStatsOut
    kd_search: TimingStatsOut
    linear: TimingStatsOut


class BenchmarkResponse(BaseModel):
    """Single precise measurement over fetched POIs; inside/outside are POI ids."""
    count: int
    build_ms: float
    kd_ms: float
    lin_ms: float
    inside: list[int]
    outside: list[int]
    kd_inside_count: int
    lin_inside_count: int
    kd_visited: int
    lin_visited: int
    stats: Optional[BenchmarkStats] = None
