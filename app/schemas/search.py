"""Schemas for radius search and trace endpoints."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field

# Poles are outside the projection's domain
LAT_FIELD = dict(gt=-90.0, lt=90.0, description="Latitude (-90 to 90, exclusive)")
LON_FIELD = dict(ge=-180.0, le=180.0, description="Longitude (-180 to 180)")


class PointIn(BaseModel):
    """Caller-supplied point with optional opaque id and free-form metadata."""
    lat: float = Field(..., **LAT_FIELD)
    lon: float = Field(..., **LON_FIELD)
    id: Optional[Union[int, str]] = None
    tags: dict[str, Any] = {}


class CenterIn(BaseModel):
    lat: float = Field(..., **LAT_FIELD)
    lon: float = Field(..., **LON_FIELD)


class RadiusSearchRequest(BaseModel):
    points: list[PointIn]
    center: CenterIn
    radius_m: float = Field(..., ge=0, description="Search radius in meters")


class MatchOut(BaseModel):
    """A matched point, mapped back to the caller's record."""
    index: int
    id: Optional[Union[int, str]] = None
    lat: float
    lon: float
    tags: dict[str, Any] = {}
    distance_m: float


class SearchTimings(BaseModel):
    build_ms: float
    kd_ms: float
    lin_ms: float


class RadiusSearchResponse(BaseModel):
    """
    KD-tree matches plus the linear scan's indices for comparison.

    kd_matches / lin_matches are sorted indices into the request's points.
    """
    count: int
    matches: list[MatchOut]
    kd_matches: list[int]
    lin_matches: list[int]
    kd_visited: int
    lin_visited: int
    timings: SearchTimings


class TraceStepOut(BaseModel):
    visit_id: int
    index: int
    id: Optional[Union[int, str]] = None
    lat: float
    lon: float
    tags: dict[str, Any] = {}
    axis: int
    depth: int
    diff: float
    within: bool
    branched: bool


class TraceResponse(BaseModel):
    steps: list[TraceStepOut]
    visited: int
    match_count: int
    # Share of points never visited thanks to pruning
    pruned_pct: float
