"""Radius search endpoints: KD-tree search, linear comparison and search trace."""

import logging

from fastapi import APIRouter

from app.core.geo import GeoPoint, haversine_distance_m
from app.schemas.search import (
    MatchOut,
    RadiusSearchRequest,
    RadiusSearchResponse,
    SearchTimings,
    TraceResponse,
    TraceStepOut,
)
from app.services.benchmark import compare_once
from app.services.search import build_geo_index, tree_range_trace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


def _geo_points(request: RadiusSearchRequest) -> tuple[list[GeoPoint], GeoPoint]:
    points = [GeoPoint(p.lon, p.lat) for p in request.points]
    center = GeoPoint(request.center.lon, request.center.lat)
    return points, center


@router.post("/radius", response_model=RadiusSearchResponse)
def radius_search(request: RadiusSearchRequest) -> RadiusSearchResponse:
    """
    Find the points within radius_m of center.

    Runs the KD-tree search and the linear geodesic scan over the same points;
    `matches` are the KD-tree results mapped back to the request's records.
    """
    points, center = _geo_points(request)
    result = compare_once(points, center, request.radius_m)

    matches = []
    for i in result.kd_indices:
        p = request.points[i]
        matches.append(MatchOut(
            index=i,
            id=p.id,
            lat=p.lat,
            lon=p.lon,
            tags=p.tags,
            distance_m=haversine_distance_m(center.lat, center.lon, p.lat, p.lon),
        ))

    if result.kd_indices != result.lin_indices:
        logger.info(
            f"KD/linear mismatch near boundary: kd={len(result.kd_indices)}, "
            f"linear={len(result.lin_indices)}, radius={request.radius_m}m"
        )

    return RadiusSearchResponse(
        count=result.count,
        matches=matches,
        kd_matches=result.kd_indices,
        lin_matches=result.lin_indices,
        kd_visited=result.kd_visited,
        lin_visited=result.lin_visited,
        timings=SearchTimings(
            build_ms=result.build_ms,
            kd_ms=result.kd_ms,
            lin_ms=result.lin_ms,
        ),
    )


@router.post("/trace", response_model=TraceResponse)
def search_trace(request: RadiusSearchRequest) -> TraceResponse:
    """Step-by-step KD-tree walk for visualization: every visited node in visit order."""
    points, center = _geo_points(request)
    root = build_geo_index(points)

    steps = []
    for step in tree_range_trace(root, center, request.radius_m):
        p = request.points[step.index]
        steps.append(TraceStepOut(
            visit_id=step.visit_id,
            index=step.index,
            id=p.id,
            lat=p.lat,
            lon=p.lon,
            tags=p.tags,
            axis=step.axis,
            depth=step.depth,
            diff=step.diff,
            within=step.within,
            branched=step.branched,
        ))

    pruned_pct = 0.0
    if points:
        pruned_pct = max(0.0, 100.0 - len(steps) / len(points) * 100.0)

    return TraceResponse(
        steps=steps,
        visited=len(steps),
        match_count=sum(1 for s in steps if s.within),
        pruned_pct=pruned_pct,
    )
