"""Benchmark endpoint: KD-tree vs linear search over real POIs from Overpass."""

import logging

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import UpstreamServiceError, to_http_exception
from app.core.geo import GeoPoint
from app.schemas.benchmark import (
    BenchmarkRequest,
    BenchmarkResponse,
    BenchmarkStats,
    TimingStatsOut,
)
from app.services import overpass_client
from app.services.benchmark import compare_once, run_benchmark

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/benchmark", tags=["benchmark"])


def _measure(points, center, radius_m, iterations):
    """One precise comparison followed by the multi-run benchmark."""
    result = compare_once(points, center, radius_m)
    report = run_benchmark(
        points,
        center,
        radius_m,
        iterations=iterations,
        warmup=settings.benchmark_warmup,
    )
    return result, report


@router.post("", response_model=BenchmarkResponse)
async def benchmark(request: BenchmarkRequest) -> BenchmarkResponse:
    """
    Fetch POIs around the center, then time KD-tree build/search and the linear scan.

    The top-level timings are one precise measurement; `stats` summarizes
    `iterations` further runs after warm-up.
    Upstream failures surface as 502/504, never as an empty benchmark.
    """
    try:
        pois = await overpass_client.fetch_pois(
            request.center_lat,
            request.center_lon,
            request.fetch_radius_m,
            amenity=request.amenity,
        )
    except UpstreamServiceError as e:
        logger.error(f"Benchmark aborted, POI fetch failed: {e}")
        raise to_http_exception(e) from e

    points = [GeoPoint(p.lon, p.lat) for p in pois]
    center = GeoPoint(request.center_lon, request.center_lat)

    # CPU-bound; keep it off the event loop
    result, report = await run_in_threadpool(
        _measure, points, center, request.radius_m, request.iterations
    )

    kd_inside = {pois[i].id for i in result.kd_indices}
    lin_inside = {pois[i].id for i in result.lin_indices}

    return BenchmarkResponse(
        count=result.count,
        build_ms=result.build_ms,
        kd_ms=result.kd_ms,
        lin_ms=result.lin_ms,
        inside=[pois[i].id for i in result.lin_indices],
        outside=[p.id for p in pois if p.id not in lin_inside],
        kd_inside_count=len(kd_inside),
        lin_inside_count=len(lin_inside),
        kd_visited=result.kd_visited,
        lin_visited=result.lin_visited,
        stats=BenchmarkStats(
            build=TimingStatsOut(**report.build._asdict()),
            kd_search=TimingStatsOut(**report.kd_search._asdict()),
            linear=TimingStatsOut(**report.linear._asdict()),
        ),
    )
