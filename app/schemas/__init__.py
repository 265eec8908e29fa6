from app.schemas.search import (
    PointIn,
    CenterIn,
    RadiusSearchRequest,
    RadiusSearchResponse,
    MatchOut,
    SearchTimings,
    TraceStepOut,
    TraceResponse,
)
from app.schemas.benchmark import BenchmarkRequest, BenchmarkResponse, BenchmarkStats, TimingStatsOut
from app.schemas.places import Poi, GeocodeResult, GeocodeResponse

__all__ = [
    "PointIn",
    "CenterIn",
    "RadiusSearchRequest",
    "RadiusSearchResponse",
    "MatchOut",
    "SearchTimings",
    "TraceStepOut",
    "TraceResponse",
    "BenchmarkRequest",
    "BenchmarkResponse",
    "BenchmarkStats",
    "TimingStatsOut",
    "Poi",
    "GeocodeResult",
    "GeocodeResponse",
]
