"""Benchmark harness: KD-tree build/search vs linear geodesic scan."""

import logging
import math
import random
import time
from typing import NamedTuple, Optional, Sequence

from app.core.geo import GeoPoint, offset_point
from app.core.kdtree import build_kdtree, count_visited, range_search
from app.services.search import linear_range_query, planar_query, project_points

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000


class TimingStats(NamedTuple):
    """Mean and population standard deviation in milliseconds."""
    mean_ms: float
    std_ms: float
    n: int


class BenchmarkReport(NamedTuple):
    point_count: int
    iterations: int
    warmup: int
    build: TimingStats
    kd_search: TimingStats
    linear: TimingStats
    build_samples_ms: list[float]
    kd_samples_ms: list[float]
    linear_samples_ms: list[float]
    kd_match_count: int
    linear_match_count: int


class Comparison(NamedTuple):
    """A single timed run of both strategies over the same points."""
    count: int
    build_ms: float
    kd_ms: float
    lin_ms: float
    kd_indices: list[int]
    lin_indices: list[int]
    kd_visited: int
    lin_visited: int


def summarize(samples_ns: Sequence[int]) -> TimingStats:
    """Mean and population std (divide by n) of nanosecond samples, in ms."""
    n = len(samples_ns)
    if n == 0:
        return TimingStats(0.0, 0.0, 0)
    values = [s / NS_PER_MS for s in samples_ns]
    mean = sum(values) / n
    variance = sum((v - mean) ** 2 for v in values) / n
    return TimingStats(mean, math.sqrt(variance), n)


def random_points_in_disk(
    center: GeoPoint,
    radius_m: float,
    count: int,
    rng: Optional[random.Random] = None,
) -> list[GeoPoint]:
    """
    Uniformly distributed points in a disk of radius_m meters around center.

    Distance is sqrt-uniform so density is even over the area; degree offsets
    use the flat-earth 111320 m/degree approximation.
    """
    rng = rng or random.Random()
    center = GeoPoint(*center)
    points = []
    for _ in range(count):
        r = math.sqrt(rng.random()) * radius_m
        theta = rng.random() * 2 * math.pi
        points.append(offset_point(center, r * math.cos(theta), r * math.sin(theta)))
    return points


def run_benchmark(
    points: Sequence[GeoPoint],
    center: GeoPoint,
    radius_m: float,
    iterations: int = 5,
    warmup: int = 2,
) -> BenchmarkReport:
    """
    Time KD-tree build, KD-tree search and linear scan over the same points.

    Each iteration builds a fresh tree. Build, search and scan are timed as
    separate intervals. The first `warmup` runs are discarded.
    """
    if iterations < 1:
        raise ValueError("iterations must be >= 1")
    if warmup < 0:
        raise ValueError("warmup must be >= 0")

    center = GeoPoint(*center)
    projected = project_points(points)
    center_xy, r_proj = planar_query(center, radius_m)

    logger.info(
        f"Benchmark: n={len(points)}, iterations={iterations}, warmup={warmup}, "
        f"center={center.lat},{center.lon}, radius={radius_m}m"
    )

    for _ in range(warmup):
        root = build_kdtree(projected)
        range_search(root, center_xy, r_proj)
        linear_range_query(points, center, radius_m)

    build_ns: list[int] = []
    kd_ns: list[int] = []
    lin_ns: list[int] = []
    kd_matches: list = []
    lin_matches: list[int] = []

    for _ in range(iterations):
        t0 = time.perf_counter_ns()
        root = build_kdtree(projected)
        t1 = time.perf_counter_ns()
        build_ns.append(t1 - t0)

        t2 = time.perf_counter_ns()
        kd_matches = range_search(root, center_xy, r_proj)
        t3 = time.perf_counter_ns()
        kd_ns.append(t3 - t2)

        t4 = time.perf_counter_ns()
        lin_matches = linear_range_query(points, center, radius_m)
        t5 = time.perf_counter_ns()
        lin_ns.append(t5 - t4)

    report = BenchmarkReport(
        point_count=len(points),
        iterations=iterations,
        warmup=warmup,
        build=summarize(build_ns),
        kd_search=summarize(kd_ns),
        linear=summarize(lin_ns),
        build_samples_ms=[s / NS_PER_MS for s in build_ns],
        kd_samples_ms=[s / NS_PER_MS for s in kd_ns],
        linear_samples_ms=[s / NS_PER_MS for s in lin_ns],
        kd_match_count=len(kd_matches),
        linear_match_count=len(lin_matches),
    )
    logger.info(
        f"Benchmark done: build={report.build.mean_ms:.4f}ms, "
        f"kd={report.kd_search.mean_ms:.4f}ms, linear={report.linear.mean_ms:.4f}ms"
    )
    return report


def compare_once(
    points: Sequence[GeoPoint], center: GeoPoint, radius_m: float
) -> Comparison:
    """Single measurement of build, KD search and linear scan, with match indices and visit counts."""
    center = GeoPoint(*center)
    projected = project_points(points)

    t0 = time.perf_counter_ns()
    root = build_kdtree(projected)
    t1 = time.perf_counter_ns()

    center_xy, r_proj = planar_query(center, radius_m)

    t2 = time.perf_counter_ns()
    kd_nodes = range_search(root, center_xy, r_proj)
    t3 = time.perf_counter_ns()

    # Counted outside the timed interval
    kd_visited = count_visited(root, center_xy, r_proj)

    t4 = time.perf_counter_ns()
    lin_indices = linear_range_query(points, center, radius_m)
    t5 = time.perf_counter_ns()

    return Comparison(
        count=len(points),
        build_ms=(t1 - t0) / NS_PER_MS,
        kd_ms=(t3 - t2) / NS_PER_MS,
        lin_ms=(t5 - t4) / NS_PER_MS,
        kd_indices=sorted(node.index for node in kd_nodes),
        lin_indices=lin_indices,
        kd_visited=kd_visited,
        lin_visited=len(points),
    )
