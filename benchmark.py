"""
Benchmark KD-tree range search against the linear geodesic scan on synthetic points.
Run with: python benchmark.py [N] [iterations] [lat] [lon] [radius_m]
"""
import argparse
import logging
import random

from app.core.config import settings
from app.core.geo import GeoPoint
from app.services.benchmark import random_points_in_disk, run_benchmark


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("n", nargs="?", type=int, default=settings.benchmark_point_count)
    parser.add_argument("iterations", nargs="?", type=int, default=settings.benchmark_iterations)
    parser.add_argument("lat", nargs="?", type=float, default=settings.benchmark_center_lat)
    parser.add_argument("lon", nargs="?", type=float, default=settings.benchmark_center_lon)
    parser.add_argument("radius_m", nargs="?", type=float, default=settings.benchmark_radius_m)
    parser.add_argument("--warmup", type=int, default=settings.benchmark_warmup)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible point sets")
    return parser.parse_args(argv)


def main(argv=None):
    """Main function to run the benchmark."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    print(
        f"Benchmark: N={args.n}, iterations={args.iterations}, "
        f"center={args.lat},{args.lon}, radius={args.radius_m}m"
    )

    center = GeoPoint(args.lon, args.lat)
    # Points spread over 3x the query radius so the query selects a fraction of them
    points = random_points_in_disk(center, args.radius_m * 3, args.n, random.Random(args.seed))

    report = run_benchmark(points, center, args.radius_m, iterations=args.iterations, warmup=args.warmup)

    print("\nResults (mean ± stddev) in ms:")
    print(f"KD build:  {report.build.mean_ms:.4f} ms ± {report.build.std_ms:.4f} ms  (n={report.build.n})")
    print(f"KD search: {report.kd_search.mean_ms:.4f} ms ± {report.kd_search.std_ms:.4f} ms  (n={report.kd_search.n})")
    print(f"Linear:    {report.linear.mean_ms:.4f} ms ± {report.linear.std_ms:.4f} ms  (n={report.linear.n})")
    print(f"\nMatches: kd={report.kd_match_count}, linear={report.linear_match_count}")
    print("\nRaw samples (ms):")
    print("build:", ", ".join(f"{x:.4f}" for x in report.build_samples_ms))
    print("kd:", ", ".join(f"{x:.4f}" for x in report.kd_samples_ms))
    print("lin:", ", ".join(f"{x:.4f}" for x in report.linear_samples_ms))


if __name__ == "__main__":
    main()
