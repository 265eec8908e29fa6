"""Radius search over geographic points: linear geodesic scan and KD-tree search."""

from typing import Iterator, Sequence

from app.core.geo import GeoPoint, haversine_distance_m, project, projected_radius
from app.core.kdtree import KDNode, TraceStep, build_kdtree, range_search, range_search_trace


def linear_range_query(
    points: Sequence[GeoPoint], center: GeoPoint, radius_m: float
) -> list[int]:
    """
    Indices of points within radius_m meters (great-circle, inclusive) of center.

    Visits every point; no index. Points and center are (lon, lat) pairs.
    """
    center_lon, center_lat = center
    found = []
    for i, (lon, lat) in enumerate(points):
        if haversine_distance_m(center_lat, center_lon, lat, lon) <= radius_m:
            found.append(i)
    return found


def project_points(points: Sequence[GeoPoint]) -> list[tuple[float, float]]:
    """Project (lon, lat) points to planar meters, preserving order."""
    return [project(lon, lat) for lon, lat in points]


def build_geo_index(points: Sequence[GeoPoint]) -> KDNode | None:
    """Build a KD-tree over projected points; node.index refers back into points."""
    return build_kdtree(project_points(points))


def planar_query(center: GeoPoint, radius_m: float) -> tuple[tuple[float, float], float]:
    """Projected center and cos(lat)-corrected planar radius for a ground radius query."""
    center_lon, center_lat = center
    return project(center_lon, center_lat), projected_radius(radius_m, center_lat)


def tree_range_search(
    root: KDNode | None, center: GeoPoint, radius_m: float
) -> list[KDNode]:
    """Search a tree built by build_geo_index with the projected center and corrected radius."""
    target, radius = planar_query(center, radius_m)
    return range_search(root, target, radius)


def tree_range_trace(
    root: KDNode | None, center: GeoPoint, radius_m: float
) -> Iterator[TraceStep]:
    """Visit-by-visit trace of tree_range_search."""
    target, radius = planar_query(center, radius_m)
    return range_search_trace(root, target, radius)


def indexed_range_query(
    points: Sequence[GeoPoint], center: GeoPoint, radius_m: float
) -> list[int]:
    """
    Indices of points within radius_m of center, found through a freshly built KD-tree.

    Agrees with linear_range_query up to the projection's approximation near
    the boundary. Returned indices are sorted.
    """
    root = build_geo_index(points)
    return sorted(node.index for node in tree_range_search(root, center, radius_m))
