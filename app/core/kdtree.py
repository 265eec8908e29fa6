"""KD-tree over planar points: median-split build and radius range search."""

from itertools import count
from typing import Iterator, NamedTuple, Optional, Sequence

Point = tuple[float, ...]


class KDNode(NamedTuple):
    """
    Immutable tree node.

    point: planar coordinates (x, y) in meters
    index: position of the point in the sequence passed to build_kdtree
    axis: split dimension, depth % k
    """
    point: Point
    index: int
    axis: int
    left: Optional["KDNode"] = None
    right: Optional["KDNode"] = None


class TraceStep(NamedTuple):
    """One visited node during a range search, in visit order."""
    visit_id: int
    point: Point
    index: int
    axis: int
    depth: int
    diff: float
    within: bool
    branched: bool


def distance_sq(a: Sequence[float], b: Sequence[float]) -> float:
    """Squared Euclidean distance."""
    s = 0.0
    for i in range(len(a)):
        d = a[i] - b[i]
        s += d * d
    return s


def build_kdtree(points: Sequence[Sequence[float]]) -> Optional[KDNode]:
    """
    Build a KD-tree from a sequence of k-dimensional points.

    Returns None for an empty input. The caller's sequence is not modified.

    Each axis is sorted once up front (ties keep input order), and every level
    splits those orderings around the median instead of re-sorting, so the
    build is O(n log n). The median is the element at len // 2 (lower median
    for even counts); the left subtree gets the elements before it, the right
    subtree the elements after it.
    """
    pts = [tuple(float(c) for c in p) for p in points]
    if not pts:
        return None

    k = len(pts[0])
    if k == 0 or any(len(p) != k for p in pts):
        raise ValueError("points must share the same non-zero dimension")

    orders = [
        sorted(range(len(pts)), key=lambda i, a=axis: pts[i][a])
        for axis in range(k)
    ]
    return _build(pts, orders, 0)


def _build(pts: list[Point], orders: list[list[int]], depth: int) -> Optional[KDNode]:
    k = len(orders)
    axis = depth % k
    by_axis = orders[axis]
    if not by_axis:
        return None

    mid = len(by_axis) // 2
    median = by_axis[mid]
    left_ids = set(by_axis[:mid])

    left_orders = []
    right_orders = []
    for a, order in enumerate(orders):
        if a == axis:
            left_orders.append(order[:mid])
            right_orders.append(order[mid + 1:])
        else:
            left_orders.append([i for i in order if i in left_ids])
            right_orders.append([i for i in order if i != median and i not in left_ids])

    return KDNode(
        point=pts[median],
        index=median,
        axis=axis,
        left=_build(pts, left_orders, depth + 1),
        right=_build(pts, right_orders, depth + 1),
    )


def _as_target(root: KDNode, target: Sequence[float]) -> Point:
    t = tuple(float(c) for c in target)
    if len(t) != len(root.point):
        raise ValueError(
            f"target has {len(t)} coordinates, tree points have {len(root.point)}"
        )
    return t


def range_search(
    root: Optional[KDNode], target: Sequence[float], radius: float
) -> list[KDNode]:
    """
    Find all nodes whose point lies within radius of target (inclusive).

    Branch-and-bound: the side of the splitting plane holding the target is
    searched first; the other side only when the plane is within radius.
    A negative radius matches nothing.
    """
    found: list[KDNode] = []
    if root is None or radius < 0:
        return found

    t = _as_target(root, target)
    _search(root, t, radius, radius * radius, 0, found)
    return found


def _search(
    node: Optional[KDNode],
    target: Point,
    radius: float,
    r2: float,
    depth: int,
    found: list[KDNode],
) -> None:
    if node is None:
        return

    axis = depth % len(target)
    if distance_sq(target, node.point) <= r2:
        found.append(node)

    # Plane distance is 1-D, so it is compared against the unsquared radius
    diff = target[axis] - node.point[axis]
    if diff < 0:
        near, far = node.left, node.right
    else:
        near, far = node.right, node.left

    _search(near, target, radius, r2, depth + 1, found)
    if abs(diff) <= radius:
        _search(far, target, radius, r2, depth + 1, found)


def range_query(
    root: Optional[KDNode], target: Sequence[float], radius: float
) -> list[Point]:
    """Points within radius of target (inclusive)."""
    return [node.point for node in range_search(root, target, radius)]


def range_search_trace(
    root: Optional[KDNode], target: Sequence[float], radius: float
) -> Iterator[TraceStep]:
    """
    Lazily walk the same search as range_search, yielding a TraceStep per visited node.

    Each call starts a fresh walk. The steps with within=True are exactly the
    matches of range_search, in the same order.
    """
    if root is None or radius < 0:
        return

    t = _as_target(root, target)
    yield from _trace(root, t, radius, radius * radius, 0, count(1))


def _trace(
    node: Optional[KDNode],
    target: Point,
    radius: float,
    r2: float,
    depth: int,
    ids: Iterator[int],
) -> Iterator[TraceStep]:
    if node is None:
        return

    axis = depth % len(target)
    diff = target[axis] - node.point[axis]
    branched = abs(diff) <= radius

    yield TraceStep(
        visit_id=next(ids),
        point=node.point,
        index=node.index,
        axis=axis,
        depth=depth,
        diff=diff,
        within=distance_sq(target, node.point) <= r2,
        branched=branched,
    )

    if diff < 0:
        near, far = node.left, node.right
    else:
        near, far = node.right, node.left

    yield from _trace(near, target, radius, r2, depth + 1, ids)
    if branched:
        yield from _trace(far, target, radius, r2, depth + 1, ids)


def count_visited(root: Optional[KDNode], target: Sequence[float], radius: float) -> int:
    """Number of nodes a range search visits."""
    return sum(1 for _ in range_search_trace(root, target, radius))


def iter_nodes(root: Optional[KDNode]) -> Iterator[KDNode]:
    """Pre-order traversal."""
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)
