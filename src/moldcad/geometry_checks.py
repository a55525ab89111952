"""Validation helpers for moldCAD polygons."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Sequence

from moldcad.geom import Orientation, orient2d, orientation, polygon_points, samexy


def is_closed_polygon(points: Sequence[Sequence[float]]) -> bool:
    """Return ``True`` if the point list repeats its first point at the end."""

    if not points or len(points) < 2:
        return False
    first = points[0]
    last = points[-1]
    if len(first) < 2 or len(last) < 2:
        return False
    return samexy(first, last)


def degenerate_edges(points) -> List[int]:
    """indices of zero-length edges of ``points``"""
    pts = polygon_points(points)
    n = len(pts)
    return [i for i in range(n) if samexy(pts[i], pts[(i + 1) % n])]


def _on_segment(a, b, p) -> bool:
    # p is known to be collinear with a-b
    return (min(Fraction(a[0]), Fraction(b[0])) <= Fraction(p[0]) <= max(Fraction(a[0]), Fraction(b[0])) and
            min(Fraction(a[1]), Fraction(b[1])) <= Fraction(p[1]) <= max(Fraction(a[1]), Fraction(b[1])))


def segments_intersect(p1, p2, q1, q2) -> bool:
    """closed segment intersection test, exact"""
    d1 = orient2d(q1, q2, p1)
    d2 = orient2d(q1, q2, p2)
    d3 = orient2d(p1, p2, q1)
    d4 = orient2d(p1, p2, q2)
    if d1 * d2 < 0 and d3 * d4 < 0:
        return True
    if d1 == 0 and _on_segment(q1, q2, p1):
        return True
    if d2 == 0 and _on_segment(q1, q2, p2):
        return True
    if d3 == 0 and _on_segment(p1, p2, q1):
        return True
    if d4 == 0 and _on_segment(p1, p2, q2):
        return True
    return False


def _folds_back(a, b, c) -> bool:
    ## consecutive edges a-b, b-c overlap when collinear and reversing
    if orient2d(a, b, c) != 0:
        return False
    dot = ((Fraction(b[0]) - Fraction(a[0])) * (Fraction(c[0]) - Fraction(b[0])) +
           (Fraction(b[1]) - Fraction(a[1])) * (Fraction(c[1]) - Fraction(b[1])))
    return dot < 0


def is_simple_polygon(points) -> bool:
    """Return ``True`` if no two edges of the polygon meet except at
    the vertex shared by consecutive edges.

    Quadratic in the number of edges; meant as an optional
    precondition check, not for large inputs.
    """
    pts = polygon_points(points)
    n = len(pts)
    if n < 3 or degenerate_edges(pts):
        return False
    for i in range(n):
        if _folds_back(pts[i - 1], pts[i], pts[(i + 1) % n]):
            return False
    for i in range(n):
        a1, a2 = pts[i], pts[(i + 1) % n]
        for j in range(i + 1, n):
            if j == i + 1 or (i == 0 and j == n - 1):
                continue
            if segments_intersect(a1, a2, pts[j], pts[(j + 1) % n]):
                return False
    return True


def check_casting_polygon(points, simple: bool = False) -> "CheckResult":
    """Check the preconditions of the casting query.

    The first failing condition is reported; ``edge_index`` is set
    when the failure belongs to a specific edge.
    """
    pts = polygon_points(points)
    if len(pts) < 3:
        return CheckResult(False, [f'polygon needs at least 3 vertices, got {len(pts)}'])
    zero = degenerate_edges(pts)
    if zero:
        return CheckResult(False, [f'zero-length edge {zero[0]} has no direction'], zero[0])
    if orientation(pts) is Orientation.COLLINEAR:
        return CheckResult(False, ['polygon has zero signed area'])
    if simple and not is_simple_polygon(pts):
        return CheckResult(False, ['polygon is not simple'])
    return CheckResult(True, [])


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]
    edge_index: Optional[int] = None

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    'CheckResult',
    'check_casting_polygon',
    'degenerate_edges',
    'is_closed_polygon',
    'is_simple_polygon',
    'segments_intersect',
]
