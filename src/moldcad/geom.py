## planar polygon primitives for moldCAD
## Copyright (c) 2026 moldCAD contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""planar polygon primitives for **moldCAD**

points
======

Points follow the yapCAD convention: a list of four numbers
``[x, y, z, w]`` with ``w > 0``.  Only ``x`` and ``y`` matter here.
Coordinates are kept exactly as supplied (``int``, ``float``,
``Fraction``, ``Decimal``, numpy scalars) and only converted to
``Fraction`` inside the exact predicates, so no rounding ever enters
the orientation or direction tests.

polygons
========

A polygon is a list of three or more points.  It may be given closed
(first point repeated at the end, yapCAD style) or open; the closing
duplicate is dropped by ``polygon_points()``.  Edge ``i`` runs from
vertex ``i`` to vertex ``i+1`` (mod ``n``).

"""

from __future__ import annotations

import numbers
from copy import deepcopy
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Iterator, List, Tuple

import numpy as np

from moldcad.direction import Direction


## check that an argument is a real scalar and not a boolean
def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n, (bool, np.bool_))) and isinstance(n, (numbers.Real, Decimal))


def point(x=False, y=False, z=False, w=False):
    """Point creation from point or scalars"""
    if ispoint(x):
        return deepcopy(x)
    if isinstance(x, (tuple, list, np.ndarray)) and len(x) >= 2:
        return point(*list(x)[:4])
    r = [0, 0, 0, 1]
    if isgoodnum(x):
        r[0] = x
        if isgoodnum(y):
            r[1] = y
            if isgoodnum(z):
                r[2] = z
                if isgoodnum(w):
                    r[3] = w
    else:
        raise ValueError('bad arguments to point(): {}'.format(x))
    if r[3] > 0:
        return r
    raise ValueError('bad w argument to point()')


def ispoint(x):
    """ is it a point?"""
    return (isinstance(x, list) and len(x) == 4 and
            all(isgoodnum(c) for c in x) and x[3] > 0)


def samexy(a, b):
    """exact coordinate equality in the x-y plane"""
    return Fraction(a[0]) == Fraction(b[0]) and Fraction(a[1]) == Fraction(b[1])


def polygon_points(a) -> List[list]:
    """Normalize ``a`` into a list of points with no closing duplicate.

    ``a`` may be a list of yapCAD points, a sequence of ``(x, y)``
    pairs or an ``(n, k)`` numpy array with ``k >= 2``.
    """
    try:
        arr = np.asarray(a, dtype=object)
    except ValueError as exc:
        raise ValueError('bad polygon argument: {}'.format(exc)) from exc
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError('polygon must be a sequence of points, got shape {}'.format(arr.shape))
    pts = [point(*row[:4]) for row in arr.tolist()]
    if len(pts) > 1 and samexy(pts[0], pts[-1]):
        pts.pop()
    return pts


def polygon_edges(a) -> Iterator[Tuple[list, list]]:
    """yield the directed edges ``(p_i, p_i+1)`` of polygon ``a``, closing edge last"""
    pts = polygon_points(a)
    n = len(pts)
    for i in range(n):
        yield pts[i], pts[(i + 1) % n]


def edge_direction(p1, p2) -> Direction:
    """exact direction of the directed segment from ``p1`` to ``p2``"""
    return Direction(Fraction(p2[0]) - Fraction(p1[0]),
                     Fraction(p2[1]) - Fraction(p1[1]))


def signed_area(a) -> Fraction:
    """exact signed area of polygon ``a``; positive if counterclockwise"""
    pts = polygon_points(a)
    total = Fraction(0)
    n = len(pts)
    for i in range(n):
        x1, y1 = Fraction(pts[i][0]), Fraction(pts[i][1])
        x2, y2 = Fraction(pts[(i + 1) % n][0]), Fraction(pts[(i + 1) % n][1])
        total += x1 * y2 - x2 * y1
    return total / 2


class Orientation(Enum):
    CLOCKWISE = -1
    COLLINEAR = 0
    COUNTERCLOCKWISE = 1


def orientation(a) -> Orientation:
    """traversal orientation of polygon ``a``"""
    area = signed_area(a)
    if area > 0:
        return Orientation.COUNTERCLOCKWISE
    if area < 0:
        return Orientation.CLOCKWISE
    return Orientation.COLLINEAR


## orientation of the triangle (p, q, r); used by the simplicity check
def orient2d(p, q, r) -> int:
    d = ((Fraction(q[0]) - Fraction(p[0])) * (Fraction(r[1]) - Fraction(p[1])) -
         (Fraction(q[1]) - Fraction(p[1])) * (Fraction(r[0]) - Fraction(p[0])))
    return (d > 0) - (d < 0)


def reverse_polygon(a) -> List[list]:
    """same polygon, opposite traversal; vertex 0 is kept in place"""
    pts = polygon_points(a)
    return [pts[0]] + list(reversed(pts[1:]))


__all__ = [
    'Orientation',
    'edge_direction',
    'isgoodnum',
    'orient2d',
    'orientation',
    'point',
    'ispoint',
    'polygon_edges',
    'polygon_points',
    'reverse_polygon',
    'samexy',
    'signed_area',
]
