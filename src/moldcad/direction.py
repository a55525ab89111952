## exact planar directions for moldCAD
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

"""exact directions on the unit circle

=====================
OVERVIEW
=====================

A direction is a point on the unit circle, represented by any non-zero
vector that points at it.  Directions are never converted to angles
for computation; they are compared only through exact equality and the
cyclic betweenness predicates below.  Angles are available for display
purposes through ``angle()`` and ``angle_degrees()``.

The arrangement code in ``moldcad.casting`` only depends on the
``BaseDirection`` interface, so any exact number substrate can be used
underneath.  ``Direction`` is the stock implementation; it stores its
components as ``fractions.Fraction`` values, which makes every
comparison exact for integer, float, ``Fraction`` and ``Decimal``
input.

arcs
====

An ``Arc`` is a pair of directions ``(start, end)`` that denotes the
*clockwise* sweep from ``start`` to ``end``.  Whether each endpoint
belongs to the arc depends on context and is not stored on the value.
An arc whose start and end are equal denotes a single direction when
it is reported by ``moldcad.casting``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import NamedTuple

import mpmath as mpm


class BaseDirection(ABC):
    """Abstract exact direction.

    Concrete classes provide equality, hashing, negation and
    ``counterclockwise_in_between``.  Everything else used by the
    casting code is derived from those.
    """

    @abstractmethod
    def __eq__(self, other):
        ...

    @abstractmethod
    def __hash__(self):
        ...

    @abstractmethod
    def __neg__(self):
        ...

    @abstractmethod
    def counterclockwise_in_between(self, d1, d2) -> bool:
        """Return ``True`` iff ``self`` differs from ``d1`` and, rotating
        counterclockwise from ``d1``, is reached strictly before ``d2``.

        If ``d1 == d2`` this is ``True`` for every direction except
        ``d1`` itself.
        """

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def clockwise_in_between(self, d1, d2) -> bool:
        """Return ``True`` iff ``self`` lies strictly inside the clockwise
        sweep from ``d1`` to ``d2``."""
        return self.counterclockwise_in_between(d2, d1)

    def in_closed_arc(self, arc: "Arc") -> bool:
        """Is ``self`` in the clockwise arc ``arc``, endpoints included?"""
        return not self.counterclockwise_in_between(arc.start, arc.end)

    def in_open_arc(self, arc: "Arc") -> bool:
        """Is ``self`` in the clockwise arc ``arc``, endpoints excluded?"""
        return self.clockwise_in_between(arc.start, arc.end)


class Direction(BaseDirection):
    """Exact rational direction ``(dx, dy)``.

    >>> Direction(1, 0) == Direction(5, 0)
    True
    >>> Direction(0, 1).counterclockwise_in_between(Direction(1, 0),
    ...                                             Direction(-1, 0))
    True
    """

    __slots__ = ('_dx', '_dy')

    def __init__(self, dx, dy=None):
        if dy is None:
            # direction of a vector or yapCAD-style point
            dx, dy = dx[0], dx[1]
        try:
            fx = Fraction(dx)
            fy = Fraction(dy)
        except (TypeError, ValueError) as exc:
            raise ValueError(f'bad direction components: ({dx!r}, {dy!r})') from exc
        if fx == 0 and fy == 0:
            raise ValueError('a zero vector has no direction')
        self._dx = fx
        self._dy = fy

    @property
    def dx(self) -> Fraction:
        return self._dx

    @property
    def dy(self) -> Fraction:
        return self._dy

    def vector(self):
        """the underlying (unnormalized) vector as a tuple of Fractions"""
        return (self._dx, self._dy)

    def _half(self) -> int:
        ## 0 for angles in [0, pi), 1 for angles in [pi, 2 pi)
        if self._dy > 0 or (self._dy == 0 and self._dx > 0):
            return 0
        return 1

    def compare_angle(self, other: "Direction") -> int:
        """Compare polar angles in ``[0, 2 pi)`` exactly; returns -1, 0 or 1."""
        ha = self._half()
        hb = other._half()
        if ha != hb:
            return -1 if ha < hb else 1
        cross = self._dx * other._dy - self._dy * other._dx
        if cross > 0:
            return -1
        if cross < 0:
            return 1
        return 0

    def __eq__(self, other):
        if not isinstance(other, Direction):
            return NotImplemented
        return (self._dx * other._dy == self._dy * other._dx and
                self._dx * other._dx + self._dy * other._dy > 0)

    def __hash__(self):
        scale = max(abs(self._dx), abs(self._dy))
        return hash((self._dx / scale, self._dy / scale))

    def __lt__(self, other):
        if not isinstance(other, Direction):
            return NotImplemented
        return self.compare_angle(other) < 0

    def __le__(self, other):
        if not isinstance(other, Direction):
            return NotImplemented
        return self.compare_angle(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, Direction):
            return NotImplemented
        return self.compare_angle(other) > 0

    def __ge__(self, other):
        if not isinstance(other, Direction):
            return NotImplemented
        return self.compare_angle(other) >= 0

    def __neg__(self):
        return Direction(-self._dx, -self._dy)

    def counterclockwise_in_between(self, d1, d2) -> bool:
        if d1 < self:
            return self < d2 or d2 <= d1
        return self < d2 and d2 <= d1

    def perpendicular(self, clockwise=False) -> "Direction":
        """direction rotated by a quarter turn (counterclockwise by default)"""
        if clockwise:
            return Direction(self._dy, -self._dx)
        return Direction(-self._dy, self._dx)

    def angle(self) -> float:
        """polar angle in radians, in ``[0, 2 pi)``, for display only"""
        a = mpm.atan2(_mpf(self._dy), _mpf(self._dx))
        if a < 0:
            a += 2 * mpm.pi
        return float(a)

    def angle_degrees(self) -> float:
        """polar angle in degrees, in ``[0, 360)``, for display only"""
        a = mpm.degrees(mpm.atan2(_mpf(self._dy), _mpf(self._dx)))
        if a < 0:
            a += 360
        return float(a)

    def unit(self):
        """floating point unit vector, for display and export"""
        x = _mpf(self._dx)
        y = _mpf(self._dy)
        m = mpm.sqrt(x * x + y * y)
        return (float(x / m), float(y / m))

    def __repr__(self):
        return 'Direction({}, {})'.format(_fstr(self._dx), _fstr(self._dy))


class Arc(NamedTuple):
    """clockwise sweep of directions from ``start`` to ``end``"""
    start: BaseDirection
    end: BaseDirection

    def is_single_direction(self) -> bool:
        return self.start == self.end

    def contains(self, d: BaseDirection, start_closed=False, end_closed=False) -> bool:
        """membership test with explicit endpoint closure"""
        if d == self.start:
            return start_closed or (d == self.end and end_closed)
        if d == self.end:
            return end_closed
        return d.clockwise_in_between(self.start, self.end)


def _mpf(q: Fraction):
    return mpm.mpf(q.numerator) / q.denominator


def _fstr(q: Fraction) -> str:
    if q.denominator == 1:
        return str(q.numerator)
    return '{}/{}'.format(q.numerator, q.denominator)


__all__ = [
    'Arc',
    'BaseDirection',
    'Direction',
]
