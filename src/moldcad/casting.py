## single-mold translational casting of simple polygons
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

"""single-mold translational casting for **moldCAD**

=====================
OVERVIEW
=====================

A simple polygon is *castable* if it can be pulled out of a one-piece
mold, shaped around it, by a single translation.  One polygon edge,
the *top edge*, lies flush with the mold surface; every other edge
touches the mold.

For each edge, the open half-circle of directions pointing out of the
polygon through that edge is the edge's *outer circle*: pulling in any
of those directions would drag that edge through the mold wall, unless
the edge is the top edge.  A direction ``d`` is a valid pull direction
with top edge ``e`` exactly when ``d`` lies in the outer circle of
``e`` and of no other edge.

The query therefore builds a coverage arrangement of the direction
circle: a cyclic list of cells of constant depth (0, 1 or "2 or
more"), inserting the outer circle of one edge at a time.  Every depth
1 cell is a valid (top edge, pull direction arc) pair.  As soon as the
whole circle is covered twice the polygon is known not to be castable
and the query stops.

cells
=====

A cell is described by its first direction (clockwise) and whether
that direction belongs to it; its last direction is the start of the
next cell, which belongs to it iff the next cell is open at its start.
A shared boundary direction is therefore closed in exactly one of the
two neighbouring cells.  Because outer circles are open, a cell may be
a single direction (closed start, next cell starting open at the same
direction); cells are never empty.  The one cell whose end equals its
start without being a single direction is an open cell running the
whole way round, which appears only beside a single direction cell.

example
=======

::

  from moldcad.casting import find_single_mold_translational_casting

  for top in find_single_mold_translational_casting(
          [[0, 0], [4, 0], [5, 2], [-1, 2]]):
      print(top.edge_index, top.arc.start, top.arc.end)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple

from moldcad.config import CastingConfig
from moldcad.direction import Arc, BaseDirection
from moldcad.errors import DegeneratePolygonError
from moldcad.geom import Orientation, edge_direction, orientation, polygon_points
from moldcad.geometry_checks import check_casting_polygon

logger = logging.getLogger(__name__)


def segment_outer_circle(p1, p2, orient: Orientation) -> Arc:
    """Open half-circle of directions pointing out of the polygon
    through the directed edge ``p1 -> p2``.

    For a clockwise polygon the outer side is to the left of the edge;
    for a counterclockwise one it is to the right.
    """
    forward = edge_direction(p1, p2)
    backward = -forward
    if orient is Orientation.CLOCKWISE:
        return Arc(backward, forward)
    return Arc(forward, backward)


class Depth(Enum):
    """number of outer circles covering a cell, saturating at two"""
    UNBLOCKED = 0
    SINGLE_BLOCKER = 1
    MULTIPLY_BLOCKED = 2

    def bumped(self) -> "Depth":
        if self is Depth.UNBLOCKED:
            return Depth.SINGLE_BLOCKER
        return Depth.MULTIPLY_BLOCKED


@dataclass
class Cell:
    start: BaseDirection
    start_closed: bool
    depth: Depth = Depth.UNBLOCKED
    owner_edge: Optional[int] = None  # only meaningful for SINGLE_BLOCKER

    def cover(self, edge_index: int) -> None:
        """add one more covering outer circle"""
        if self.depth is Depth.UNBLOCKED:
            self.owner_edge = edge_index
        elif self.depth is Depth.SINGLE_BLOCKER:
            self.owner_edge = None
        self.depth = self.depth.bumped()

    def split(self, start: BaseDirection, start_closed: bool) -> "Cell":
        return Cell(start, start_closed, self.depth, self.owner_edge)


class TopEdge(NamedTuple):
    """a valid top edge and the arc of pull directions it admits"""
    edge_index: int
    arc: Arc


def _splits_at_open_start(b: BaseDirection, span: Arc, start_closed: bool) -> bool:
    ## a new arc begins (open) at b; b itself stays with the piece before it
    if b == span.end:
        return False
    if b == span.start:
        return start_closed
    return b.clockwise_in_between(span.start, span.end)


def _splits_at_closed_start(b: BaseDirection, span: Arc, end_closed: bool) -> bool:
    ## a new arc ends (open) at b; b itself starts the piece after it
    if b == span.start:
        return False
    if b == span.end:
        return end_closed
    return b.clockwise_in_between(span.start, span.end)


class CircleArrangement:
    """Subdivision of the direction circle into cells of depth 0, 1, 2+.

    Built from the outer circle of the first polygon edge, then updated
    with ``insert()`` for every further edge.  The whole circle is
    always covered by exactly one cell per direction.
    """

    def __init__(self, first_arc: Arc, edge_index: int = 0):
        self._cells: List[Cell] = [
            Cell(first_arc.start, False, Depth.SINGLE_BLOCKER, edge_index),
            Cell(first_arc.end, True),
        ]

    def __len__(self):
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __repr__(self):
        parts = []
        for cell in self._cells:
            mark = '[' if cell.start_closed else '('
            parts.append('{}{!r}:{}'.format(mark, cell.start, cell.depth.value))
        return 'CircleArrangement({})'.format(' '.join(parts))

    def _span(self, i: int) -> Tuple[Arc, bool]:
        nxt = self._cells[(i + 1) % len(self._cells)]
        return Arc(self._cells[i].start, nxt.start), not nxt.start_closed

    def spans(self) -> Iterator[Tuple[Cell, Arc, bool]]:
        """yield ``(cell, arc, end_closed)`` for every cell in cyclic order"""
        for i, cell in enumerate(self._cells):
            arc, end_closed = self._span(i)
            yield cell, arc, end_closed

    def _cell_contains(self, i: int, d: BaseDirection) -> bool:
        if len(self._cells) == 1:
            return True
        cell = self._cells[i]
        span, end_closed = self._span(i)
        if span.start == span.end and cell.start_closed:
            return d == span.start
        ## an open cell from d back round to d holds everything but d
        return span.contains(d, cell.start_closed, end_closed)

    def locate(self, d: BaseDirection) -> Cell:
        """the cell containing direction ``d``"""
        for i, cell in enumerate(self._cells):
            if self._cell_contains(i, d):
                return cell
        raise ValueError('direction {!r} not covered by the arrangement'.format(d))

    def depth_at(self, d: BaseDirection) -> Depth:
        return self.locate(d).depth

    def insert(self, arc: Arc, edge_index: int) -> None:
        """Add the open outer circle ``arc`` of polygon edge ``edge_index``.

        Cells containing an endpoint of ``arc`` are split there; every
        resulting cell inside ``arc`` is covered once more.  Runs of
        adjacent 2+ cells are merged afterwards.
        """
        cells = self._cells
        updated: List[Cell] = []
        for i, cell in enumerate(cells):
            if cell.depth is Depth.MULTIPLY_BLOCKED:
                updated.append(cell)
                continue
            span, end_closed = self._span(i)
            updated.extend(self._cover_cell(cell, span, end_closed, arc, edge_index))
        self._cells = updated
        self._merge_blocked_runs()

    @staticmethod
    def _cover_cell(cell: Cell, span: Arc, end_closed: bool,
                    arc: Arc, edge_index: int) -> List[Cell]:
        b1, b2 = arc.start, arc.end
        if span.start == span.end and cell.start_closed:
            # single direction cell
            if cell.start.in_open_arc(arc):
                cell.cover(edge_index)
            return [cell]

        open_split = _splits_at_open_start(b1, span, cell.start_closed)
        closed_split = _splits_at_closed_start(b2, span, end_closed)

        if not open_split and not closed_split:
            # the cell lies entirely inside or entirely outside arc
            if cell.start_closed:
                inside = cell.start.in_open_arc(arc)
            else:
                inside = cell.start == b1 or cell.start.in_open_arc(arc)
            if inside:
                cell.cover(edge_index)
            return [cell]

        if open_split and closed_split:
            if b1.in_closed_arc(Arc(span.start, b2)):
                #   ?-------------------------?   cell
                #         o~~~~~~~~~~~o           arc
                #   ?-----c     o-----o     c-----?
                middle = cell.split(b1, False)
                middle.cover(edge_index)
                tail = cell.split(b2, True)
                return [cell, middle, tail]
            #   ?-------------------------?       cell
            #  ~~~~~~~o           o~~~~~~~~~~     arc
            #   ?-----o     c-----c     o-----?
            middle = cell.split(b2, True)
            tail = cell.split(b1, False)
            tail.cover(edge_index)
            cell.cover(edge_index)
            return [cell, middle, tail]

        if open_split:
            tail = cell.split(b1, False)
            tail.cover(edge_index)
            return [cell, tail]

        tail = cell.split(b2, True)
        cell.cover(edge_index)
        return [cell, tail]

    def _merge_blocked_runs(self) -> None:
        ## runs wrapping past the end of the list are left split
        merged: List[Cell] = []
        for cell in self._cells:
            if (cell.depth is Depth.MULTIPLY_BLOCKED and merged and
                    merged[-1].depth is Depth.MULTIPLY_BLOCKED):
                continue
            merged.append(cell)
        self._cells = merged

    def all_covered_twice(self) -> bool:
        """True iff the arrangement collapsed to one cell.

        A lone cell can only be a 2+ cell, since the first outer circle
        and its complement always differ in depth.
        """
        return len(self._cells) == 1

    def top_edges(self) -> Iterator[TopEdge]:
        """Yield every depth 1 cell as a ``TopEdge``, in cyclic order.

        The arc runs from the cell start to the next cell start; a
        single direction cell is reported with equal start and end.
        """
        if len(self._cells) == 1:
            return
        for i, cell in enumerate(self._cells):
            if cell.depth is Depth.SINGLE_BLOCKER:
                span, _ = self._span(i)
                yield TopEdge(cell.owner_edge, span)


def _validated_points(polygon, check_simple: bool):
    pts = polygon_points(polygon)
    result = check_casting_polygon(pts, simple=check_simple)
    if not result:
        raise DegeneratePolygonError(result.warnings[0], result.edge_index)
    return pts


def casting_arrangement(polygon, config: Optional[CastingConfig] = None) -> CircleArrangement:
    """Build the outer-circle arrangement of ``polygon``.

    With ``config.early_exit`` set the build stops once every direction
    is covered twice, leaving a single 2+ cell.
    """
    if config is None:
        config = CastingConfig()
    pts = _validated_points(polygon, config.check_simple)
    orient = orientation(pts)
    n = len(pts)

    arrangement = CircleArrangement(segment_outer_circle(pts[0], pts[1 % n], orient), 0)
    for i in range(1, n):
        arrangement.insert(segment_outer_circle(pts[i], pts[(i + 1) % n], orient), i)
        logger.debug('inserted outer circle of edge %d/%d, %d cells', i, n - 1, len(arrangement))
        if config.early_exit and arrangement.all_covered_twice():
            logger.info('not castable: every pull direction blocked after %d of %d edges',
                        i + 1, n)
            break
    return arrangement


def find_single_mold_translational_casting(polygon, *,
                                           config: Optional[CastingConfig] = None,
                                           sink: Optional[Callable[[TopEdge], None]] = None
                                           ) -> List[TopEdge]:
    """Find every top edge and pull-direction arc of ``polygon``.

    ``polygon`` is a list of points (or an ``(n, 2)`` array), closed or
    open, in either orientation.  Edge ``i`` runs from vertex ``i`` to
    vertex ``i+1``.  Returns a list of ``TopEdge(edge_index, arc)``;
    an empty list means the polygon cannot be cast in a one-piece mold
    by a single translation.  If ``sink`` is given it is called with
    each result as well.

    Raises ``DegeneratePolygonError`` for polygons with fewer than three
    vertices, zero-length edges or zero area.
    """
    arrangement = casting_arrangement(polygon, config)
    if arrangement.all_covered_twice():
        return []
    results = []
    for top in arrangement.top_edges():
        results.append(top)
        if sink is not None:
            sink(top)
    logger.debug('%d top edge arcs found', len(results))
    return results


def is_castable(polygon, config: Optional[CastingConfig] = None) -> bool:
    """can ``polygon`` be pulled out of a one-piece mold by a translation?"""
    return bool(find_single_mold_translational_casting(polygon, config=config))


__all__ = [
    'Cell',
    'CircleArrangement',
    'Depth',
    'TopEdge',
    'casting_arrangement',
    'find_single_mold_translational_casting',
    'is_castable',
    'segment_outer_circle',
]
