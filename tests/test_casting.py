"""Tests for the single-mold translational casting query.

Arrangements are checked against an exact brute-force oracle: the
depth of a direction is the number of edges whose open outer circle
contains it.
"""

import math

import numpy as np
import pytest

from moldcad.casting import (
    Cell,
    CircleArrangement,
    Depth,
    TopEdge,
    casting_arrangement,
    find_single_mold_translational_casting,
    is_castable,
    segment_outer_circle,
)
from moldcad.config import CastingConfig
from moldcad.direction import Arc, Direction
from moldcad.errors import DegeneratePolygonError, PolygonFormatError
from moldcad.geom import orientation, polygon_points, reverse_polygon

E = Direction(1, 0)
N = Direction(0, 1)
W = Direction(-1, 0)
S = Direction(0, -1)

SQUARE = [[0, 0], [1, 0], [1, 1], [0, 1]]
TRAPEZOID = [[0, 0], [4, 0], [5, 2], [-1, 2]]  # widens upwards
TRIANGLE = [[0, 0], [2, 0], [1, 1]]
PLUS = [[1, 0], [2, 0], [2, 1], [3, 1], [3, 2], [2, 2],
        [2, 3], [1, 3], [1, 2], [0, 2], [0, 1], [1, 1]]
U_SHAPE = [[0, 0], [3, 0], [3, 3], [2, 3], [2, 1], [1, 1], [1, 3], [0, 3]]
L_SHAPE = [[0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]]
SPLIT_BOTTOM = [[0, 0], [1, 0], [2, 0], [2, 1], [0, 1]]
PENTAGON = [[math.cos(math.radians(90 + 72 * k)), math.sin(math.radians(90 + 72 * k))]
            for k in range(5)]
DOVETAIL = [[0, 0], [6, 0], [6, 4], [4, 4], [5, 2], [1, 2], [2, 4], [0, 4]]

ALL_POLYGONS = {
    'square': SQUARE,
    'trapezoid': TRAPEZOID,
    'triangle': TRIANGLE,
    'plus': PLUS,
    'u_shape': U_SHAPE,
    'l_shape': L_SHAPE,
    'split_bottom': SPLIT_BOTTOM,
    'pentagon': PENTAGON,
    'dovetail': DOVETAIL,
}


# ============================================================================
# helpers
# ============================================================================

def outer_circles(polygon):
    pts = polygon_points(polygon)
    orient = orientation(pts)
    n = len(pts)
    return [segment_outer_circle(pts[i], pts[(i + 1) % n], orient) for i in range(n)]


def sample_directions(arcs):
    samples = set()
    for arc in arcs:
        for d in (arc.start, arc.end):
            samples.add(d)
            samples.add(d.perpendicular())
            samples.add(d.perpendicular(clockwise=True))
    for x in range(-4, 5):
        for y in range(-4, 5):
            if x or y:
                samples.add(Direction(x, y))
    return samples


def oracle_owners(arcs, d):
    return [i for i, arc in enumerate(arcs) if d.in_open_arc(arc)]


def containing_cells(arrangement, d):
    spans = list(arrangement.spans())
    if len(spans) == 1:
        return [spans[0][0]]
    found = []
    for cell, arc, end_closed in spans:
        if arc.start == arc.end:
            if cell.start_closed:
                hit = d == arc.start
            else:
                # the rest of the circle, round from arc.start
                hit = d != arc.start
            if hit:
                found.append(cell)
        elif arc.contains(d, cell.start_closed, end_closed):
            found.append(cell)
    return found


def assert_matches_oracle(arrangement, arcs, samples):
    for d in samples:
        cells = containing_cells(arrangement, d)
        assert len(cells) == 1, 'direction {!r} in {} cells'.format(d, len(cells))
        owners = oracle_owners(arcs, d)
        cell = cells[0]
        assert cell.depth.value == min(len(owners), 2), repr(d)
        if len(owners) == 1:
            assert cell.owner_edge == owners[0]
        assert arrangement.locate(d) is cell


def assert_no_empty_cells(arrangement):
    spans = list(arrangement.spans())
    if len(spans) == 1:
        return
    for cell, arc, end_closed in spans:
        if arc.start == arc.end:
            if cell.start_closed:
                # a single direction cell must own its direction
                assert end_closed
            else:
                # everything but one direction, held by the other cell
                assert not end_closed
                assert len(spans) == 2


def by_edge(results):
    return sorted(results, key=lambda top: top.edge_index)


# ============================================================================
# outer circles
# ============================================================================

class TestOuterCircle:

    def test_counterclockwise_bottom_edge_points_down(self):
        arc = segment_outer_circle([0, 0], [1, 0], orientation(SQUARE))
        assert arc == Arc(E, W)
        assert S.in_open_arc(arc)
        assert not N.in_closed_arc(arc)

    def test_clockwise_polygon_uses_left_side(self):
        cw = reverse_polygon(SQUARE)
        arc = segment_outer_circle([0, 0], [0, 1], orientation(cw))
        assert arc == Arc(S, N)
        assert W.in_open_arc(arc)

    def test_arc_is_open_half_circle(self):
        arc = segment_outer_circle([0, 0], [3, 1], orientation(TRAPEZOID))
        assert arc.end == -arc.start
        assert not arc.start.in_open_arc(arc)
        assert not arc.end.in_open_arc(arc)


# ============================================================================
# arrangement
# ============================================================================

class TestCircleArrangement:

    def test_construct(self):
        arr = CircleArrangement(Arc(E, W))
        cells = list(arr)
        assert len(cells) == 2
        assert cells[0] == Cell(E, False, Depth.SINGLE_BLOCKER, 0)
        assert cells[1] == Cell(W, True, Depth.UNBLOCKED, None)
        assert arr.depth_at(S) is Depth.SINGLE_BLOCKER
        assert arr.depth_at(E) is Depth.UNBLOCKED
        assert arr.depth_at(W) is Depth.UNBLOCKED
        assert not arr.all_covered_twice()

    def test_cover_caps_at_two(self):
        cell = Cell(E, True)
        cell.cover(4)
        assert cell.depth is Depth.SINGLE_BLOCKER
        assert cell.owner_edge == 4
        cell.cover(5)
        assert cell.depth is Depth.MULTIPLY_BLOCKED
        assert cell.owner_edge is None
        cell.cover(6)
        assert cell.depth is Depth.MULTIPLY_BLOCKED

    def test_identical_arc_creates_no_empty_cell(self):
        arr = CircleArrangement(Arc(E, W))
        arr.insert(Arc(E, W), 1)
        cells = list(arr)
        assert len(cells) == 2
        assert cells[0].start == E and not cells[0].start_closed
        assert cells[0].depth is Depth.MULTIPLY_BLOCKED
        assert cells[1].start == W and cells[1].start_closed
        assert cells[1].depth is Depth.UNBLOCKED

    def test_complement_arc_leaves_boundary_points_uncovered(self):
        arr = CircleArrangement(Arc(E, W))
        arr.insert(Arc(W, E), 1)
        assert len(arr) == 4
        assert arr.depth_at(E) is Depth.UNBLOCKED
        assert arr.depth_at(W) is Depth.UNBLOCKED
        assert arr.locate(N).owner_edge == 1
        assert arr.locate(S).owner_edge == 0
        assert_no_empty_cells(arr)

    def test_shared_boundary_belongs_to_one_cell(self):
        arcs = [Arc(E, W), Arc(N, S), Arc(E, W)]
        arr = CircleArrangement(arcs[0])
        for i, arc in enumerate(arcs[1:], start=1):
            arr.insert(arc, i)
            assert_no_empty_cells(arr)
            assert_matches_oracle(arr, arcs[:i + 1], sample_directions(arcs))

    def test_depth_two_run_across_list_end(self):
        arr = CircleArrangement(Arc(E, W))
        arr.insert(Arc(E, W), 1)
        arr.insert(Arc(N, S), 2)
        arr.insert(Arc(N, S), 3)
        cells = list(arr)
        assert len(cells) == 3
        # the 2+ run (N, E) + (E, W) wraps past the end of the list
        assert cells[0].depth is Depth.MULTIPLY_BLOCKED
        assert cells[-1].depth is Depth.MULTIPLY_BLOCKED
        assert not arr.all_covered_twice()
        arcs = [Arc(E, W), Arc(E, W), Arc(N, S), Arc(N, S)]
        assert_matches_oracle(arr, arcs, sample_directions(arcs))
        assert list(arr.top_edges()) == []

        arr.insert(Arc(S, N), 4)
        arr.insert(Arc(S, N), 5)
        assert not arr.all_covered_twice()
        assert arr.depth_at(N) is Depth.UNBLOCKED
        arr.insert(Arc(W, E), 6)
        arr.insert(Arc(W, E), 7)
        assert arr.all_covered_twice()
        assert arr.depth_at(Direction(3, -7)) is Depth.MULTIPLY_BLOCKED
        assert list(arr.top_edges()) == []

    def test_two_cells_sharing_a_start(self):
        se = Direction(2, -2)
        arcs = [
            Arc(se, -se),
            Arc(Direction(-1, -2), Direction(1, 2)),
            Arc(E, W),
            Arc(Direction(-2, 1), Direction(2, -1)),
            Arc(-se, se),
        ]
        arr = CircleArrangement(arcs[0], 0)
        for i in range(1, len(arcs)):
            arr.insert(arcs[i], i)
            assert_no_empty_cells(arr)
            assert_matches_oracle(arr, arcs[:i + 1], sample_directions(arcs))
        # a 2+ cell open at se running all the way round, and se alone
        assert len(arr) == 2
        assert not arr.all_covered_twice()
        assert arr.depth_at(Direction(7, -6)) is Depth.MULTIPLY_BLOCKED
        assert arr.depth_at(N) is Depth.MULTIPLY_BLOCKED
        assert arr.depth_at(se) is Depth.SINGLE_BLOCKER
        assert list(arr.top_edges()) == [TopEdge(2, Arc(se, se))]

    def test_cover_cell_open_all_round(self):
        se = Direction(1, -1)
        cell = Cell(se, False)
        pieces = CircleArrangement._cover_cell(cell, Arc(se, se), False, Arc(E, W), 7)
        assert [(c.start, c.start_closed, c.depth) for c in pieces] == [
            (se, False, Depth.SINGLE_BLOCKER),
            (W, True, Depth.UNBLOCKED),
            (E, False, Depth.SINGLE_BLOCKER),
        ]
        assert pieces[0].owner_edge == 7
        assert pieces[2].owner_edge == 7

    @pytest.mark.parametrize('name', sorted(ALL_POLYGONS))
    def test_partition_after_every_insert(self, name):
        arcs = outer_circles(ALL_POLYGONS[name])
        samples = sample_directions(arcs)
        arr = CircleArrangement(arcs[0], 0)
        assert_matches_oracle(arr, arcs[:1], samples)
        for i in range(1, len(arcs)):
            arr.insert(arcs[i], i)
            assert_no_empty_cells(arr)
            assert_matches_oracle(arr, arcs[:i + 1], samples)
            # no two neighbours inside the list are both 2+
            cells = list(arr)
            for a, b in zip(cells, cells[1:]):
                assert not (a.depth is Depth.MULTIPLY_BLOCKED and
                            b.depth is Depth.MULTIPLY_BLOCKED)

    @pytest.mark.parametrize('name', sorted(ALL_POLYGONS))
    def test_depth_never_decreases(self, name):
        arcs = outer_circles(ALL_POLYGONS[name])
        samples = sample_directions(arcs)
        arr = CircleArrangement(arcs[0], 0)
        previous = {d: (arr.locate(d).depth.value, arr.locate(d).owner_edge) for d in samples}
        for i in range(1, len(arcs)):
            arr.insert(arcs[i], i)
            for d in samples:
                cell = arr.locate(d)
                depth, owner = previous[d]
                assert cell.depth.value >= depth
                if depth == 1 and cell.depth is Depth.SINGLE_BLOCKER:
                    assert cell.owner_edge == owner
                if cell.depth is Depth.SINGLE_BLOCKER:
                    assert cell.owner_edge is not None
                else:
                    assert cell.owner_edge is None
                previous[d] = (cell.depth.value, cell.owner_edge)


# ============================================================================
# casting query
# ============================================================================

class TestFindCasting:

    def test_square(self):
        results = by_edge(find_single_mold_translational_casting(SQUARE))
        assert [top.edge_index for top in results] == [0, 1, 2, 3]
        assert [top.arc.start for top in results] == [S, E, N, W]
        assert all(top.arc.is_single_direction() for top in results)

    def test_square_clockwise(self):
        results = by_edge(find_single_mold_translational_casting(reverse_polygon(SQUARE)))
        assert [(top.edge_index, top.arc.start) for top in results] == \
            [(0, W), (1, N), (2, E), (3, S)]

    def test_closed_input_matches_open(self):
        closed = SQUARE + [SQUARE[0]]
        assert find_single_mold_translational_casting(closed) == \
            find_single_mold_translational_casting(SQUARE)

    def test_trapezoid(self):
        results = by_edge(find_single_mold_translational_casting(TRAPEZOID))
        assert results == [
            TopEdge(1, Arc(E, E)),
            TopEdge(2, Arc(Direction(-1, 2), Direction(1, 2))),
            TopEdge(3, Arc(W, W)),
        ]
        assert is_castable(TRAPEZOID)

    def test_triangle_arcs(self):
        results = by_edge(find_single_mold_translational_casting(TRIANGLE))
        assert results == [
            TopEdge(0, Arc(Direction(1, -1), Direction(-1, -1))),
            TopEdge(1, Arc(Direction(1, 1), E)),
            TopEdge(2, Arc(W, Direction(-1, 1))),
        ]

    def test_u_shape_pulls_through_bottom(self):
        results = find_single_mold_translational_casting(U_SHAPE)
        assert results == [TopEdge(0, Arc(S, S))]

    def test_collinear_edges_share_boundaries(self):
        results = by_edge(find_single_mold_translational_casting(SPLIT_BOTTOM))
        assert [(top.edge_index, top.arc) for top in results] == [
            (2, Arc(E, E)),
            (3, Arc(N, N)),
            (4, Arc(W, W)),
        ]

    def test_plus_exits_early(self, caplog):
        arr = casting_arrangement(PLUS)
        assert arr.all_covered_twice()
        with caplog.at_level('INFO', logger='moldcad.casting'):
            assert find_single_mold_translational_casting(PLUS) == []
        assert 'not castable' in caplog.text
        assert not is_castable(PLUS)

    def test_regular_pentagon_is_not_castable(self):
        assert find_single_mold_translational_casting(PENTAGON) == []

    def test_dovetail_is_not_castable(self):
        assert not is_castable(DOVETAIL)

    @pytest.mark.parametrize('name', sorted(ALL_POLYGONS))
    def test_early_exit_never_changes_result(self, name):
        polygon = ALL_POLYGONS[name]
        fast = find_single_mold_translational_casting(polygon, config=CastingConfig(early_exit=True))
        full = find_single_mold_translational_casting(polygon, config=CastingConfig(early_exit=False))
        assert fast == full
        if casting_arrangement(polygon).all_covered_twice():
            assert full == []

    @pytest.mark.parametrize('name', sorted(ALL_POLYGONS))
    def test_results_tile_depth_one(self, name):
        polygon = ALL_POLYGONS[name]
        arcs = outer_circles(polygon)
        arr = casting_arrangement(polygon, CastingConfig(early_exit=False))
        results = find_single_mold_translational_casting(polygon)
        single = [(cell, arc) for cell, arc, _ in arr.spans()
                  if cell.depth is Depth.SINGLE_BLOCKER]
        assert [(cell.owner_edge, arc) for cell, arc in single] == \
            [(top.edge_index, top.arc) for top in results]
        for d in sample_directions(arcs):
            owners = oracle_owners(arcs, d)
            hits = [cell for cell, _ in single if cell is arr.locate(d)]
            assert len(hits) == (1 if len(owners) == 1 else 0)

    def test_sink_receives_every_result(self):
        seen = []
        results = find_single_mold_translational_casting(TRAPEZOID, sink=seen.append)
        assert seen == results

    def test_numpy_polygon(self):
        results = find_single_mold_translational_casting(np.array(SQUARE, dtype=float))
        assert len(results) == 4


class TestPreconditions:

    def test_too_few_vertices(self):
        with pytest.raises(DegeneratePolygonError):
            find_single_mold_translational_casting([[0, 0], [1, 0]])

    def test_zero_length_edge(self):
        with pytest.raises(DegeneratePolygonError) as info:
            find_single_mold_translational_casting([[0, 0], [1, 0], [1, 0], [0, 1]])
        assert info.value.edge_index == 1

    def test_zero_area(self):
        with pytest.raises(DegeneratePolygonError):
            find_single_mold_translational_casting([[0, 0], [1, 0], [2, 0]])

    def test_self_intersection_only_checked_on_request(self):
        bowtie = [[0, 0], [2, 2], [2, 0], [0, 1]]
        find_single_mold_translational_casting(bowtie)
        with pytest.raises(DegeneratePolygonError):
            find_single_mold_translational_casting(bowtie, config=CastingConfig(check_simple=True))

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            is_castable([[0, 0], [0, 0], [0, 0]])

    def test_error_details_default_to_none(self):
        assert DegeneratePolygonError('flat').edge_index is None
        assert PolygonFormatError('bad point').source is None
        assert str(PolygonFormatError('bad point', 'part.yaml')) == 'part.yaml: bad point'

    def test_options_are_keyword_only(self):
        with pytest.raises(TypeError):
            find_single_mold_translational_casting(SQUARE, CastingConfig())
        assert len(find_single_mold_translational_casting(
            SQUARE, config=CastingConfig(early_exit=False))) == 4
