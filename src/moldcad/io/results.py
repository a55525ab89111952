"""Export of casting results as JSON-ready mappings and DXF drawings."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, List, Sequence

import ezdxf

from moldcad.casting import TopEdge
from moldcad.direction import Arc
from moldcad.geom import orientation, polygon_points

SCHEMA_ID = "moldcad-casting-v0.1"

POLYGON_LAYER = 'POLYGON'
TOP_EDGE_LAYER = 'TOP_EDGE'
PULL_LAYER = 'PULL_DIRECTION'


def _angle(d, units: str) -> float:
    return d.angle_degrees() if units == 'degrees' else d.angle()


def _sweep(arc: Arc, units: str) -> float:
    ## clockwise sweep from start to end
    full = 360.0 if units == 'degrees' else 2.0 * math.pi
    if arc.is_single_direction():
        return 0.0
    return (_angle(arc.start, units) - _angle(arc.end, units)) % full


def _xy(p) -> List[float]:
    return [float(p[0]), float(p[1])]


def top_edge_to_dict(top: TopEdge, pts: Sequence, units: str = 'degrees') -> Dict[str, Any]:
    n = len(pts)
    arc = top.arc
    return {
        'edge': top.edge_index,
        'from': _xy(pts[top.edge_index]),
        'to': _xy(pts[(top.edge_index + 1) % n]),
        'single_direction': arc.is_single_direction(),
        'start': {'vector': list(arc.start.unit()), 'angle': _angle(arc.start, units)},
        'end': {'vector': list(arc.end.unit()), 'angle': _angle(arc.end, units)},
        'sweep': _sweep(arc, units),
    }


def result_to_dict(polygon, results: Sequence[TopEdge], units: str = 'degrees') -> Dict[str, Any]:
    """Summarize a casting query as plain data.

    Angles are polar angles of the arc endpoints; arcs run clockwise
    from ``start`` to ``end``.
    """
    if units not in ('degrees', 'radians'):
        raise ValueError(f"units must be 'degrees' or 'radians', got {units!r}")
    pts = polygon_points(polygon)
    return {
        'schema': SCHEMA_ID,
        'castable': bool(results),
        'orientation': orientation(pts).name.lower(),
        'vertices': len(pts),
        'units': units,
        'top_edges': [top_edge_to_dict(top, pts, units) for top in results],
    }


def write_casting_dxf(polygon, results: Sequence[TopEdge], path: Path | str,
                      ray_length: float = None) -> None:
    """Draw ``polygon`` with its top edges and pull directions to DXF.

    Each top edge is redrawn on its own layer; each arc endpoint
    direction becomes a line of ``ray_length`` (default: the polygon's
    bounding box diagonal) from the edge midpoint.
    """
    pts = polygon_points(polygon)
    xy = [_xy(p) for p in pts]
    n = len(xy)
    if ray_length is None:
        xs = [p[0] for p in xy]
        ys = [p[1] for p in xy]
        ray_length = math.hypot(max(xs) - min(xs), max(ys) - min(ys)) or 1.0

    doc = ezdxf.new(dxfversion='R2010', setup=False)
    doc.layers.new(POLYGON_LAYER, dxfattribs={'color': 7})  # white
    doc.layers.new(TOP_EDGE_LAYER, dxfattribs={'color': 1})  # red
    doc.layers.new(PULL_LAYER, dxfattribs={'color': 4})  # aqua
    msp = doc.modelspace()
    msp.add_lwpolyline([tuple(p) for p in xy], close=True,
                       dxfattribs={'layer': POLYGON_LAYER})

    for top in results:
        p1 = xy[top.edge_index]
        p2 = xy[(top.edge_index + 1) % n]
        msp.add_line(tuple(p1), tuple(p2), dxfattribs={'layer': TOP_EDGE_LAYER})
        mid = ((p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0)
        directions = [top.arc.start]
        if not top.arc.is_single_direction():
            directions.append(top.arc.end)
        for d in directions:
            ux, uy = d.unit()
            msp.add_line(mid, (mid[0] + ux * ray_length, mid[1] + uy * ray_length),
                         dxfattribs={'layer': PULL_LAYER})
    doc.saveas(str(path))


__all__ = [
    'SCHEMA_ID',
    'result_to_dict',
    'top_edge_to_dict',
    'write_casting_dxf',
]
