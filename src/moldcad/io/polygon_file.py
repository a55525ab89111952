"""Polygon import from YAML/JSON documents and DXF drawings."""

from __future__ import annotations

from fractions import Fraction
from pathlib import Path
from typing import Any, List, Optional

import ezdxf
import yaml

from moldcad.errors import PolygonFormatError
from moldcad.geom import isgoodnum, polygon_points

YAML_SUFFIXES = ('.yaml', '.yml', '.json')
DXF_SUFFIXES = ('.dxf',)


def _number(value: Any, source: str):
    if isgoodnum(value):
        return value
    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except ValueError as exc:
            raise PolygonFormatError(f'bad coordinate {value!r}', source) from exc
    raise PolygonFormatError(f'bad coordinate {value!r}', source)


def polygon_from_data(data: Any, source: str = '<data>') -> List[list]:
    """Turn a parsed document into a polygon point list.

    ``data`` is either a list of ``[x, y]`` pairs or a mapping holding
    such a list under ``points`` (or ``polygon``).  Coordinates may be
    numbers or rational strings such as ``"1/3"``.
    """
    if isinstance(data, dict):
        raw = data.get('points', data.get('polygon'))
        if raw is None:
            raise PolygonFormatError("mapping has no 'points' entry", source)
    else:
        raw = data
    if not isinstance(raw, (list, tuple)):
        raise PolygonFormatError('expected a list of points', source)

    pts = []
    for entry in raw:
        if not isinstance(entry, (list, tuple)) or len(entry) < 2:
            raise PolygonFormatError(f'bad point {entry!r}', source)
        pts.append([_number(entry[0], source), _number(entry[1], source)])
    try:
        return polygon_points(pts)
    except ValueError as exc:
        raise PolygonFormatError(str(exc), source) from exc


def read_polygon_yaml(path: Path | str) -> List[list]:
    """read a polygon from a YAML or JSON document"""
    path = Path(path)
    with path.open('r', encoding='utf-8') as fp:
        try:
            data = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise PolygonFormatError(f'unreadable document: {exc}', str(path)) from exc
    return polygon_from_data(data, str(path))


def read_polygon_dxf(path: Path | str, layer: Optional[str] = None) -> List[list]:
    """Read the first ``LWPOLYLINE`` or ``POLYLINE`` from a DXF modelspace.

    ``layer`` restricts the search to one layer.  Polylines with arc
    segments (non-zero bulge) are rejected.
    """
    path = Path(path)
    try:
        doc = ezdxf.readfile(str(path))
    except ezdxf.DXFStructureError as exc:
        raise PolygonFormatError(f'invalid DXF: {exc}', str(path)) from exc

    query = 'LWPOLYLINE POLYLINE'
    if layer is not None:
        query += f'[layer=="{layer}"]'
    for entity in doc.modelspace().query(query):
        if entity.dxftype() == 'LWPOLYLINE':
            pts = []
            for x, y, bulge in entity.get_points('xyb'):
                if bulge:
                    raise PolygonFormatError('polyline has arc segments', str(path))
                pts.append([x, y])
        else:
            pts = [[v.x, v.y] for v in entity.points()]
        return polygon_from_data(pts, str(path))

    where = f' on layer {layer!r}' if layer is not None else ''
    raise PolygonFormatError(f'no polyline found{where}', str(path))


def load_polygon(path: Path | str, layer: Optional[str] = None) -> List[list]:
    """read a polygon, choosing the reader from the file suffix"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'polygon file not found: {path}')
    suffix = path.suffix.lower()
    if suffix in DXF_SUFFIXES:
        return read_polygon_dxf(path, layer)
    if suffix in YAML_SUFFIXES:
        return read_polygon_yaml(path)
    raise PolygonFormatError(f'unsupported file type {suffix!r}', str(path))


__all__ = [
    'load_polygon',
    'polygon_from_data',
    'read_polygon_dxf',
    'read_polygon_yaml',
]
