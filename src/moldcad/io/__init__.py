"""I/O utilities for moldCAD."""

from .polygon_file import load_polygon, polygon_from_data, read_polygon_dxf, read_polygon_yaml
from .results import result_to_dict, write_casting_dxf

__all__ = [
    'load_polygon',
    'polygon_from_data',
    'read_polygon_dxf',
    'read_polygon_yaml',
    'result_to_dict',
    'write_casting_dxf',
]
