# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("moldCAD")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from moldcad.casting import (
    CircleArrangement,
    Depth,
    TopEdge,
    find_single_mold_translational_casting,
    is_castable,
)
from moldcad.direction import Arc, Direction

__all__ = [
    "Arc",
    "CircleArrangement",
    "Depth",
    "Direction",
    "TopEdge",
    "find_single_mold_translational_casting",
    "is_castable",
]
