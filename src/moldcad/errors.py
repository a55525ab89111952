"""
moldCAD exceptions.

All library errors derive from ``ValueError``, so callers that already
guard geometry calls with ``except ValueError`` keep working.  A polygon
that cannot be cast is not an error: the casting query simply returns
no results.
"""

from typing import Optional


class CastingError(ValueError):
    """Base class for moldCAD errors."""


class DegeneratePolygonError(CastingError):
    """Polygon violates a precondition of the casting query.

    Raised for fewer than three vertices, zero-length edges, zero
    signed area, and (when requested) self-intersection.
    """

    def __init__(self, message: str, edge_index: Optional[int] = None):
        self.edge_index = edge_index
        super().__init__(message)


class PolygonFormatError(CastingError):
    """Input document could not be turned into a polygon."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message if source is None else f"{source}: {message}")
