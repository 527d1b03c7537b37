"""Polygons with area and intersection area, used for electronic fences."""

from __future__ import annotations

import logging
from typing import Sequence

from shapely import validation
from shapely.errors import GEOSException
from shapely.geometry import Polygon as _ShapelyPolygon
from shapely.geometry.polygon import orient

log = logging.getLogger(__name__)

Vertex = tuple[float, float]


class Polygon:
    """A simple polygon given by its vertices, optionally closed."""

    def __init__(self, vertices: Sequence[Vertex] = (), id: str = "") -> None:
        self._vertices = [(float(x), float(y)) for x, y in vertices]
        self._id = id
        if 0 < len(self._vertices) < 3:
            log.warning(
                "Polygon %r created with fewer than 3 vertices; "
                "area and intersection will be zero.",
                id,
            )
        self._shape = self._build(self._vertices)

    @staticmethod
    def _build(vertices: list[Vertex]) -> _ShapelyPolygon:
        if len(vertices) < 3:
            return _ShapelyPolygon()
        ring = list(vertices)
        if ring[0] != ring[-1]:
            ring.append(ring[0])
        if len(ring) < 4:
            return _ShapelyPolygon()
        try:
            return orient(_ShapelyPolygon(ring), sign=-1.0)
        except (GEOSException, ValueError) as exc:
            log.warning("Could not normalise polygon: %s", exc)
            return _ShapelyPolygon(ring)

    @property
    def vertices(self) -> list[Vertex]:
        return list(self._vertices)

    @property
    def id(self) -> str:
        return self._id

    def area(self) -> float:
        """Area of the polygon; zero with fewer than 3 vertices."""
        if len(self._vertices) < 3:
            return 0.0
        try:
            return float(self._shape.area)
        except GEOSException as exc:
            log.error("Error calculating area for polygon %r: %s", self._id, exc)
            return 0.0

    def intersection_area(self, other: "Polygon") -> float:
        """Area shared with ``other``; zero if either is not a valid polygon."""
        if len(self._vertices) < 3 or len(other._vertices) < 3:
            return 0.0
        try:
            shared = self._shape.intersection(other._shape)
        except (GEOSException, ValueError) as exc:
            log.error(
                "Intersection error between polygon %r and %r: %s",
                self._id,
                other._id,
                exc,
            )
            return 0.0
        return float(shared.area)

    def is_valid(self) -> bool:
        """Whether the polygon is geometrically valid."""
        if len(self._vertices) < 3 or self._shape.is_empty:
            log.error("Polygon %r is not valid: too few points", self._id)
            return False
        valid = bool(self._shape.is_valid)
        if not valid:
            log.error(
                "Polygon %r is not valid: %s",
                self._id,
                validation.explain_validity(self._shape),
            )
        return valid

    def __repr__(self) -> str:
        return f"Polygon({self._vertices!r}, id={self._id!r})"