"""
Shape records read from a shapefile

A closed set of variants: polygons (one or more rings), lines (one or more
parts) and points. Anything reading a shapefile converts its geometries into
one of these before the clipper sees them.
"""

from dataclasses import dataclass
from typing import Literal, Tuple, Union

from .primitives import Point

Ring = Tuple[Point, ...]


@dataclass(frozen=True)
class PolygonShape:
    rings: Tuple[Ring, ...]
    index: int = 0
    kind: Literal["polygon"] = "polygon"

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(p for ring in self.rings for p in ring)


@dataclass(frozen=True)
class LineShape:
    parts: Tuple[Ring, ...]
    index: int = 0
    kind: Literal["line"] = "line"

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(p for part in self.parts for p in part)


@dataclass(frozen=True)
class PointShape:
    point: Point
    index: int = 0
    kind: Literal["point"] = "point"

    @property
    def points(self) -> Tuple[Point, ...]:
        return (self.point,)


Shape = Union[PolygonShape, LineShape, PointShape]
