"""
Point and bounding box primitives

Coordinates are WGS84 degrees. A Point may carry its projected (Web Mercator)
x/y so renderers don't have to project the same vertex twice.
"""

import json
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

import mercantile
from shapely.geometry import Polygon, mapping

from ..errors import BBoxError
from .projection import to_projected


@dataclass(frozen=True, eq=False)
class Point:
    """A lat/lon pair with an optional projected x/y cache"""
    lat: float
    lon: float
    x: Optional[float] = None
    y: Optional[float] = None

    # Ring closure and member stitching compare locations only
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.lat == other.lat and self.lon == other.lon

    def __hash__(self) -> int:
        return hash((self.lat, self.lon))

    @classmethod
    def projected(cls, lat: float, lon: float) -> "Point":
        """Build a point with its projected coordinates filled in"""
        x, y = to_projected(lon, lat)
        return cls(lat=lat, lon=lon, x=x, y=y)

    @property
    def has_projection(self) -> bool:
        return self.x is not None and self.y is not None

    def with_projection(self) -> "Point":
        if self.has_projection:
            return self
        return Point.projected(self.lat, self.lon)


@dataclass(frozen=True)
class BBox:
    """
    Axis-aligned rectangle in lon/lat

    sw holds the minimum lon/lat, ne the maximum. Construction fails if the
    corners are inverted or a coordinate is NaN or infinite.
    """
    sw: Point
    ne: Point

    def __post_init__(self):
        if not all(math.isfinite(c) for c in (self.sw.lon, self.sw.lat, self.ne.lon, self.ne.lat)):
            raise BBoxError(f"bounding box coordinates must be finite numbers, got {self.bounds}")
        if not (self.ne.lon >= self.sw.lon and self.ne.lat >= self.sw.lat):
            raise BBoxError("the ordering of the bounding box coordinates is invalid")

    @classmethod
    def from_bounds(cls, west: float, south: float, east: float, north: float) -> "BBox":
        return cls(sw=Point(lat=south, lon=west), ne=Point(lat=north, lon=east))

    @property
    def bounds(self):
        """(west, south, east, north)"""
        return (self.sw.lon, self.sw.lat, self.ne.lon, self.ne.lat)

    def contains(self, lon: float, lat: float) -> bool:
        return self.sw.lon <= lon <= self.ne.lon and self.sw.lat <= lat <= self.ne.lat

    def contains_point(self, point: Point) -> bool:
        return self.contains(point.lon, point.lat)

    def clamp(self, point: Point) -> Point:
        """Move a point onto the nearest edge of the box if it lies outside"""
        lon = min(max(point.lon, self.sw.lon), self.ne.lon)
        lat = min(max(point.lat, self.sw.lat), self.ne.lat)

        if lon == point.lon and lat == point.lat:
            return point

        clamped = replace(point, lat=lat, lon=lon, x=None, y=None)
        return clamped.with_projection() if point.has_projection else clamped

    def to_polygon(self) -> Polygon:
        return Polygon([
            (self.sw.lon, self.sw.lat),
            (self.sw.lon, self.ne.lat),
            (self.ne.lon, self.ne.lat),
            (self.ne.lon, self.sw.lat),
            (self.sw.lon, self.sw.lat),
        ])

    def to_geojson(self) -> Dict[str, Any]:
        """GeoJSON Feature with the box as its polygon geometry"""
        return {
            "type": "Feature",
            "geometry": mapping(self.to_polygon()),
            "properties": {},
        }

    def to_geojson_str(self) -> str:
        return json.dumps(self.to_geojson())


def parse_bbox(bbox_str: str) -> BBox:
    """
    Parse a "NE lon,NE lat,SW lon,SW lat" string

    Args:
        bbox_str: Comma separated coordinates; values past the fourth are ignored

    Returns:
        BBox spanning the two corners

    Raises:
        BBoxError: fewer than four coordinates, a coordinate that isn't a
            finite number, or NE lying south/west of SW
    """
    parts = (bbox_str or "").split(",")

    if len(parts) < 4:
        raise BBoxError("invalid bounding box")

    coords = []
    for part in parts:
        try:
            coords.append(float(part.strip()))
        except ValueError as e:
            raise BBoxError(f"invalid bounding box coordinate '{part.strip()}'") from e

    ne_lon, ne_lat, sw_lon, sw_lat = coords[:4]
    return BBox(sw=Point(lat=sw_lat, lon=sw_lon), ne=Point(lat=ne_lat, lon=ne_lon))


def tile_bbox(x: int, y: int, z: int) -> BBox:
    """Bounding box of a slippy map tile"""
    bounds = mercantile.bounds(x, y, z)
    return BBox.from_bounds(bounds.west, bounds.south, bounds.east, bounds.north)

