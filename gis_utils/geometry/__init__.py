"""
Geometry primitives and the bounding box clipper
"""

from .primitives import Point, BBox, parse_bbox, tile_bbox
from .shapes import PolygonShape, LineShape, PointShape, Shape
from .clipper import ClipResult, ClippedShape, clip_ring, clip_shape, clip_shapes

__all__ = [
    "Point",
    "BBox",
    "parse_bbox",
    "tile_bbox",
    "PolygonShape",
    "LineShape",
    "PointShape",
    "Shape",
    "ClipResult",
    "ClippedShape",
    "clip_ring",
    "clip_shape",
    "clip_shapes",
]
