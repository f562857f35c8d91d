"""
Bounding box clipper

Not a polygon clipper: vertices outside the box are moved onto its edge and
no new vertices are inserted, so geometry crossing the boundary gets
distorted. Each ring is also classified as intersecting the box (at least one
vertex inside) or disjoint.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from loguru import logger

from ..errors import UnsupportedShapeError
from .primitives import BBox, Point
from .shapes import LineShape, PolygonShape, Shape


@dataclass(frozen=True)
class ClipResult:
    """Clamped points and whether any input vertex was inside the box"""
    points: Tuple[Point, ...]
    intersects: bool


@dataclass(frozen=True)
class ClippedShape:
    shape: Shape
    intersects: bool


def clip_ring(points: Iterable[Point], bbox: BBox) -> ClipResult:
    """Clamp every point into the box and classify the ring"""
    intersects = False
    clamped = []

    for point in points:
        if bbox.contains_point(point):
            intersects = True
        clamped.append(bbox.clamp(point))

    return ClipResult(points=tuple(clamped), intersects=intersects)


def clip_rings(rings: Sequence[Sequence[Point]], bbox: BBox) -> Tuple[Tuple[Tuple[Point, ...], ...], bool]:
    """Clamp several rings; they intersect the box if any one of them does"""
    results = [clip_ring(ring, bbox) for ring in rings]
    return tuple(r.points for r in results), any(r.intersects for r in results)


def clip_shape(shape: Shape, bbox: BBox) -> ClippedShape:
    """
    Clamp a polygon or line shape into the box

    Args:
        shape: PolygonShape or LineShape to clip
        bbox: Box every point is clamped into

    Returns:
        ClippedShape with the clamped copy and whether any original point
        lay inside the box

    Raises:
        UnsupportedShapeError: for point shapes or anything that isn't one
            of the shape variants
    """
    if isinstance(shape, PolygonShape):
        rings, intersects = clip_rings(shape.rings, bbox)
        return ClippedShape(PolygonShape(rings=rings, index=shape.index), intersects)

    if isinstance(shape, LineShape):
        parts, intersects = clip_rings(shape.parts, bbox)
        return ClippedShape(LineShape(parts=parts, index=shape.index), intersects)

    kind = getattr(shape, "kind", type(shape).__name__)
    raise UnsupportedShapeError(f"cannot clip shape of kind '{kind}'")


def clip_shapes(shapes: Iterable[Shape], bbox: BBox) -> List[Shape]:
    """
    Clip shapes and keep only those touching the box

    Args:
        shapes: Polygon and line shapes
        bbox: Clipping box

    Returns:
        Clamped copies of the shapes with at least one point inside the box
    """
    kept = []
    total = 0

    for shape in shapes:
        total += 1
        clipped = clip_shape(shape, bbox)
        if clipped.intersects:
            kept.append(clipped.shape)

    logger.debug(f"Clipped {total} shapes, {len(kept)} intersect {bbox.bounds}")
    return kept
