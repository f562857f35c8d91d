"""
Tests for the bounding box clipper
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gis_utils.errors import UnsupportedShapeError
from gis_utils.geometry import (
    LineShape,
    Point,
    PointShape,
    PolygonShape,
    clip_ring,
    clip_shape,
    clip_shapes,
    parse_bbox,
)


def square(lon, lat, size=1.0):
    return (
        Point(lat=lat, lon=lon),
        Point(lat=lat, lon=lon + size),
        Point(lat=lat + size, lon=lon + size),
        Point(lat=lat + size, lon=lon),
        Point(lat=lat, lon=lon),
    )


@pytest.fixture
def bbox():
    return parse_bbox("10,50,5,45")


def test_polygon_with_inside_vertex_intersects(bbox):
    result = clip_ring(square(7, 48), bbox)

    assert result.intersects
    assert result.points == square(7, 48)


def test_polygon_outside_is_disjoint_and_clamped(bbox):
    result = clip_ring(square(20, 60), bbox)

    assert not result.intersects
    assert all((p.lon, p.lat) == (10, 50) for p in result.points)


def test_crossing_polygon_is_distorted_onto_the_edge(bbox):
    result = clip_ring(square(9, 49, size=2), bbox)

    assert result.intersects
    assert [(p.lon, p.lat) for p in result.points] == [
        (9, 49), (10, 49), (10, 50), (9, 50), (9, 49)
    ]


def test_clipping_is_idempotent(bbox):
    ring = square(3, 44, size=10) + (Point(lat=70, lon=-20),)

    once = clip_ring(ring, bbox)
    twice = clip_ring(once.points, bbox)

    assert twice.points == once.points
    assert all(bbox.contains_point(p) for p in once.points)


def test_clip_polygon_shape_keeps_rings_and_index(bbox):
    shape = PolygonShape(rings=(square(4, 44, size=8), square(7, 48)), index=3)

    clipped = clip_shape(shape, bbox)

    assert clipped.intersects
    assert isinstance(clipped.shape, PolygonShape)
    assert clipped.shape.index == 3
    assert len(clipped.shape.rings) == 2
    assert clipped.shape.rings[1] == square(7, 48)


def test_polygon_intersects_if_any_ring_does(bbox):
    shape = PolygonShape(rings=(square(20, 60), square(7, 48)))

    assert clip_shape(shape, bbox).intersects


def test_clip_line_shape(bbox):
    line = LineShape(parts=((Point(lat=48, lon=0), Point(lat=48, lon=7)),), index=1)

    clipped = clip_shape(line, bbox)

    assert clipped.intersects
    assert clipped.shape.kind == "line"
    assert [(p.lon, p.lat) for p in clipped.shape.parts[0]] == [(5, 48), (7, 48)]


def test_point_shapes_are_unsupported(bbox):
    with pytest.raises(UnsupportedShapeError, match="point"):
        clip_shape(PointShape(point=Point(lat=48, lon=7)), bbox)


def test_unknown_objects_are_unsupported(bbox):
    with pytest.raises(TypeError):
        clip_shape(object(), bbox)


def test_clip_shapes_keeps_only_intersecting(bbox):
    shapes = [
        PolygonShape(rings=(square(7, 48),), index=0),
        PolygonShape(rings=(square(20, 60),), index=1),
        PolygonShape(rings=(square(4.5, 44.5),), index=2),
    ]

    kept = clip_shapes(shapes, bbox)

    assert [s.index for s in kept] == [0, 2]
