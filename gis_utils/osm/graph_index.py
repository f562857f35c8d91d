"""
Node lookup table

Maps node ids to points and keeps the running extent of everything inserted,
so the dataset bounding box is known without a second pass over the nodes.
"""

from typing import Dict, Optional

from ..geometry.primitives import BBox, Point


class GraphIndex:
    """node id -> Point"""

    def __init__(self):
        self._points: Dict[int, Point] = {}
        self._min_lat = float("inf")
        self._min_lon = float("inf")
        self._max_lat = float("-inf")
        self._max_lon = float("-inf")

    def insert(self, node_id: int, point: Point) -> None:
        """
        Store a node, replacing any point already held under the same id

        The extent only ever grows: a replaced point still counts towards
        bbox, so re-inserting a node never shrinks it.

        Args:
            node_id: OSM node id
            point: Node position
        """
        self._points[node_id] = point

        self._min_lat = min(self._min_lat, point.lat)
        self._max_lat = max(self._max_lat, point.lat)
        self._min_lon = min(self._min_lon, point.lon)
        self._max_lon = max(self._max_lon, point.lon)

    def lookup(self, node_id: int) -> Optional[Point]:
        return self._points.get(node_id)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._points

    def __len__(self) -> int:
        return len(self._points)

    @property
    def bbox(self) -> Optional[BBox]:
        """Extent of every point ever inserted, None while empty"""
        if not self._points:
            return None
        return BBox.from_bounds(self._min_lon, self._min_lat, self._max_lon, self._max_lat)
