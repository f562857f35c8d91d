"""
Way materializer

Turns a way's node id list into a single ring of projected points.
"""

from loguru import logger

from .graph_index import GraphIndex
from .models import OSMWay, RichGeometry


class WayMaterializer:
    """Resolves ways against a GraphIndex"""

    def __init__(self, index: GraphIndex):
        self.index = index

    def materialize(self, way: OSMWay) -> RichGeometry:
        """
        Build a one-ring RichGeometry in the way's node order

        Node ids missing from the index are skipped, so a way referencing
        nodes outside the extract comes out shorter rather than failing.

        Args:
            way: Parsed way with its node id list and tags

        Returns:
            RichGeometry of kind "way" holding a copy of the way's tags
        """
        points = []
        missing = 0

        for node_id in way.node_ids:
            point = self.index.lookup(node_id)
            if point is None:
                missing += 1
                continue
            points.append(point.with_projection())

        if missing:
            logger.debug(f"Way {way.id}: skipped {missing} unresolved node(s)")

        return RichGeometry(
            id=way.id,
            tags=dict(way.tags),
            rings=(tuple(points),),
            node_ids=tuple(way.node_ids),
            outer_count=1,
            kind="way",
        )
