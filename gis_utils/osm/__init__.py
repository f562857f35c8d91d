"""
OpenStreetMap geometry module

Separate components for:
- Models: Raw nodes, ways, relations and the resolved RichGeometry
- GraphIndex: Node id to point lookup with the dataset extent
- WayMaterializer: Way node ids to a ring of points
- RingAssembler: Multipolygon relation members to outer/inner rings
- OSMLoader: osmium reader feeding all of the above
"""

from .models import OSMNode, OSMWay, OSMMember, OSMRelation, RichGeometry
from .graph_index import GraphIndex
from .materializer import WayMaterializer
from .multipolygon import AssembledRings, RingAssembler
from .loader import OSMLoader

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMMember",
    "OSMRelation",
    "RichGeometry",
    "GraphIndex",
    "WayMaterializer",
    "AssembledRings",
    "RingAssembler",
    "OSMLoader",
]
