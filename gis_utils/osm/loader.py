"""
OSM file loader

Reads a PBF (or OSM XML) file with osmium in a single pass. Nodes go straight
into the GraphIndex; ways and relations are buffered and only resolved once
the whole file has been read, since they may reference nodes that appear
later in the stream.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional, Union

import osmium
from loguru import logger

from ..config import GisConfig, get_config
from ..errors import AssemblyError
from ..geometry.primitives import BBox, Point
from .graph_index import GraphIndex
from .materializer import WayMaterializer
from .models import OSMMember, OSMNode, OSMRelation, OSMWay, RichGeometry
from .multipolygon import RingAssembler


class _OSMHandler(osmium.SimpleHandler):
    """Copies osmium objects into plain models; osmium buffers are only valid inside callbacks"""

    def __init__(self, loader: "OSMLoader"):
        super().__init__()
        self.loader = loader

    def node(self, n):
        if not n.location.valid():
            return
        self.loader.add_node(OSMNode(
            id=n.id,
            lat=n.location.lat,
            lon=n.location.lon,
            tags={t.k: t.v for t in n.tags},
        ))

    def way(self, w):
        self.loader.add_way(OSMWay(
            id=w.id,
            node_ids=[n.ref for n in w.nodes],
            tags={t.k: t.v for t in w.tags},
            visible=w.visible,
        ))

    def relation(self, r):
        self.loader.add_relation(OSMRelation(
            id=r.id,
            members=[OSMMember(type=m.type, ref=m.ref, role=m.role) for m in r.members],
            tags={t.k: t.v for t in r.tags},
            visible=r.visible,
        ))


class OSMLoader:
    """
    Builds renderable geometry from an OSM extract

    Usage:
        loader = OSMLoader()
        loader.load("area.osm.pbf")
        loader.ways, loader.relations, loader.bbox
    """

    def __init__(self, config: Optional[GisConfig] = None):
        self.config = config or get_config()
        self.index = GraphIndex()
        self.materializer = WayMaterializer(self.index)
        self.assembler = RingAssembler(strict=self.config.strict_multipolygons)

        self._pending_ways: List[OSMWay] = []
        self._pending_relations: List[OSMRelation] = []
        self._ways: List[RichGeometry] = []
        self._relations: List[RichGeometry] = []

    def load(self, path: Union[str, Path]) -> None:
        """
        Read an OSM file and resolve everything in it

        Args:
            path: .osm, .osm.pbf or any other format pyosmium reads
        """
        logger.info(f"Loading OSM data from {path}")
        handler = _OSMHandler(self)
        handler.apply_file(str(path))
        self.finalize()

    def add_node(self, node: OSMNode) -> None:
        self.index.insert(node.id, Point(lat=node.lat, lon=node.lon))

    def add_way(self, way: OSMWay) -> None:
        self._pending_ways.append(way)

    def add_relation(self, relation: OSMRelation) -> None:
        self._pending_relations.append(relation)

    def finalize(self) -> None:
        """Materialize buffered ways, then assemble polygon relations from them"""
        way_map: Dict[int, RichGeometry] = {}

        for way in self._pending_ways:
            if self.config.verbose:
                logger.debug(json.dumps(asdict(way)))
            rich = self.materializer.materialize(way)
            way_map[way.id] = rich
            self._ways.append(rich)

        skipped = 0
        for relation in self._pending_relations:
            if not relation.visible or not relation.is_polygon(self.config.polygon_relation_types):
                continue

            if self.config.verbose:
                logger.debug(json.dumps(asdict(relation)))

            try:
                self._relations.append(self.assembler.build(relation, way_map))
            except AssemblyError as e:
                skipped += 1
                logger.warning(f"Skipping relation {relation.id}: {e}")

        self._pending_ways = []
        self._pending_relations = []

        logger.info(
            f"Loaded {len(self.index)} nodes, {len(self._ways)} ways, "
            f"{len(self._relations)} polygon relations"
            + (f" ({skipped} skipped)" if skipped else "")
        )

    @property
    def ways(self) -> List[RichGeometry]:
        return self._ways

    @property
    def relations(self) -> List[RichGeometry]:
        return self._relations

    @property
    def features(self) -> List[RichGeometry]:
        """Ways followed by relations"""
        return self._ways + self._relations

    @property
    def bbox(self) -> Optional[BBox]:
        return self.index.bbox
