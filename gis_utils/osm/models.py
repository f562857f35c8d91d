"""
OSM data models

Data classes for raw OSM nodes, ways and relations as read from a file, and
for the materialized geometry built from them
"""

from types import MappingProxyType
from typing import List, Dict, Mapping, Tuple
from dataclasses import dataclass, field

from ..geometry.primitives import Point

Ring = Tuple[Point, ...]


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class OSMWay:
    """Represents an OSM way (line or polygon) as an ordered list of node ids"""
    id: int
    node_ids: List[int]
    tags: Dict[str, str] = field(default_factory=dict)
    visible: bool = True


@dataclass
class OSMMember:
    """Relation member: type is "n", "w" or "r" like osmium reports it"""
    type: str
    ref: int
    role: str = ""

    @property
    def is_way(self) -> bool:
        return self.type == "w"


@dataclass
class OSMRelation:
    """Represents an OSM relation"""
    id: int
    members: List[OSMMember]
    tags: Dict[str, str] = field(default_factory=dict)
    visible: bool = True

    def is_polygon(self, polygon_types=("multipolygon", "boundary")) -> bool:
        return self.tags.get("type") in polygon_types


@dataclass(frozen=True, eq=False)
class RichGeometry:
    """
    A way or relation with its node references resolved to points

    Rings are stored outer first, then inner, then the pieces a relation
    could not close. Tags are exposed read-only.
    """
    id: int
    tags: Mapping[str, str]
    rings: Tuple[Ring, ...]
    node_ids: Tuple[int, ...] = ()
    outer_count: int = 1
    inner_count: int = 0
    kind: str = "way"

    def __post_init__(self):
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    @property
    def outer_rings(self) -> Tuple[Ring, ...]:
        return self.rings[:self.outer_count]

    @property
    def inner_rings(self) -> Tuple[Ring, ...]:
        return self.rings[self.outer_count:self.outer_count + self.inner_count]

    @property
    def unmatched_rings(self) -> Tuple[Ring, ...]:
        """Open outer pieces, never meant to be filled"""
        return self.rings[self.outer_count + self.inner_count:]

    @property
    def is_closed(self) -> bool:
        """True when every ring ends where it starts"""
        return bool(self.rings) and all(len(r) > 2 and r[0] == r[-1] for r in self.rings)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "tags": dict(self.tags),
            "outer_count": self.outer_count,
            "inner_count": self.inner_count,
            "rings": [[[p.lon, p.lat] for p in ring] for ring in self.rings],
        }
