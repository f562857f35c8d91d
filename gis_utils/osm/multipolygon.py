"""
Multipolygon ring assembly

Relation members are rarely stored in drawing order: outer ways can come in
any order and any direction. The assembler stitches them end to end into
closed outer rings, collects every other member as a standalone inner ring,
and passes anything it could not close through unchanged.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from ..errors import AssemblyError
from ..geometry.primitives import Point
from .models import OSMRelation, RichGeometry, Ring


@dataclass
class AssembledRings:
    """Result of assembling one relation"""
    outer: List[Ring] = field(default_factory=list)
    inner: List[Ring] = field(default_factory=list)
    unmatched: List[Ring] = field(default_factory=list)

    @property
    def rings(self) -> List[Ring]:
        return self.outer + self.inner + self.unmatched

    @property
    def complete(self) -> bool:
        return not self.unmatched


@dataclass
class _Candidate:
    """An outer member waiting to be placed; owns a private copy of its points"""
    way_id: int
    points: List[Point]

    @property
    def head(self) -> Point:
        return self.points[0]

    @property
    def tail(self) -> Point:
        return self.points[-1]


def is_closed(points: Sequence[Point]) -> bool:
    return len(points) >= 3 and points[0] == points[-1]


def split_closed_rings(chain: Sequence[Point]) -> Tuple[List[Ring], Optional[Ring]]:
    """
    Cut a chain into the closed loops it contains

    A loop is flushed as soon as three or more accumulated points return to
    the loop's first point; the closing point also starts the next loop.
    Whatever is left open at the end is returned separately.
    """
    rings: List[Ring] = []
    current: List[Point] = []

    for point in chain:
        current.append(point)
        if is_closed(current):
            rings.append(tuple(current))
            current = [point]

    # Only the closing point of the last loop is left over
    if len(current) == 1 and rings:
        current = []

    return rings, (tuple(current) if current else None)


class RingAssembler:
    """
    Stitches a relation's outer ways into rings

    In strict mode a relation that leaves any outer way unclosed raises
    AssemblyError instead of passing the open pieces through.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def assemble(self, relation: OSMRelation, ways: Mapping[int, RichGeometry]) -> AssembledRings:
        """
        Stitch a relation's outer ways into closed rings

        Args:
            relation: Multipolygon relation whose way members are assembled
            ways: Materialized ways keyed by id; members missing here are skipped

        Returns:
            Closed outer rings, inner rings as given, and the open outer
            pieces that could not be closed

        Raises:
            AssemblyError: in strict mode, when any outer piece stays open
        """
        pool, inner = self._partition(relation, ways)
        result = AssembledRings(inner=inner)

        while pool:
            seed = pool.pop(0)
            chain, way_ids = self._grow_chain(seed, pool)
            closed, remainder = split_closed_rings(chain)
            result.outer.extend(closed)

            if remainder is not None:
                logger.debug(f"Relation {relation.id}: ways {way_ids} don't form a closed ring")
                result.unmatched.append(remainder)

        if self.strict and result.unmatched:
            raise AssemblyError(
                f"relation {relation.id} has {len(result.unmatched)} outer piece(s) that could not be closed"
            )

        return result

    def build(self, relation: OSMRelation, ways: Mapping[int, RichGeometry]) -> RichGeometry:
        """
        Assemble a relation into a RichGeometry keyed by the relation id

        Args:
            relation: Multipolygon relation
            ways: Materialized ways keyed by id

        Returns:
            RichGeometry with outer, inner, then unclosed rings, and the
            node ids of every resolvable member way in member order
        """
        assembled = self.assemble(relation, ways)

        node_ids: List[int] = []
        for member in relation.members:
            if member.is_way and member.ref in ways:
                node_ids.extend(ways[member.ref].node_ids)

        return RichGeometry(
            id=relation.id,
            tags=dict(relation.tags),
            rings=tuple(assembled.rings),
            node_ids=tuple(node_ids),
            outer_count=len(assembled.outer),
            inner_count=len(assembled.inner),
            kind="relation",
        )

    @staticmethod
    def _partition(relation: OSMRelation, ways: Mapping[int, RichGeometry]) -> Tuple[List[_Candidate], List[Ring]]:
        """Split way members into outer candidates and opaque inner rings"""
        outer: List[_Candidate] = []
        inner: List[Ring] = []

        for member in relation.members:
            if not member.is_way:
                continue

            way = ways.get(member.ref)
            if way is None or not way.rings or not way.rings[0]:
                logger.debug(f"Relation {relation.id}: member way {member.ref} has no geometry, skipping")
                continue

            if member.role == "outer":
                outer.append(_Candidate(way_id=member.ref, points=list(way.rings[0])))
            else:
                inner.append(tuple(way.rings[0]))

        return outer, inner

    @staticmethod
    def _find_extension(end: Point, pool: Sequence[_Candidate]) -> Optional[Tuple[int, bool]]:
        """
        First candidate touching `end`, and whether it must be reversed

        A candidate whose head touches is taken as stored, even if its tail
        touches too.
        """
        for position, candidate in enumerate(pool):
            if candidate.head == end:
                return position, False
            if candidate.tail == end:
                return position, True
        return None

    def _grow_chain(self, seed: _Candidate, pool: List[_Candidate]) -> Tuple[List[Point], List[int]]:
        chain = list(seed.points)
        way_ids = [seed.way_id]
        first_extension = True

        while pool and not is_closed(chain):
            match = self._find_extension(chain[-1], pool)

            # The seed's direction is arbitrary until something is attached to it
            if match is None and first_extension:
                match = self._find_extension(chain[0], pool)
                if match is not None:
                    chain.reverse()

            if match is None:
                break

            position, reverse = match
            candidate = pool.pop(position)
            points = candidate.points[::-1] if reverse else candidate.points

            # Skip the shared junction point
            chain.extend(points[1:])
            way_ids.append(candidate.way_id)
            first_extension = False

        return chain, way_ids
