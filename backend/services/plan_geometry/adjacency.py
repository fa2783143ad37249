"""
Shared-wall detection between axis-aligned rooms.

Two rooms share a wall when one room's east (south) wall lies within
``tolerance`` of the other's west (north) wall and their Y (X) ranges
overlap. A wall with no recorded neighbour is exterior.

Overlapping rooms are not validated: the touch test simply does not match
them. :func:`detect_overlaps` reports such pairs and :func:`resolve_adjacency`
logs a warning when it finds any.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .constants import (
    ADJACENCY_CACHE_SIZE,
    DEFAULT_TOLERANCE,
    FINGERPRINT_PRECISION,
    OVERLAP_MIN_AREA,
)
from .primitives import Rectangle, WallSide, approx_equal, overlap_span

logger = logging.getLogger(__name__)

# Iteration order used whenever walls are listed.
WALL_ORDER = (WallSide.NORTH, WallSide.EAST, WallSide.SOUTH, WallSide.WEST)


@dataclass(frozen=True)
class SharedWall:
    """
    One shared boundary seen from ``room_index``.

    ``start``/``end`` are absolute coordinates along the wall axis (Y for
    east/west walls, X for north/south), so both rooms of a pair carry the
    same span.
    """

    room_index: int
    neighbor_index: int
    wall: WallSide
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "neighbor": self.neighbor_index,
            "wall": self.wall.value,
            "start": round(self.start, 4),
            "end": round(self.end, 4),
        }


@dataclass
class SharedWallMap:
    """Per-room shared walls, keyed by the room's index in the input list."""

    room_count: int
    walls: Dict[int, List[SharedWall]] = field(default_factory=dict)

    def shared_walls(self, index: int) -> List[SharedWall]:
        return list(self.walls.get(index, []))

    def sides(self, index: int) -> Set[WallSide]:
        """Walls of room *index* touching another room."""
        return {w.wall for w in self.walls.get(index, [])}

    def is_exterior(self, index: int, wall: WallSide) -> bool:
        return wall not in self.sides(index)

    def exterior_walls(self, index: int) -> List[WallSide]:
        shared = self.sides(index)
        return [w for w in WALL_ORDER if w not in shared]

    def neighbors(self, index: int) -> List[int]:
        seen: List[int] = []
        for w in self.walls.get(index, []):
            if w.neighbor_index not in seen:
                seen.append(w.neighbor_index)
        return seen

    def _add(self, shared: SharedWall) -> None:
        self.walls.setdefault(shared.room_index, []).append(shared)

    def to_dict(self) -> dict:
        return {
            str(i): {
                "shared": [w.to_dict() for w in self.walls.get(i, [])],
                "exterior": [w.value for w in self.exterior_walls(i)],
            }
            for i in range(self.room_count)
        }


def _record(result: SharedWallMap, i: int, j: int, wall_i: WallSide,
            span: Tuple[float, float]) -> None:
    start, end = span
    result._add(SharedWall(i, j, wall_i, start, end))
    result._add(SharedWall(j, i, wall_i.opposite, start, end))


def resolve_adjacency(rooms: Sequence, tolerance: float = DEFAULT_TOLERANCE) -> SharedWallMap:
    """
    Find every shared wall between the given rooms.

    Parameters
    ----------
    rooms : sequence
        Rooms or rectangles; anything exposing ``x, y, width, height``.
    tolerance : float
        Max gap between coincident walls, in the rooms' own unit.

    Returns
    -------
    SharedWallMap
        Shared walls per room index. Rooms without an entry have four
        exterior walls.
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")

    result = SharedWallMap(room_count=len(rooms))

    for i in range(len(rooms)):
        a = rooms[i]
        a_right, a_bottom = a.x + a.width, a.y + a.height
        for j in range(i + 1, len(rooms)):
            b = rooms[j]
            b_right, b_bottom = b.x + b.width, b.y + b.height

            y_span = overlap_span(a.y, a_bottom, b.y, b_bottom)
            if y_span is not None:
                # a east ↔ b west
                if approx_equal(a_right, b.x, tolerance):
                    _record(result, i, j, WallSide.EAST, y_span)
                # a west ↔ b east
                if approx_equal(a.x, b_right, tolerance):
                    _record(result, i, j, WallSide.WEST, y_span)

            x_span = overlap_span(a.x, a_right, b.x, b_right)
            if x_span is not None:
                # a south ↔ b north
                if approx_equal(a_bottom, b.y, tolerance):
                    _record(result, i, j, WallSide.SOUTH, x_span)
                # a north ↔ b south
                if approx_equal(a.y, b_bottom, tolerance):
                    _record(result, i, j, WallSide.NORTH, x_span)

    overlaps = detect_overlaps(rooms)
    if overlaps:
        logger.warning("Overlapping rooms ignored by adjacency: %s", overlaps)

    logger.debug(
        "Adjacency: %d rooms, %d shared walls (tolerance=%s)",
        len(rooms), sum(len(v) for v in result.walls.values()) // 2, tolerance,
    )
    return result


# ---------------------------------------------------------------------------
# Memoized variant
# ---------------------------------------------------------------------------

def geometry_fingerprint(rooms: Sequence,
                         precision: int = FINGERPRINT_PRECISION) -> Tuple[Tuple[float, ...], ...]:
    """Rounded ``(x, y, width, height)`` of every room, in order."""
    return tuple(
        (round(r.x, precision), round(r.y, precision),
         round(r.width, precision), round(r.height, precision))
        for r in rooms
    )


# (fingerprint, tolerance) -> (exact geometry, result), least recently used first
_adjacency_cache: "OrderedDict[tuple, Tuple[tuple, SharedWallMap]]" = OrderedDict()


def _exact_geometry(rooms: Sequence) -> tuple:
    return tuple((r.x, r.y, r.width, r.height) for r in rooms)


def resolve_adjacency_cached(rooms: Sequence,
                             tolerance: float = DEFAULT_TOLERANCE) -> SharedWallMap:
    """
    :func:`resolve_adjacency` memoized on the rooms' geometric fingerprint.

    The fingerprint is only the cache key: results are computed from the
    rooms themselves, and a hit whose exact geometry differs is recomputed.
    The returned map is shared between callers; do not mutate it.
    """
    key = (geometry_fingerprint(rooms), tolerance)
    exact = _exact_geometry(rooms)
    hit = _adjacency_cache.get(key)
    if hit is not None and hit[0] == exact:
        _adjacency_cache.move_to_end(key)
        return hit[1]

    result = resolve_adjacency(rooms, tolerance)
    _adjacency_cache[key] = (exact, result)
    _adjacency_cache.move_to_end(key)
    while len(_adjacency_cache) > ADJACENCY_CACHE_SIZE:
        _adjacency_cache.popitem(last=False)
    return result


def clear_adjacency_cache() -> None:
    _adjacency_cache.clear()


# ---------------------------------------------------------------------------
# Derived helpers
# ---------------------------------------------------------------------------

def implied_door_wall(room, index: int, shared: SharedWallMap) -> Optional[WallSide]:
    """
    Wall on which a fallback door is implied for a room without doors.

    South when the south wall is shared, else east when that is shared.
    """
    if room.doors:
        return None
    sides = shared.sides(index)
    if WallSide.SOUTH in sides:
        return WallSide.SOUTH
    if WallSide.EAST in sides:
        return WallSide.EAST
    return None


def detect_overlaps(rooms: Sequence,
                    min_area: float = OVERLAP_MIN_AREA) -> List[Tuple[int, int]]:
    """
    Return ``(i, j)`` pairs of rooms whose rectangles overlap.

    Rooms sharing only an edge are not overlapping.
    """
    polys = [Rectangle(r.x, r.y, r.width, r.height).polygon for r in rooms]
    overlaps = []
    for i in range(len(polys)):
        for j in range(i + 1, len(polys)):
            if polys[i].intersection(polys[j]).area > min_area:
                overlaps.append((i, j))
    return overlaps
