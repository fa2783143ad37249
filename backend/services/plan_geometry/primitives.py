"""
Geometry primitives for axis-aligned floor plans.

Plan coordinates: ``x`` grows east, ``y`` grows south (screen convention),
so a rectangle's ``(x, y)`` is its top-left / north-west corner.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from shapely.geometry import Polygon, box


class WallSide(str, Enum):
    """One of the four walls of an axis-aligned room."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def is_horizontal(self) -> bool:
        """North/south walls run along the X axis."""
        return self in (WallSide.NORTH, WallSide.SOUTH)

    @property
    def opposite(self) -> "WallSide":
        return _OPPOSITE[self]

    @classmethod
    def parse(cls, value) -> Optional["WallSide"]:
        """Accept ``"north"``, ``"N"``, ``WallSide.NORTH``; ``None`` if unknown."""
        if isinstance(value, WallSide):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for side in cls:
            if key == side.value or key == side.value[0]:
                return side
        return None


_OPPOSITE = {
    WallSide.NORTH: WallSide.SOUTH,
    WallSide.SOUTH: WallSide.NORTH,
    WallSide.EAST: WallSide.WEST,
    WallSide.WEST: WallSide.EAST,
}


class Point(NamedTuple):
    x: float
    y: float

    def to_list(self, ndigits: int = 4) -> list:
        return [round(self.x, ndigits), round(self.y, ndigits)]


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle; ``width`` along +X, ``height`` along +Y."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def polygon(self) -> Polygon:
        """Rectangle as a Shapely polygon."""
        return box(self.x, self.y, self.right, self.bottom)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Clockwise on screen, starting at the north-west corner."""
        return (
            Point(self.x, self.y),
            Point(self.right, self.y),
            Point(self.right, self.bottom),
            Point(self.x, self.bottom),
        )

    def wall_length(self, side: WallSide) -> float:
        return self.width if side.is_horizontal else self.height

    def wall_segment(self, side: WallSide) -> Tuple[Point, Point]:
        """
        Endpoints of one wall, ordered from the wall's start corner.

        Horizontal walls start at their west end, vertical walls at their
        north end, so offsets along any wall grow with +X or +Y.
        """
        if side is WallSide.NORTH:
            return Point(self.x, self.y), Point(self.right, self.y)
        if side is WallSide.SOUTH:
            return Point(self.x, self.bottom), Point(self.right, self.bottom)
        if side is WallSide.WEST:
            return Point(self.x, self.y), Point(self.x, self.bottom)
        return Point(self.right, self.y), Point(self.right, self.bottom)


# ---------------------------------------------------------------------------
# Tolerance helpers
# ---------------------------------------------------------------------------

def approx_equal(a: float, b: float, tolerance: float) -> bool:
    """True when ``a`` and ``b`` differ by strictly less than ``tolerance``."""
    return abs(a - b) < tolerance


def overlap_span(a_start: float, a_end: float,
                 b_start: float, b_end: float) -> Optional[Tuple[float, float]]:
    """
    Overlap of two 1-D ranges, or ``None`` when they only touch or are apart.
    """
    start = max(a_start, b_start)
    end = min(a_end, b_end)
    if end > start:
        return start, end
    return None


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
