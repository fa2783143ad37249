"""Building envelope: the bounding box of every room on a floor."""

from dataclasses import dataclass
from typing import Optional, Sequence

from shapely.geometry import Polygon, box

from .primitives import Point


@dataclass(frozen=True)
class Envelope:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def polygon(self) -> Polygon:
        return box(self.min_x, self.min_y, self.max_x, self.max_y)

    def contains(self, room) -> bool:
        return (
            room.x >= self.min_x and room.y >= self.min_y
            and room.x + room.width <= self.max_x
            and room.y + room.height <= self.max_y
        )

    def to_dict(self) -> dict:
        return {
            "minX": round(self.min_x, 4),
            "minY": round(self.min_y, 4),
            "maxX": round(self.max_x, 4),
            "maxY": round(self.max_y, 4),
            "width": round(self.width, 4),
            "height": round(self.height, 4),
        }


def envelope(rooms: Sequence) -> Optional[Envelope]:
    """
    Bounding box of all rooms, or ``None`` for an empty floor.

    Cheap enough to call after every edit; callers should not cache it.
    """
    if not rooms:
        return None
    return Envelope(
        min_x=min(r.x for r in rooms),
        min_y=min(r.y for r in rooms),
        max_x=max(r.x + r.width for r in rooms),
        max_y=max(r.y + r.height for r in rooms),
    )
