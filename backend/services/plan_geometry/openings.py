"""
Door and window placement.

Turns an opening's wall + normalized centre position + width into absolute
plan coordinates, plus the swing arc for doors and the pane frame for
windows.

Angles here are plan angles: degrees from +X, growing clockwise on screen
(plan Y points south). The DXF writer converts them to CAD angles.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .adjacency import SharedWallMap
from .constants import (
    POSITION_MAX,
    POSITION_MIN,
    UNDIVIDED_WINDOW_TYPES,
    WINDOW_FRAME_OFFSET,
)
from .primitives import Point, WallSide, clamp
from .room_model import Door, Opening, Room, SwingDirection, SwingSide, Window

logger = logging.getLogger(__name__)


class Segment(NamedTuple):
    start: Point
    end: Point

    def to_list(self) -> list:
        return [self.start.to_list(), self.end.to_list()]


class SwingEntry(NamedTuple):
    hinge_at_start: bool   # hinge at the opening's west/north end
    start_angle: float     # arc sweeps clockwise from here by 90°
    leaf_angle: float      # direction of the open leaf from the hinge


# (wall, hinge side, direction) -> swing. Left hinge = opening start end.
SWING_TABLE: Dict[Tuple[WallSide, SwingSide, SwingDirection], SwingEntry] = {
    (WallSide.NORTH, SwingSide.LEFT, SwingDirection.INWARD): SwingEntry(True, 0, 90),
    (WallSide.NORTH, SwingSide.RIGHT, SwingDirection.INWARD): SwingEntry(False, 90, 90),
    (WallSide.NORTH, SwingSide.LEFT, SwingDirection.OUTWARD): SwingEntry(True, 270, 270),
    (WallSide.NORTH, SwingSide.RIGHT, SwingDirection.OUTWARD): SwingEntry(False, 180, 270),

    (WallSide.SOUTH, SwingSide.LEFT, SwingDirection.INWARD): SwingEntry(True, 270, 270),
    (WallSide.SOUTH, SwingSide.RIGHT, SwingDirection.INWARD): SwingEntry(False, 180, 270),
    (WallSide.SOUTH, SwingSide.LEFT, SwingDirection.OUTWARD): SwingEntry(True, 0, 90),
    (WallSide.SOUTH, SwingSide.RIGHT, SwingDirection.OUTWARD): SwingEntry(False, 90, 90),

    (WallSide.EAST, SwingSide.LEFT, SwingDirection.INWARD): SwingEntry(True, 90, 180),
    (WallSide.EAST, SwingSide.RIGHT, SwingDirection.INWARD): SwingEntry(False, 180, 180),
    (WallSide.EAST, SwingSide.LEFT, SwingDirection.OUTWARD): SwingEntry(True, 0, 0),
    (WallSide.EAST, SwingSide.RIGHT, SwingDirection.OUTWARD): SwingEntry(False, 270, 0),

    (WallSide.WEST, SwingSide.LEFT, SwingDirection.INWARD): SwingEntry(True, 0, 0),
    (WallSide.WEST, SwingSide.RIGHT, SwingDirection.INWARD): SwingEntry(False, 270, 0),
    (WallSide.WEST, SwingSide.LEFT, SwingDirection.OUTWARD): SwingEntry(True, 90, 180),
    (WallSide.WEST, SwingSide.RIGHT, SwingDirection.OUTWARD): SwingEntry(False, 180, 180),
}

# Unit vectors for the four axis angles, in plan coordinates.
_AXIS_UNIT = {0: (1.0, 0.0), 90: (0.0, 1.0), 180: (-1.0, 0.0), 270: (0.0, -1.0)}


@dataclass(frozen=True)
class OpeningPosition:
    start: Point
    end: Point
    wall_is_horizontal: bool
    offset: float   # centre, absolute distance from the wall start corner
    width: float


@dataclass(frozen=True)
class SwingArc:
    center: Point          # hinge
    radius: float
    start_angle: float
    end_angle: float
    leaf_end: Point        # free end of the open leaf
    hinge_side: SwingSide

    def to_dict(self) -> dict:
        return {
            "center": self.center.to_list(),
            "radius": round(self.radius, 4),
            "start_angle": self.start_angle,
            "end_angle": self.end_angle,
            "leaf_end": self.leaf_end.to_list(),
            "hinge_side": self.hinge_side.value,
        }


@dataclass(frozen=True)
class WindowFrame:
    panes: Tuple[Segment, Segment]
    mullions: Tuple[Segment, ...] = ()

    def to_dict(self) -> dict:
        return {
            "panes": [p.to_list() for p in self.panes],
            "mullions": [m.to_list() for m in self.mullions],
        }


@dataclass(frozen=True)
class OpeningGeometry:
    kind: str
    wall: WallSide
    start: Point
    end: Point
    wall_is_horizontal: bool
    width: float
    arc: Optional[SwingArc] = None
    frame: Optional[WindowFrame] = None
    opening_id: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        data = {
            "id": self.opening_id,
            "kind": self.kind,
            "wall": self.wall.value,
            "start": self.start.to_list(),
            "end": self.end.to_list(),
            "wall_is_horizontal": self.wall_is_horizontal,
            "width": round(self.width, 4),
        }
        if self.arc is not None:
            data["arc"] = self.arc.to_dict()
        if self.frame is not None:
            data["frame"] = self.frame.to_dict()
        return data


# ===========================================================================
# Placement
# ===========================================================================

def resolve_position(room: Room, opening: Opening) -> OpeningPosition:
    """
    Place an opening on its wall in absolute plan coordinates.

    The opening is centred on ``position * wall_length``. Out-of-range input
    is clamped and logged: the position to [0.1, 0.9], the width to the wall
    length, and the opening is shifted back onto the wall if it would hang
    past a corner.
    """
    wall = opening.wall
    wall_length = room.rect.wall_length(wall)

    position = clamp(opening.position, POSITION_MIN, POSITION_MAX)
    if position != opening.position:
        logger.warning(
            "%s on %s wall of %r: position %.3f clamped to %.3f",
            opening.kind, wall.value, room.name, opening.position, position,
        )

    width = clamp(opening.width, 0.0, wall_length)
    if width != opening.width:
        logger.warning(
            "%s on %s wall of %r: width %.2f clamped to %.2f",
            opening.kind, wall.value, room.name, opening.width, width,
        )

    offset = position * wall_length
    anchor = offset - width / 2
    fitted = clamp(anchor, 0.0, wall_length - width)
    if abs(fitted - anchor) > 1e-9:
        logger.warning(
            "%s on %s wall of %r shifted %.2f to stay off the corner",
            opening.kind, wall.value, room.name, fitted - anchor,
        )
        anchor = fitted
        offset = anchor + width / 2

    origin, _ = room.rect.wall_segment(wall)
    if wall.is_horizontal:
        start = Point(origin.x + anchor, origin.y)
        end = Point(origin.x + anchor + width, origin.y)
    else:
        start = Point(origin.x, origin.y + anchor)
        end = Point(origin.x, origin.y + anchor + width)

    return OpeningPosition(start, end, wall.is_horizontal, offset, width)


def _step(point: Point, angle: float, distance: float) -> Point:
    ux, uy = _AXIS_UNIT[int(angle) % 360]
    return Point(point.x + ux * distance, point.y + uy * distance)


def swing_arc(placed: OpeningPosition, door: Door) -> SwingArc:
    """Quarter-circle swing for a placed door, read from :data:`SWING_TABLE`."""
    entry = SWING_TABLE[(door.wall, door.swing_side, door.swing_direction)]
    hinge = placed.start if entry.hinge_at_start else placed.end
    return SwingArc(
        center=hinge,
        radius=placed.width,
        start_angle=entry.start_angle,
        end_angle=entry.start_angle + 90,
        leaf_end=_step(hinge, entry.leaf_angle, placed.width),
        hinge_side=door.swing_side,
    )


def mullion_fractions(window_type: str) -> Tuple[float, ...]:
    if window_type in UNDIVIDED_WINDOW_TYPES:
        return ()
    if window_type == "bay":
        return (1 / 3, 2 / 3)
    return (0.5,)


def window_frame(placed: OpeningPosition, window_type: str,
                 gap: float = WINDOW_FRAME_OFFSET) -> WindowFrame:
    """Two frame lines ``gap`` either side of the wall, plus mullion ticks."""
    s, e = placed.start, placed.end
    if placed.wall_is_horizontal:
        panes = (
            Segment(Point(s.x, s.y - gap), Point(e.x, e.y - gap)),
            Segment(Point(s.x, s.y + gap), Point(e.x, e.y + gap)),
        )
        mullions = tuple(
            Segment(Point(s.x + f * placed.width, s.y - gap),
                    Point(s.x + f * placed.width, s.y + gap))
            for f in mullion_fractions(window_type)
        )
    else:
        panes = (
            Segment(Point(s.x - gap, s.y), Point(e.x - gap, e.y)),
            Segment(Point(s.x + gap, s.y), Point(e.x + gap, e.y)),
        )
        mullions = tuple(
            Segment(Point(s.x - gap, s.y + f * placed.width),
                    Point(s.x + gap, s.y + f * placed.width))
            for f in mullion_fractions(window_type)
        )
    return WindowFrame(panes=panes, mullions=mullions)


def resolve_door(room: Room, door: Door) -> OpeningGeometry:
    placed = resolve_position(room, door)
    return OpeningGeometry(
        kind="door",
        wall=door.wall,
        start=placed.start,
        end=placed.end,
        wall_is_horizontal=placed.wall_is_horizontal,
        width=placed.width,
        arc=swing_arc(placed, door),
        opening_id=door.opening_id,
    )


def resolve_window(room: Room, window: Window,
                   is_exterior: bool = True) -> Optional[OpeningGeometry]:
    """
    Window geometry, or ``None`` when the host wall is interior.

    Interior walls do not carry windows; callers pass ``is_exterior`` from
    the adjacency map.
    """
    if not is_exterior:
        logger.debug("Window on interior %s wall of %r suppressed", window.wall.value, room.name)
        return None
    placed = resolve_position(room, window)
    return OpeningGeometry(
        kind="window",
        wall=window.wall,
        start=placed.start,
        end=placed.end,
        wall_is_horizontal=placed.wall_is_horizontal,
        width=placed.width,
        frame=window_frame(placed, window.window_type),
        opening_id=window.opening_id,
    )


def resolve_opening_geometry(room: Room, opening: Opening,
                             is_exterior: bool = True) -> Optional[OpeningGeometry]:
    """Resolve any opening; windows on interior walls yield ``None``."""
    if isinstance(opening, Door):
        return resolve_door(room, opening)
    if isinstance(opening, Window):
        return resolve_window(room, opening, is_exterior)
    placed = resolve_position(room, opening)
    return OpeningGeometry(
        kind=opening.kind,
        wall=opening.wall,
        start=placed.start,
        end=placed.end,
        wall_is_horizontal=placed.wall_is_horizontal,
        width=placed.width,
        opening_id=opening.opening_id,
    )


def resolve_floor_openings(rooms: Sequence[Room],
                           shared: SharedWallMap) -> List[List[OpeningGeometry]]:
    """
    Resolve every door and exterior window, one list per room (input order).
    """
    resolved: List[List[OpeningGeometry]] = []
    for index, room in enumerate(rooms):
        items = [resolve_door(room, d) for d in room.doors]
        for window in room.windows:
            geom = resolve_window(room, window, shared.is_exterior(index, window.wall))
            if geom is not None:
                items.append(geom)
        resolved.append(items)
    return resolved
