"""
Room model: rectangles carrying wall-anchored doors and windows.

Position convention
-------------------
``Opening.position`` is a normalized fraction in [0, 1] of the host wall's
length and marks the **centre** of the opening. Producers that think in
absolute feet from the wall's start corner (AI generator output, persisted
projects) are converted once, here, by :func:`normalize_position`.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .constants import DOOR_TYPES, DOOR_WIDTH, WINDOW_SILL_HEIGHT, WINDOW_TYPES, WINDOW_WIDTH
from .primitives import Rectangle, WallSide

logger = logging.getLogger(__name__)


class SwingDirection(str, Enum):
    INWARD = "inward"
    OUTWARD = "outward"


class SwingSide(str, Enum):
    """Hinge side; ``left`` is the opening's start end (west or north)."""

    LEFT = "left"
    RIGHT = "right"


class PositionMode(str, Enum):
    NORMALIZED = "normalized"   # centre as fraction of wall length
    ABSOLUTE = "absolute"       # left edge, in feet from the wall start


@dataclass
class Opening:
    """A door or window anchored to one wall of its room."""

    wall: WallSide
    position: float = 0.5
    width: float = DOOR_WIDTH
    opening_id: Optional[str] = None

    @property
    def kind(self) -> str:
        return "opening"

    def to_dict(self) -> dict:
        return {
            "id": self.opening_id,
            "wall": self.wall.value,
            "position": round(self.position, 4),
            "width": self.width,
        }


@dataclass
class Door(Opening):
    swing_direction: SwingDirection = SwingDirection.INWARD
    swing_side: SwingSide = SwingSide.RIGHT
    door_type: str = "single"

    @property
    def kind(self) -> str:
        return "door"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "type": self.door_type,
            "swing_direction": self.swing_direction.value,
            "swing_side": self.swing_side.value,
        })
        return data


@dataclass
class Window(Opening):
    width: float = WINDOW_WIDTH
    sill_height: float = WINDOW_SILL_HEIGHT
    window_type: str = "double"

    @property
    def kind(self) -> str:
        return "window"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"type": self.window_type, "sill_height": self.sill_height})
        return data


@dataclass
class Room:
    """A named axis-aligned rectangle with its doors and windows."""

    name: str
    rect: Rectangle
    room_type: str = ""
    doors: List[Door] = field(default_factory=list)
    windows: List[Window] = field(default_factory=list)
    area_sqft: Optional[float] = None
    room_id: Optional[str] = None

    @property
    def x(self) -> float:
        return self.rect.x

    @property
    def y(self) -> float:
        return self.rect.y

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def height(self) -> float:
        return self.rect.height

    @property
    def area(self) -> float:
        """Stated area when the producer supplied one, else width × height."""
        if self.area_sqft is not None:
            return self.area_sqft
        return self.rect.area

    @property
    def openings(self) -> List[Opening]:
        return [*self.doors, *self.windows]

    def to_dict(self) -> dict:
        return {
            "id": self.room_id,
            "name": self.name,
            "type": self.room_type,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "area": round(self.area, 2),
            "doors": [d.to_dict() for d in self.doors],
            "windows": [w.to_dict() for w in self.windows],
        }

    def __repr__(self) -> str:
        return (
            f"Room({self.name!r}, ({self.x:.2f},{self.y:.2f}) "
            f"{self.width:.2f}x{self.height:.2f}, doors={len(self.doors)}, "
            f"windows={len(self.windows)})"
        )


@dataclass
class Floor:
    """Rooms sharing one elevation level."""

    rooms: List[Room] = field(default_factory=list)
    level: str = "Ground Floor"

    def to_dict(self) -> dict:
        return {"level": self.level, "rooms": [r.to_dict() for r in self.rooms]}


@dataclass
class Plan:
    floors: List[Floor] = field(default_factory=list)
    building_type: str = "residential"

    def floor(self, index: int = 0) -> Floor:
        """Return floor *index*; raises ``IndexError`` like a list would."""
        if not 0 <= index < len(self.floors):
            raise IndexError(f"Floor {index} not found (plan has {len(self.floors)})")
        return self.floors[index]


# ===========================================================================
# Boundary adapters (plain data → model)
# ===========================================================================

def normalize_position(
    value: float,
    width: float,
    wall_length: float,
    mode: PositionMode = PositionMode.NORMALIZED,
) -> float:
    """
    Convert an opening position into the engine convention.

    Parameters
    ----------
    value : float
        Position as supplied by the producer.
    width : float
        Opening width (plan units).
    wall_length : float
        Length of the host wall (plan units).
    mode : PositionMode
        ``normalized``: already a centre fraction, returned as is.
        ``absolute``: distance of the opening's left edge from the wall
        start corner.

    Returns
    -------
    float
        Centre of the opening as a fraction of *wall_length*.
    """
    mode = PositionMode(mode)
    if mode is PositionMode.NORMALIZED:
        return float(value)
    if wall_length <= 0:
        return 0.5
    return (float(value) + width / 2) / wall_length


def _get(data: Dict[str, Any], *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_enum(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s %r, using %s", enum_cls.__name__, value, default.value)
        return default


def _known_type(value: str, known) -> str:
    """Unknown door/window types fall back to the first known one."""
    value = str(value).lower()
    if value not in known:
        logger.warning("Unknown opening type %r, using %s", value, known[0])
        return known[0]
    return value


def _opening_common(data: dict, rect: Rectangle, default_width: float,
                    default_mode: PositionMode):
    wall = WallSide.parse(data.get("wall"))
    if wall is None:
        logger.warning("Skipping opening with unknown wall %r", data.get("wall"))
        return None
    width = float(_get(data, "width", default=default_width))
    mode = _parse_enum(
        PositionMode, _get(data, "position_mode", "positionMode", default=default_mode), default_mode
    )
    position = normalize_position(
        float(_get(data, "position", default=0.5)),
        width,
        rect.wall_length(wall),
        mode,
    )
    return wall, position, width


def door_from_dict(data: dict, rect: Rectangle,
                   default_mode: PositionMode = PositionMode.NORMALIZED) -> Optional[Door]:
    common = _opening_common(data, rect, DOOR_WIDTH, default_mode)
    if common is None:
        return None
    wall, position, width = common

    direction = _get(data, "swing_direction", "swingDirection", default="inward")
    side = _get(data, "swing_side", "swingSide")
    # Generator output overloads swingDirection with the hinge side.
    if direction in ("left", "right"):
        side = side or direction
        direction = "inward"

    return Door(
        wall=wall,
        position=position,
        width=width,
        opening_id=data.get("id"),
        swing_direction=_parse_enum(SwingDirection, direction, SwingDirection.INWARD),
        swing_side=_parse_enum(SwingSide, side or "right", SwingSide.RIGHT),
        door_type=_known_type(_get(data, "type", "door_type", default="single"), DOOR_TYPES),
    )


def window_from_dict(data: dict, rect: Rectangle,
                     default_mode: PositionMode = PositionMode.NORMALIZED) -> Optional[Window]:
    common = _opening_common(data, rect, WINDOW_WIDTH, default_mode)
    if common is None:
        return None
    wall, position, width = common
    return Window(
        wall=wall,
        position=position,
        width=width,
        opening_id=data.get("id"),
        sill_height=float(_get(data, "sill_height", "sillHeight", default=WINDOW_SILL_HEIGHT)),
        window_type=_known_type(_get(data, "type", "window_type", default="double"), WINDOW_TYPES),
    )


def room_from_dict(data: dict) -> Room:
    """
    Build a :class:`Room` from editor or generator shaped data.

    Editor shape: ``x, y, width, height`` with normalized opening positions.
    Generator shape: ``position: {x, y}`` and ``dimensions: {width, length}``
    in feet, with openings placed in absolute feet from the wall start.
    Negative dimensions are clamped to zero.
    """
    generator_shape = "dimensions" in data or isinstance(data.get("position"), dict)
    if generator_shape:
        pos = data.get("position") or {}
        dims = data.get("dimensions") or {}
        x, y = float(pos.get("x", 0.0)), float(pos.get("y", 0.0))
        width = float(dims.get("width", 0.0))
        height = float(dims.get("length", 0.0))
        default_mode = PositionMode.ABSOLUTE
    else:
        x, y = float(data.get("x", 0.0)), float(data.get("y", 0.0))
        width = float(data.get("width", 0.0))
        height = float(data.get("height", 0.0))
        default_mode = PositionMode.NORMALIZED

    name = data.get("name", "Room")
    if width < 0 or height < 0:
        logger.warning("Room %r has negative size %.2fx%.2f, clamping to 0", name, width, height)
        width, height = max(width, 0.0), max(height, 0.0)

    rect = Rectangle(x, y, width, height)
    doors = [door_from_dict(d, rect, default_mode) for d in data.get("doors") or []]
    windows = [window_from_dict(w, rect, default_mode) for w in data.get("windows") or []]
    area = _get(data, "area_sqft", "areaSqft")

    return Room(
        name=name,
        rect=rect,
        room_type=data.get("type") or data.get("room_type") or name.lower(),
        doors=[d for d in doors if d is not None],
        windows=[w for w in windows if w is not None],
        area_sqft=float(area) if area is not None else None,
        room_id=data.get("id"),
    )


def floor_from_dict(data: dict) -> Floor:
    return Floor(
        rooms=[room_from_dict(r) for r in data.get("rooms") or []],
        level=data.get("level", "Ground Floor"),
    )


def plan_from_dict(data: dict) -> Plan:
    return Plan(
        floors=[floor_from_dict(f) for f in data.get("floors") or []],
        building_type=data.get("buildingType") or data.get("building_type") or "residential",
    )
