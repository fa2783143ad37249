"""
Plan geometry engine.

Adjacency between axis-aligned rooms, the building envelope, door/window
placement on room walls and DXF export. All coordinates are plan units
(feet), ``x`` east and ``y`` south.
"""

from .primitives import Point, Rectangle, WallSide
from .room_model import (
    Door,
    Floor,
    Opening,
    Plan,
    PositionMode,
    Room,
    SwingDirection,
    SwingSide,
    Window,
    floor_from_dict,
    normalize_position,
    plan_from_dict,
    room_from_dict,
)
from .adjacency import (
    SharedWall,
    SharedWallMap,
    detect_overlaps,
    geometry_fingerprint,
    implied_door_wall,
    resolve_adjacency,
    clear_adjacency_cache,
    resolve_adjacency_cached,
)
from .envelope import Envelope, envelope
from .openings import (
    SWING_TABLE,
    OpeningGeometry,
    resolve_floor_openings,
    resolve_opening_geometry,
    resolve_position,
)
from .dxf_writer import DXFAudit, audit_dxf, dxf_bytes, save_dxf, serialize_plan, serialize_to_dxf

__all__ = [
    "Point",
    "Rectangle",
    "WallSide",
    "Door",
    "Floor",
    "Opening",
    "Plan",
    "PositionMode",
    "Room",
    "SwingDirection",
    "SwingSide",
    "Window",
    "floor_from_dict",
    "normalize_position",
    "plan_from_dict",
    "room_from_dict",
    "SharedWall",
    "SharedWallMap",
    "detect_overlaps",
    "geometry_fingerprint",
    "implied_door_wall",
    "resolve_adjacency",
    "resolve_adjacency_cached",
    "clear_adjacency_cache",
    "Envelope",
    "envelope",
    "SWING_TABLE",
    "OpeningGeometry",
    "resolve_floor_openings",
    "resolve_opening_geometry",
    "resolve_position",
    "DXFAudit",
    "audit_dxf",
    "dxf_bytes",
    "save_dxf",
    "serialize_plan",
    "serialize_to_dxf",
]
