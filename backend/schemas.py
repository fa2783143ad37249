"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from config import ADJACENCY_TOLERANCE, DXF_SCALE


WallName = Literal["north", "south", "east", "west"]


# ---------- Openings ----------
class DoorIn(BaseModel):
    id: Optional[str] = None
    wall: WallName
    position: float = 0.5
    width: float = Field(3.0, gt=0)
    type: str = "single"
    swing_direction: Literal["inward", "outward"] = "inward"
    swing_side: Literal["left", "right"] = "right"


class WindowIn(BaseModel):
    id: Optional[str] = None
    wall: WallName
    position: float = 0.5
    width: float = Field(4.0, gt=0)
    type: str = "double"
    sill_height: float = Field(3.0, ge=0)


# ---------- Rooms ----------
class RoomIn(BaseModel):
    """Room in editor coordinates; opening positions are centre fractions."""
    id: Optional[str] = None
    name: str
    type: Optional[str] = None
    x: float
    y: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    area_sqft: Optional[float] = Field(None, ge=0)
    doors: List[DoorIn] = []
    windows: List[WindowIn] = []


class FloorIn(BaseModel):
    level: str = "Ground Floor"
    rooms: List[RoomIn] = []


# ---------- Requests ----------
class RoomsRequest(BaseModel):
    rooms: List[RoomIn]
    tolerance: float = Field(ADJACENCY_TOLERANCE, ge=0)


class DXFRequest(BaseModel):
    floor: FloorIn
    scale: float = Field(DXF_SCALE, gt=0)
    tolerance: float = Field(ADJACENCY_TOLERANCE, ge=0)
    filename: Optional[str] = Field(None, pattern=r"^[\w\-]+$")


# ---------- Responses ----------
class AdjacencyOut(BaseModel):
    rooms: Dict[str, dict]
    overlaps: List[List[int]] = []


class EnvelopeOut(BaseModel):
    envelope: Optional[dict] = None


class OpeningsOut(BaseModel):
    rooms: List[List[dict]]


class ExportOut(BaseModel):
    dxf_url: str
    entity_count: int
    by_type: Dict[str, int]
    by_layer: Dict[str, int]
    errors: List[str] = []
