"""
Plan geometry routes.

Thin HTTP wrapper over ``services.plan_geometry``: shared walls, envelope,
opening geometry and DXF export for one floor of rooms.
"""

import uuid
from pathlib import Path
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from config import EXPORT_DIR
from schemas import (
    DXFRequest,
    EnvelopeOut,
    ExportOut,
    AdjacencyOut,
    OpeningsOut,
    RoomIn,
    RoomsRequest,
)
from services.plan_geometry import (
    Floor,
    Room,
    audit_dxf,
    detect_overlaps,
    dxf_bytes,
    envelope,
    floor_from_dict,
    resolve_adjacency,
    resolve_floor_openings,
    room_from_dict,
    save_dxf,
    serialize_to_dxf,
)

router = APIRouter(prefix="/api/geometry", tags=["geometry"])


def _rooms(items: List[RoomIn]) -> List[Room]:
    return [room_from_dict(r.model_dump()) for r in items]


@router.post("/adjacency", response_model=AdjacencyOut)
async def adjacency(req: RoomsRequest):
    """Shared and exterior walls for every room, keyed by input index."""
    rooms = _rooms(req.rooms)
    try:
        shared = resolve_adjacency(rooms, req.tolerance)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AdjacencyOut(
        rooms=shared.to_dict(),
        overlaps=[list(pair) for pair in detect_overlaps(rooms)],
    )


@router.post("/envelope", response_model=EnvelopeOut)
async def building_envelope(req: RoomsRequest):
    env = envelope(_rooms(req.rooms))
    return EnvelopeOut(envelope=env.to_dict() if env else None)


@router.post("/openings", response_model=OpeningsOut)
async def openings(req: RoomsRequest):
    """Door swings and exterior window frames, one list per room."""
    rooms = _rooms(req.rooms)
    try:
        shared = resolve_adjacency(rooms, req.tolerance)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    resolved = resolve_floor_openings(rooms, shared)
    return OpeningsOut(rooms=[[g.to_dict() for g in items] for items in resolved])


def _floor(req: DXFRequest) -> Floor:
    return floor_from_dict(req.floor.model_dump())


@router.post("/dxf")
async def dxf(req: DXFRequest):
    """Return the floor as an AutoCAD R2000 DXF document."""
    try:
        text = serialize_to_dxf(_floor(req), req.scale, req.tolerance)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(content=dxf_bytes(text), media_type="application/dxf")


@router.post("/export", response_model=ExportOut)
async def export(req: DXFRequest):
    """Write the floor's DXF into the export directory and audit it."""
    filename = f"{req.filename or 'plan_' + uuid.uuid4().hex[:8]}.dxf"
    try:
        path = save_dxf(_floor(req), EXPORT_DIR / filename, req.scale, req.tolerance)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit = audit_dxf(Path(path).read_bytes())
    return ExportOut(
        dxf_url=f"/exports/{filename}",
        entity_count=audit.entity_count,
        by_type=audit.by_type,
        by_layer=audit.by_layer,
        errors=audit.errors,
    )
