"""
DXF (AutoCAD R2000 / AC1015) serializer for resolved floor plans.

Walks one floor through adjacency, envelope and opening resolution and
emits a group-code stream:

  HEADER   $ACADVER, $DWGCODEPAGE, $INSUNITS, $EXTMIN/$EXTMAX, $HANDSEED
  TABLES   LAYER table (AIA layer names)
  ENTITIES envelope outline, room outlines + labels, door arcs + leaves,
           window frame lines
  EOF

Every real is written with fixed 4-decimal precision. Plan Y points south
while DXF Y points north, so Y is negated on the way out and plan angles
(clockwise on screen) become counter-clockwise DXF angles.

The written document is re-read with ``ezdxf.recover`` by :func:`audit_dxf`.
"""

import io
import logging
import math
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

from ezdxf import recover
from ezdxf.lldxf.encoding import encode

from .adjacency import resolve_adjacency
from .constants import (
    AREA_TEXT_HEIGHT,
    DEFAULT_TOLERANCE,
    DXF_CODEPAGE,
    DXF_ENCODING,
    DXF_LAYERS,
    DXF_PRECISION,
    DXF_VERSION,
    ENVELOPE_LINE_WIDTH,
    FIRST_HANDLE,
    INSUNITS_FEET,
    INSUNITS_INCHES,
    INSUNITS_UNITLESS,
    LABEL_LINE_GAP,
    LAYER_DOORS,
    LAYER_TEXT,
    LAYER_WALLS,
    LAYER_WINDOWS,
    NAME_TEXT_HEIGHT,
    ROOM_LINE_WIDTH,
)
from .envelope import envelope
from .openings import OpeningGeometry, resolve_floor_openings
from .primitives import Point
from .room_model import Floor, Plan, Room

logger = logging.getLogger(__name__)


# ===========================================================================
# Unit / angle conversion
# ===========================================================================

def to_dxf_angle(plan_angle: float) -> float:
    """Plan angle (clockwise, Y down) → DXF angle (counter-clockwise, Y up)."""
    return (-plan_angle) % 360


def to_dxf_arc(start_angle: float, end_angle: float) -> Tuple[float, float]:
    """
    Convert a clockwise plan sweep ``start → end`` to a DXF CCW sweep.

    Mirroring the Y axis reverses the sweep, so the plan end becomes the
    DXF start. The returned end may be 360 so that ``end - start`` keeps
    the plan sweep.
    """
    dxf_start = to_dxf_angle(end_angle)
    return dxf_start, dxf_start + (end_angle - start_angle)


def insunits_for_scale(scale: float) -> int:
    """$INSUNITS for a drawing with ``scale`` units per foot."""
    if scale == 12:
        return INSUNITS_INCHES
    if scale == 1:
        return INSUNITS_FEET
    return INSUNITS_UNITLESS


def format_area(area: float) -> str:
    """Area label to 0.1 sq ft; whole numbers drop the decimal."""
    value = f"{round(area, 1):.1f}"
    if value.endswith(".0"):
        value = value[:-2]
    return f"{value} SF"


def dxf_string(value: str) -> str:
    """Single-line DXF string value: whitespace collapsed, control characters dropped."""
    value = " ".join(str(value).split())
    return "".join(c for c in value if unicodedata.category(c) != "Cc")


def dxf_bytes(text: str) -> bytes:
    """
    Encode a DXF document for $DWGCODEPAGE ANSI_1252.

    Characters outside the code page are written as ``\\U+XXXX`` by ezdxf's
    ``dxfreplace`` error handler, which CAD readers decode back to unicode.
    """
    return encode(text, DXF_ENCODING)


# ===========================================================================
# Group-code writer
# ===========================================================================

class DXFWriter:
    """
    Accumulates group-code/value pairs for one document.

    Geometry arguments are plan coordinates; the writer applies ``scale``
    and the Y flip.
    """

    def __init__(self, scale: float = 1.0):
        if not scale > 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.scale = scale
        self._next_handle = FIRST_HANDLE
        self.header: List[Tuple[int, str]] = []
        self.tables: List[Tuple[int, str]] = []
        self.entities: List[Tuple[int, str]] = []
        self.entity_count = 0

    # -- low level ---------------------------------------------------------

    def _handle(self) -> str:
        handle = f"{self._next_handle:X}"
        self._next_handle += 1
        return handle

    @staticmethod
    def _real(value: float) -> str:
        assert math.isfinite(value), f"non-finite DXF value: {value!r}"
        text = f"{value:.{DXF_PRECISION}f}"
        if text.lstrip("-").strip("0.") == "":
            return text.lstrip("-")
        return text

    def _xy(self, out: list, point: Point, code: int = 10) -> None:
        out.append((code, self._real(point.x * self.scale)))
        out.append((code + 10, self._real(-point.y * self.scale)))

    def _xyz(self, out: list, point: Point, code: int = 10) -> None:
        self._xy(out, point, code)
        out.append((code + 20, self._real(0.0)))

    def _entity(self, dxftype: str, layer: str) -> list:
        out = self.entities
        out.append((0, dxftype))
        out.append((5, self._handle()))
        out.append((100, "AcDbEntity"))
        out.append((8, layer))
        self.entity_count += 1
        return out

    # -- sections ----------------------------------------------------------

    def write_layers(self, layers: Dict[str, int] = DXF_LAYERS) -> None:
        out = self.tables
        out += [(0, "TABLE"), (2, "LAYER"), (5, self._handle()),
                (100, "AcDbSymbolTable"), (70, str(len(layers)))]
        for name, color in layers.items():
            out += [
                (0, "LAYER"),
                (5, self._handle()),
                (100, "AcDbSymbolTableRecord"),
                (100, "AcDbLayerTableRecord"),
                (2, dxf_string(name)),
                (70, "0"),
                (62, str(color)),
                (6, "CONTINUOUS"),
            ]
        out.append((0, "ENDTAB"))

    def write_header(self, extents: Tuple[Point, Point] = None) -> None:
        out = self.header
        out += [(9, "$ACADVER"), (1, DXF_VERSION)]
        out += [(9, "$DWGCODEPAGE"), (3, DXF_CODEPAGE)]
        out += [(9, "$INSUNITS"), (70, str(insunits_for_scale(self.scale)))]
        if extents is not None:
            low, high = extents
            out.append((9, "$EXTMIN"))
            self._xyz(out, low)
            out.append((9, "$EXTMAX"))
            self._xyz(out, high)
        out += [(9, "$HANDSEED"), (5, f"{self._next_handle:X}")]

    # -- entities ----------------------------------------------------------

    def lwpolyline(self, points: Sequence[Point], layer: str,
                   closed: bool = True, width: float = 0.0) -> None:
        out = self._entity("LWPOLYLINE", layer)
        out += [
            (100, "AcDbPolyline"),
            (90, str(len(points))),
            (70, "1" if closed else "0"),
            (43, self._real(width)),
        ]
        for p in points:
            self._xy(out, p)

    def line(self, start: Point, end: Point, layer: str) -> None:
        out = self._entity("LINE", layer)
        out.append((100, "AcDbLine"))
        self._xyz(out, start, 10)
        self._xyz(out, end, 11)

    def arc(self, center: Point, radius: float, start_angle: float,
            end_angle: float, layer: str) -> None:
        """Arc from plan angles; converted to DXF CCW degrees here."""
        dxf_start, dxf_end = to_dxf_arc(start_angle, end_angle)
        out = self._entity("ARC", layer)
        out.append((100, "AcDbCircle"))
        self._xyz(out, center)
        out.append((40, self._real(radius * self.scale)))
        out.append((100, "AcDbArc"))
        out.append((50, self._real(dxf_start)))
        out.append((51, self._real(dxf_end)))

    def text(self, value: str, insert: Point, height: float, layer: str) -> None:
        """Single-line text centred on ``insert``; ``height`` in plan units."""
        out = self._entity("TEXT", layer)
        out.append((100, "AcDbText"))
        self._xyz(out, insert)
        out.append((40, self._real(height * self.scale)))
        out.append((1, dxf_string(value)))
        out.append((72, "1"))
        self._xyz(out, insert, 11)
        out += [(100, "AcDbText"), (73, "2")]

    # -- output ------------------------------------------------------------

    def getvalue(self) -> str:
        tags: List[Tuple[int, str]] = []
        for name, body in (("HEADER", self.header), ("TABLES", self.tables),
                           ("ENTITIES", self.entities)):
            tags += [(0, "SECTION"), (2, name)]
            tags += body
            tags.append((0, "ENDSEC"))
        tags.append((0, "EOF"))
        return "".join(f"{code}\n{value}\n" for code, value in tags)


# ===========================================================================
# Floor serialization
# ===========================================================================

def _write_room(writer: DXFWriter, room: Room) -> None:
    writer.lwpolyline(room.rect.corners(), LAYER_WALLS, width=ROOM_LINE_WIDTH)
    center = room.rect.center
    writer.text(room.name.upper(), center, NAME_TEXT_HEIGHT, LAYER_TEXT)
    writer.text(
        format_area(room.area),
        Point(center.x, center.y + LABEL_LINE_GAP),
        AREA_TEXT_HEIGHT,
        LAYER_TEXT,
    )


def _write_opening(writer: DXFWriter, geom: OpeningGeometry) -> None:
    if geom.arc is not None:
        arc = geom.arc
        writer.arc(arc.center, arc.radius, arc.start_angle, arc.end_angle, LAYER_DOORS)
        writer.line(arc.center, arc.leaf_end, LAYER_DOORS)
    elif geom.frame is not None:
        for pane in geom.frame.panes:
            writer.line(pane.start, pane.end, LAYER_WINDOWS)


def serialize_to_dxf(floor: Floor, scale: float = 1.0,
                     tolerance: float = DEFAULT_TOLERANCE) -> str:
    """
    Serialize one floor to a DXF document string.

    Parameters
    ----------
    floor : Floor
        Rooms to export.
    scale : float
        Drawing units per foot (1 = feet, 12 = inches).
    tolerance : float
        Shared-wall tolerance in plan units; decides which walls are
        exterior and therefore carry windows.

    Returns
    -------
    str
        Complete ASCII DXF. An empty floor yields header, layer table,
        an empty ENTITIES section and ``EOF``.
    """
    writer = DXFWriter(scale)
    writer.write_layers()

    rooms = floor.rooms
    env = envelope(rooms)
    extents = None
    if env is not None:
        outline = [Point(x, y) for x, y in list(env.polygon.exterior.coords)[:-1]]
        writer.lwpolyline(outline, LAYER_WALLS, width=ENVELOPE_LINE_WIDTH)
        # DXF extents: plan max_y is the lowest DXF y.
        extents = (Point(env.min_x, env.max_y), Point(env.max_x, env.min_y))

    shared = resolve_adjacency(rooms, tolerance)
    for room, openings in zip(rooms, resolve_floor_openings(rooms, shared)):
        _write_room(writer, room)
        for geom in openings:
            _write_opening(writer, geom)

    writer.write_header(extents)
    logger.debug("DXF: %d rooms → %d entities (scale=%s)", len(rooms), writer.entity_count, scale)
    return writer.getvalue()


def serialize_plan(plan: Plan, floor_index: int = 0, scale: float = 1.0,
                   tolerance: float = DEFAULT_TOLERANCE) -> str:
    """Serialize one floor of a multi-floor plan."""
    return serialize_to_dxf(plan.floor(floor_index), scale, tolerance)


def save_dxf(floor: Floor, output_path, scale: float = 1.0,
             tolerance: float = DEFAULT_TOLERANCE) -> str:
    """Write the floor's DXF to *output_path* and return the path."""
    text = serialize_to_dxf(floor, scale, tolerance)
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dxf_bytes(text))
    logger.info("DXF exported → %s", path)
    return str(path)


# ===========================================================================
# Audit (re-read with ezdxf)
# ===========================================================================

@dataclass
class DXFAudit:
    version: str
    entity_count: int
    by_type: Dict[str, int] = field(default_factory=dict)
    by_layer: Dict[str, int] = field(default_factory=dict)
    layers: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "entity_count": self.entity_count,
            "by_type": dict(self.by_type),
            "by_layer": dict(self.by_layer),
            "layers": list(self.layers),
            "errors": list(self.errors),
        }


def audit_dxf(document: Union[str, bytes]) -> DXFAudit:
    """
    Load a DXF document with ezdxf's recover loader and summarise it.

    *document* is either serializer text or the encoded bytes of a saved file.

    Counts model-space entities by type and layer and collects the
    auditor's unrecoverable errors.
    """
    if isinstance(document, str):
        document = dxf_bytes(document)
    doc, auditor = recover.read(io.BytesIO(document))
    msp = doc.modelspace()
    entities = list(msp)
    result = DXFAudit(
        version=doc.dxfversion,
        entity_count=len(entities),
        by_type=dict(Counter(e.dxftype() for e in entities)),
        by_layer=dict(Counter(e.dxf.layer for e in entities)),
        layers=sorted(layer.dxf.name for layer in doc.layers),
        errors=[str(err.message) for err in auditor.errors],
    )
    if result.has_errors:
        logger.warning("DXF has %d errors but was recovered", len(result.errors))
    return result
