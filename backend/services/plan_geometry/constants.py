"""
Shared constants for the plan geometry engine.

Every consumer (DXF writer, HTTP routes, renderers) imports from here
instead of keeping its own tolerances and glyph sizes. All lengths are in
plan units (feet) unless stated otherwise.
"""

from typing import Dict

# ===========================================================================
# ADJACENCY
# ===========================================================================

# Max gap between two walls still treated as one shared wall (feet).
DEFAULT_TOLERANCE = 0.5

# Decimal places used when fingerprinting room geometry for the cache.
FINGERPRINT_PRECISION = 3

# Floors kept by the adjacency cache.
ADJACENCY_CACHE_SIZE = 64

# Minimum intersection area reported by the overlap diagnostic (sq ft).
OVERLAP_MIN_AREA = 0.01

# ===========================================================================
# OPENINGS
# ===========================================================================

# Openings may not hang off a corner: normalized centre is kept in here.
POSITION_MIN = 0.1
POSITION_MAX = 0.9

DOOR_WIDTH = 3.0          # feet (standard)
WINDOW_WIDTH = 4.0        # feet
WINDOW_SILL_HEIGHT = 3.0  # feet, elevation only

# Half the gap between the two window frame lines.
WINDOW_FRAME_OFFSET = 0.25

DOOR_TYPES = ("single", "double", "sliding")
WINDOW_TYPES = ("single", "fixed", "double", "sliding", "casement", "double-hung", "bay")

# Window types drawn as one undivided pane.
UNDIVIDED_WINDOW_TYPES = frozenset({"single", "fixed"})

# ===========================================================================
# DXF
# ===========================================================================

# AIA layer names with their ACI colour index.
DXF_LAYERS: Dict[str, int] = {
    "A-WALL": 7,
    "A-DOOR": 3,
    "A-GLAZ": 5,
    "A-AREA": 8,
    "A-ANNO-TEXT": 2,
    "A-ANNO-DIMS": 1,
    "A-FURN": 6,
}

LAYER_WALLS = "A-WALL"
LAYER_DOORS = "A-DOOR"
LAYER_WINDOWS = "A-GLAZ"
LAYER_TEXT = "A-ANNO-TEXT"

DXF_VERSION = "AC1015"   # AutoCAD R2000
DXF_CODEPAGE = "ANSI_1252"
DXF_ENCODING = "cp1252"   # Python codec for DXF_CODEPAGE
DXF_PRECISION = 4

# $INSUNITS codes
INSUNITS_UNITLESS = 0
INSUNITS_INCHES = 1
INSUNITS_FEET = 2

# Polyline constant widths (drawing units, unscaled)
ENVELOPE_LINE_WIDTH = 0.5
ROOM_LINE_WIDTH = 0.25

# Label heights in feet (8" name, 6" area) and gap between the two lines.
NAME_TEXT_HEIGHT = 8 / 12
AREA_TEXT_HEIGHT = 6 / 12
LABEL_LINE_GAP = 1.0

# First handle handed out by the writer; lower ones are left for tables.
FIRST_HANDLE = 0x20
