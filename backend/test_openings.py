"""Door and window placement, swing arcs and window frames."""
import os
import sys
sys.path.insert(0, os.path.dirname(__file__))

import math

import pytest
from shapely.geometry import Point as ShapelyPoint

from services.plan_geometry import (
    SWING_TABLE,
    Door,
    PositionMode,
    Rectangle,
    Room,
    SwingDirection,
    SwingSide,
    WallSide,
    Window,
    normalize_position,
    resolve_adjacency,
    resolve_floor_openings,
    resolve_opening_geometry,
    resolve_position,
    room_from_dict,
)
from services.plan_geometry.openings import mullion_fractions, resolve_window


def _room(x=0, y=0, w=20, h=15, **kw):
    return Room(name="Living", rect=Rectangle(x, y, w, h), **kw)


def _on_wall(room, wall, p, tol=1e-9):
    a, b = room.rect.wall_segment(wall)
    if wall.is_horizontal:
        return abs(p.y - a.y) < tol and a.x - tol <= p.x <= b.x + tol
    return abs(p.x - a.x) < tol and a.y - tol <= p.y <= b.y + tol


def test_south_door_centre_position():
    geom = resolve_opening_geometry(_room(), Door(WallSide.SOUTH, position=0.5, width=3))
    assert geom.start == (8.5, 15)
    assert geom.end == (11.5, 15)
    assert geom.wall_is_horizontal


@pytest.mark.parametrize("wall", list(WallSide))
@pytest.mark.parametrize("position", [0.1, 0.3, 0.5, 0.9])
def test_openings_lie_on_their_wall(wall, position):
    room = _room(3, 4, 20, 15)
    for opening in (Door(wall, position), Window(wall, position)):
        geom = resolve_opening_geometry(room, opening)
        assert _on_wall(room, wall, geom.start)
        assert _on_wall(room, wall, geom.end)
        outline = room.rect.polygon.exterior
        assert outline.distance(ShapelyPoint(geom.start)) < 1e-9
        assert outline.distance(ShapelyPoint(geom.end)) < 1e-9
        assert math.dist(geom.start, geom.end) == pytest.approx(opening.width)


def test_position_clamped():
    room = _room()
    low = resolve_position(room, Door(WallSide.SOUTH, position=0.0, width=3))
    assert low.start == (0.5, 15)
    high = resolve_position(room, Door(WallSide.SOUTH, position=0.95, width=3))
    assert high.end == (19.5, 15)


def test_width_clamped_to_wall():
    room = _room(w=20, h=10)
    placed = resolve_position(room, Window(WallSide.WEST, position=0.5, width=12))
    assert placed.width == 10
    assert placed.start == (0, 0)
    assert placed.end == (0, 10)


def test_shifted_off_corner():
    room = _room(w=4, h=10)
    placed = resolve_position(room, Door(WallSide.NORTH, position=0.1, width=3))
    assert placed.start == (0, 0)
    assert placed.end == (3, 0)


def test_swing_table_is_complete():
    for wall in WallSide:
        for side in SwingSide:
            for direction in SwingDirection:
                assert (wall, side, direction) in SWING_TABLE


@pytest.mark.parametrize("key", list(SWING_TABLE))
def test_swing_leaf_opens_to_the_right_side(key):
    wall, side, direction = key
    room = _room()
    door = Door(wall, 0.5, 3, swing_direction=direction, swing_side=side)
    geom = resolve_opening_geometry(room, door)
    arc = geom.arc

    assert arc.end_angle - arc.start_angle == 90
    assert arc.radius == 3
    assert math.dist(arc.center, arc.leaf_end) == pytest.approx(3)
    expected_hinge = geom.start if side is SwingSide.LEFT else geom.end
    assert arc.center == expected_hinge

    leaf = ShapelyPoint(arc.leaf_end)
    if direction is SwingDirection.INWARD:
        assert room.rect.polygon.contains(leaf)
    else:
        assert not room.rect.polygon.intersects(leaf)


def test_north_left_inward_swing():
    geom = resolve_opening_geometry(_room(), Door(WallSide.NORTH, 0.5, 3, swing_side=SwingSide.LEFT))
    assert geom.arc.center == (8.5, 0)
    assert (geom.arc.start_angle, geom.arc.end_angle) == (0, 90)
    assert geom.arc.leaf_end == (8.5, 3)


def test_window_on_interior_wall_suppressed():
    room = _room()
    assert resolve_window(room, Window(WallSide.EAST), is_exterior=False) is None
    assert resolve_opening_geometry(room, Window(WallSide.EAST), is_exterior=False) is None


def test_floor_openings_drop_interior_windows():
    rooms = [
        _room(0, 0, 10, 10, windows=[Window(WallSide.EAST), Window(WallSide.NORTH)],
              doors=[Door(WallSide.EAST)]),
        _room(10, 0, 10, 10),
    ]
    resolved = resolve_floor_openings(rooms, resolve_adjacency(rooms))
    kinds = [(g.kind, g.wall) for g in resolved[0]]
    assert kinds == [("door", WallSide.EAST), ("window", WallSide.NORTH)]
    assert resolved[1] == []


def test_window_frame_lines():
    geom = resolve_opening_geometry(_room(), Window(WallSide.NORTH, 0.5, 4))
    first, second = geom.frame.panes
    assert first.start == (8, -0.25) and first.end == (12, -0.25)
    assert second.start == (8, 0.25) and second.end == (12, 0.25)
    assert len(geom.frame.mullions) == 1
    assert geom.frame.mullions[0].start.x == 10


def test_mullion_fractions():
    assert mullion_fractions("single") == ()
    assert mullion_fractions("fixed") == ()
    assert mullion_fractions("double") == (0.5,)
    assert len(mullion_fractions("bay")) == 2


def test_normalize_position():
    assert normalize_position(0.3, 3, 20) == 0.3
    assert normalize_position(8.5, 3, 20, PositionMode.ABSOLUTE) == 0.5
    assert normalize_position(4, 3, 0, PositionMode.ABSOLUTE) == 0.5


def test_generator_shaped_room():
    room = room_from_dict({
        "name": "Kitchen",
        "position": {"x": 0, "y": 0},
        "dimensions": {"width": 20, "length": 15},
        "doors": [{"wall": "south", "position": 8.5, "width": 3, "swingDirection": "left"}],
        "windows": [{"wall": "up", "position": 2}],
    })
    assert room.rect == Rectangle(0, 0, 20, 15)
    assert room.windows == []
    door = room.doors[0]
    assert door.position == 0.5
    assert door.swing_side is SwingSide.LEFT
    assert door.swing_direction is SwingDirection.INWARD
    assert resolve_opening_geometry(room, door).start == (8.5, 15)


def test_negative_room_size_clamped():
    room = room_from_dict({"name": "Odd", "x": 0, "y": 0, "width": -4, "height": 6})
    assert room.width == 0
    assert room.height == 6
