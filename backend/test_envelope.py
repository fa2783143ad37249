"""Building envelope of a floor."""
import os
import sys
sys.path.insert(0, os.path.dirname(__file__))

from services.plan_geometry import Rectangle, Room, envelope


def _room(name, x, y, w, h):
    return Room(name=name, rect=Rectangle(x, y, w, h))


def test_single_room():
    env = envelope([_room("Living", 0, 0, 20, 15)])
    assert env.to_dict() == {
        "minX": 0, "minY": 0, "maxX": 20, "maxY": 15, "width": 20, "height": 15,
    }


def test_empty_floor():
    assert envelope([]) is None


def test_spans_offset_rooms():
    rooms = [_room("A", -5, 2, 10, 3), _room("B", 4, -1, 2, 2)]
    env = envelope(rooms)
    assert (env.min_x, env.min_y, env.max_x, env.max_y) == (-5, -1, 6, 5)
    assert env.center == (0.5, 2.0)


def test_contains_every_room():
    rooms = [
        _room("Living", 0, 0, 16, 14),
        _room("Kitchen", 16, 0, 10, 10),
        _room("Bath", 16, 10, 6, 4),
        _room("Bed", 0, 14, 12, 12.5),
    ]
    env = envelope(rooms)
    for r in rooms:
        assert env.contains(r)
        assert env.polygon.covers(r.rect.polygon)
    assert env.width == 26
    assert env.height == 26.5
