import random

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, settings, strategies as st

from evaluation.validators import check_bounds, check_header_spacing, check_overlaps, validate_floor
from geometry.exporters import room_to_dict
from geometry.kernel import Vec3
from solver.occupancy_grid import OccupancyGrid
from solver.room_placer import FixedRoomRegistry, RoomPlacer


def room_requests():
    side = st.integers(min_value=1, max_value=8).map(lambda n: n * 5)
    return st.lists(st.tuples(side, side), min_size=1, max_size=12)


@settings(max_examples=50, deadline=None)
@given(room_requests(), st.integers(min_value=0, max_value=10_000))
def test_placed_rooms_never_overlap(requests, seed):
    grid = OccupancyGrid(60, 45, 5)
    placer = RoomPlacer(
        grid,
        floor_index=0,
        floor_height=10,
        rng=random.Random(seed),
        is_fixed=lambda _t: False,
        fixed_registry=FixedRoomRegistry(),
    )
    rooms = []
    for i, (w, d) in enumerate(requests):
        room = placer.place_room(Vec3(w, 10, d), f"Room{i}")
        if room is not None:
            rooms.append(room_to_dict(room))

    assert check_overlaps(rooms) == []
    assert check_bounds(rooms, 60, 45) == []


def test_overlap_is_reported():
    rooms = [
        {"type": "A", "position": {"x": 0, "z": 0}, "size": {"width": 10, "depth": 10}},
        {"type": "B", "position": {"x": 5, "z": 5}, "size": {"width": 10, "depth": 10}},
        {"type": "C", "position": {"x": 10, "z": 0}, "size": {"width": 10, "depth": 10}},
    ]
    assert check_overlaps(rooms) == ["Room A overlaps with B", "Room B overlaps with C"]


def test_close_headers_are_reported():
    headers = [{"center": {"x": 0, "y": 9, "z": 0}}, {"center": {"x": 1.5, "y": 9, "z": 0}}]
    assert len(check_header_spacing(headers)) == 1
    headers[1]["center"]["x"] = 6
    assert check_header_spacing(headers) == []


def test_cell_rooms_inside_their_block_are_not_overlaps():
    floor = {
        "index": 0,
        "rooms": [
            {"type": "Cell Block", "position": {"x": 0, "z": 0}, "size": {"width": 40, "depth": 50}},
            {"type": "Room_Cell_LeftSide_1", "parent": "Cell Block",
             "position": {"x": 0, "z": 0}, "size": {"width": 20, "depth": 5}},
        ],
        "headers": [],
    }
    assert validate_floor(floor, 60, 60) == []
    floor["rooms"][0]["size"]["width"] = 70
    assert validate_floor(floor, 60, 60) == ["Floor 0: Room Cell Block at (0.0, 0.0) exceeds bounds 60x60"]
