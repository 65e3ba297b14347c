import pytest

from dataset.openings import DoorGapPlanner, ExteriorOpeningPlanner
from geometry.kernel import DoorCandidate, Room, Vec3, WallSide


def _room(x, z, w, d, room_type="Room"):
    return Room(Vec3(x, 0, z), Vec3(w, 10, d), room_type)


def test_side_by_side_rooms_share_one_door():
    rooms = [_room(0, 0, 20, 20), _room(20, 0, 20, 20)]
    grouped = DoorGapPlanner().find_door_candidates(rooms)

    assert grouped == {
        (0, WallSide.RIGHT): [DoorCandidate(20, 8)],
        (1, WallSide.LEFT): [DoorCandidate(20, 8)],
    }


def test_stacked_rooms_share_a_front_back_door():
    rooms = [_room(0, 20, 10, 20), _room(0, 0, 20, 20)]
    grouped = DoorGapPlanner().find_door_candidates(rooms)

    assert grouped == {
        (0, WallSide.FRONT): [DoorCandidate(3, 20)],
        (1, WallSide.BACK): [DoorCandidate(3, 20)],
    }


def test_overlap_shorter_than_a_door_gives_no_candidate():
    rooms = [_room(0, 0, 10, 10), _room(10, 7, 10, 10)]
    assert DoorGapPlanner().find_door_candidates(rooms) == {}


def test_rooms_with_a_gap_between_them_are_not_neighbours():
    rooms = [_room(0, 0, 10, 10), _room(15, 0, 10, 10)]
    assert DoorGapPlanner().find_door_candidates(rooms) == {}


def test_door_height_is_capped_by_floor_height():
    planner = DoorGapPlanner(door_width=4, door_height=8)
    assert planner.door_height_for(6) == 6
    assert planner.door_height_for(10) == 8


def test_ground_floor_gets_an_entrance_on_the_front():
    planner = ExteriorOpeningPlanner()
    openings = planner.plan(
        [_room(0, 0, 20, 20)],
        floor_width=20, floor_depth=20, floor_height=10, door_height=8, is_ground_floor=True,
    )

    (entrance,) = openings[WallSide.FRONT]
    assert entrance.position == pytest.approx(0.5)
    assert entrance.vertical == pytest.approx(0.4)
    assert (entrance.width, entrance.height) == (4, 8)
    for side in (WallSide.BACK, WallSide.LEFT, WallSide.RIGHT):
        (window,) = openings[side]
        assert window.vertical == pytest.approx(0.5)


def test_upper_floor_front_gets_windows_only():
    openings = ExteriorOpeningPlanner().plan(
        [_room(0, 0, 10, 10), _room(10, 0, 10, 10)],
        floor_width=20, floor_depth=20, floor_height=10, door_height=8, is_ground_floor=False,
    )
    front = openings[WallSide.FRONT]
    assert [o.position for o in front] == pytest.approx([0.25, 0.75])
    assert all(o.height == 4 for o in front)
    assert openings[WallSide.BACK] == []


def test_interior_rooms_get_no_openings():
    openings = ExteriorOpeningPlanner().plan(
        [_room(10, 10, 10, 10)],
        floor_width=30, floor_depth=30, floor_height=10, door_height=8, is_ground_floor=True,
    )
    assert all(v == [] for v in openings.values())
