import pytest

from geometry.exterior_walls import (
    exterior_wall_pieces,
    gap_scaling_and_positioning,
    insert_boundary_openings,
    opening_fillers,
    segment_building_exterior,
    segment_exterior_wall,
)
from geometry.kernel import OpeningDescriptor, Vec3, WallSide, WALL_ORDER


def _window(position, width=4.0, height=4.0, vertical=0.5):
    return OpeningDescriptor(position, vertical, width, height)


def _spans(segments):
    return [(pytest.approx(s.start), pytest.approx(s.end)) for s in segments]


def test_wall_without_openings_is_one_solid_span():
    seg = segment_exterior_wall([], 40.0, 10.0)
    assert _spans(seg.solids) == [(0.0, 40.0)]
    assert seg.gaps == []
    assert seg.fillers == []


def test_boundary_openings_wrap_sorted_input():
    gaps = insert_boundary_openings([_window(0.75), _window(0.25)])
    assert [g.position for g in gaps] == [0.0, 0.25, 0.75, 1.0]
    assert gaps[0].width == 0 and gaps[-1].width == 0


def test_scaling_and_bias_for_first_middle_and_last_span():
    gaps = insert_boundary_openings([_window(0.25), _window(0.75, width=8.0)])
    assert gap_scaling_and_positioning(gaps, 1, 40.0) == pytest.approx((0.05, -1.0))
    assert gap_scaling_and_positioning(gaps, 2, 40.0) == pytest.approx((0.15, -1.0))
    assert gap_scaling_and_positioning(gaps, 3, 40.0) == pytest.approx((0.1, 2.0))


def test_two_windows_split_wall_into_three_solids():
    seg = segment_exterior_wall([_window(0.25), _window(0.75)], 40.0, 10.0)

    assert _spans(seg.solids) == [(0.0, 8.0), (12.0, 28.0), (32.0, 40.0)]
    assert _spans(seg.gaps) == [(8.0, 12.0), (28.0, 32.0)]
    assert seg.covered_length() == pytest.approx(40.0)


def test_opening_near_the_end_drops_the_degenerate_span():
    seg = segment_exterior_wall([_window(0.02)], 40.0, 10.0)
    assert len(seg.solids) == 1
    assert len(seg.gaps) == 1
    # the opening still gets its fillers
    assert [f.kind for f in seg.fillers] == ["sill", "lintel"]


def test_window_gets_sill_and_lintel():
    sill, lintel = opening_fillers(_window(0.5), 40.0, 10.0)

    assert sill.kind == "sill"
    assert sill.bottom == pytest.approx(0.0)
    assert sill.height == pytest.approx(3.0)
    assert lintel.kind == "lintel"
    assert lintel.bottom == pytest.approx(7.0)
    assert lintel.height == pytest.approx(3.0)
    assert (sill.span.start, sill.span.end) == pytest.approx((18.0, 22.0))


def test_door_at_floor_level_has_no_sill():
    door = OpeningDescriptor(0.5, 0.4, 4.0, 8.0)
    fillers = opening_fillers(door, 40.0, 10.0)
    assert [f.kind for f in fillers] == ["lintel"]
    assert fillers[0].bottom == pytest.approx(8.0)
    assert fillers[0].height == pytest.approx(2.0)


def test_pieces_are_placed_on_the_building_envelope():
    seg = segment_exterior_wall([_window(0.5)], 20.0, 10.0)
    origin = Vec3(100, 0, 50)
    size = Vec3(20, 20, 30)

    front = exterior_wall_pieces(seg, WallSide.FRONT, building_origin=origin, building_size=size, floor_index=1)
    assert len(front) == len(seg.solids) + len(seg.fillers)
    wall = front[0]
    assert wall.name == "horizontalWall_frontWall_1_Floor1"
    assert wall.center.z == pytest.approx(49.5)
    assert wall.center.y == pytest.approx(15.0)
    assert wall.size.z == pytest.approx(1.0)

    left = exterior_wall_pieces(seg, WallSide.LEFT, building_origin=origin, building_size=size, floor_index=0)
    assert left[0].center.x == pytest.approx(99.5)
    assert left[0].size.x == pytest.approx(1.0)


def test_building_exterior_covers_every_side_of_every_floor():
    openings = {
        0: {WallSide.FRONT: [OpeningDescriptor(0.5, 0.4, 4.0, 8.0)]},
        1: {},
    }
    out = segment_building_exterior(
        openings, building_origin=Vec3(0, 0, 0), building_size=Vec3(40, 20, 30), floor_height=10
    )
    assert sorted(out) == [0, 1]
    for floor in out.values():
        assert list(floor) == list(WALL_ORDER)
    seg, _ = out[0][WallSide.LEFT]
    assert seg.wall_length == 30
    assert len(out[0][WallSide.FRONT][0].gaps) == 1
