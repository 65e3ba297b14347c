import random

import pytest

from dataset.room_catalog import RoomConfiguration
from geometry.kernel import Vec3
from solver.floor_planner import FloorLayoutPlanner, rebalance_room_sizes, snap_room_sizes


def _is_stairs(room_type):
    return room_type == "Staircase"


def test_sizes_snap_down_with_one_step_minimum():
    sizes = snap_room_sizes([("A", Vec3(12, 10, 3)), ("B", Vec3(25, 10, 19))], 5)
    assert [(s.x, s.y, s.z) for s in sizes] == [(10, 10, 5), (25, 10, 15)]


def test_rebalance_leaves_sizes_alone_under_budget():
    sizes = [Vec3(10, 10, 10), Vec3(20, 10, 10)]
    out = rebalance_room_sizes(sizes, ["A", "B"], floor_width=40, floor_depth=40, step=5, is_fixed=_is_stairs)
    assert out == sizes


def test_rebalance_scales_non_fixed_rooms_once():
    sizes = [Vec3(30, 10, 30), Vec3(10, 10, 10), Vec3(30, 10, 30)]
    out = rebalance_room_sizes(
        sizes, ["A", "Staircase", "B"], floor_width=40, floor_depth=40, step=5, is_fixed=_is_stairs
    )
    # 30 * 0.85 = 25.5 -> 25, already on the grid
    assert [(s.x, s.z) for s in out] == [(25, 25), (10, 10), (25, 25)]


def test_rebalance_is_a_single_pass_even_when_still_over_budget():
    out = rebalance_room_sizes(
        [Vec3(20, 10, 20)], ["A"], floor_width=20, floor_depth=20, step=5, is_fixed=_is_stairs
    )
    # 20 * 0.85 = 17 rounds back up to 20
    assert (out[0].x, out[0].z) == (20, 20)


def _planner(requests, width=40, depth=40, seed=1, fixed=("Staircase",)):
    config = RoomConfiguration(requests, fixed_room_types=fixed, rng=random.Random(seed))
    return FloorLayoutPlanner(
        floor_width=width,
        floor_depth=depth,
        floor_height=10,
        step=5,
        room_configuration=config,
        rng=random.Random(seed),
    )


def test_plan_floor_places_rooms_in_request_order_without_overlap():
    planner = _planner([("Staircase", 10, 10), ("Office", 15, 20), ("Store", 10, 10)])
    rooms = planner.plan_floor(0)

    assert [r.room_type for r in rooms] == ["Staircase", "Office", "Store"]
    for i, a in enumerate(rooms):
        lo, hi = a.get_bounds()
        assert lo.x >= 0 and lo.z >= 0 and hi.x <= 40 and hi.z <= 40
        for b in rooms[i + 1:]:
            assert not a.footprint.overlaps(b.footprint)
    assert sum(r.footprint.area() for r in rooms) <= 40 * 40


def test_each_floor_starts_from_an_empty_grid():
    planner = _planner([("Hall", 40, 40)])
    assert len(planner.plan_floor(0)) == 1
    rooms = planner.plan_floor(1)
    assert len(rooms) == 1
    assert rooms[0].position.y == 10


def test_fixed_rooms_line_up_across_floors():
    planner = _planner([("Staircase", 10, 10), ("Office", 20, 15)], seed=5)
    ground = {r.room_type: r for r in planner.plan_floor(0)}
    upper = {r.room_type: r for r in planner.plan_floor(1)}
    assert (upper["Staircase"].position.x, upper["Staircase"].position.z) == (
        ground["Staircase"].position.x,
        ground["Staircase"].position.z,
    )


@pytest.mark.parametrize("seed", [0, 3, 8])
def test_rooms_that_do_not_fit_are_dropped(seed):
    planner = _planner([("A", 30, 30), ("B", 30, 30)], width=30, depth=30, seed=seed, fixed=())
    rooms = planner.plan_floor(0)
    # both scale to 25x25, only one fits on a 30x30 floor
    assert len(rooms) == 1
    assert (rooms[0].size.x, rooms[0].size.z) == (25, 25)
