from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence, Tuple

from Generate.constants import AREA_BUDGET_FRACTION, SHRINK_SCALE
from geometry.kernel import Room, Vec3, snap_down, snap_up
from solver.occupancy_grid import OccupancyGrid
from solver.room_placer import FixedRoomRegistry, RoomPlacer

log = logging.getLogger(__name__)


def snap_room_sizes(configs: Sequence[Tuple[str, Vec3]], step: int) -> List[Vec3]:
    """Snap x/z down to the grid; anything smaller than one step becomes one step."""
    sizes: List[Vec3] = []
    for _, size in configs:
        sizes.append(Vec3(
            max(snap_down(size.x, step), step),
            size.y,
            max(snap_down(size.z, step), step),
        ))
    return sizes


def rebalance_room_sizes(
    sizes: List[Vec3],
    room_types: Sequence[str],
    *,
    floor_width: int,
    floor_depth: int,
    step: int,
    is_fixed: Callable[[str], bool],
    budget_fraction: float = AREA_BUDGET_FRACTION,
    scale: float = SHRINK_SCALE,
) -> List[Vec3]:
    """Scale non-fixed rooms once if the floor is over its area budget.

    A single pass only: the result may still exceed the budget.
    """
    total = sum(s.x * s.z for s in sizes)
    allowed = budget_fraction * floor_width * floor_depth
    if total <= allowed:
        return list(sizes)
    log.info("Requested area %.0f exceeds budget %.0f; scaling non-fixed rooms by %.2f",
             total, allowed, scale)
    out: List[Vec3] = []
    for size, room_type in zip(sizes, room_types):
        if is_fixed(room_type):
            out.append(size)
            continue
        new_w = int(size.x * scale)
        new_d = int(size.z * scale)
        out.append(Vec3(snap_up(new_w, step), size.y, snap_up(new_d, step)))
    return out


class FloorLayoutPlanner:
    """Lay out the rooms of one floor at a time.

    The planner owns the floor's :class:`OccupancyGrid`; a fresh grid is made
    at the start of every :meth:`plan_floor` call.
    """

    def __init__(
        self,
        *,
        floor_width: int,
        floor_depth: int,
        floor_height: int,
        step: int,
        room_configuration,
        fixed_registry: Optional[FixedRoomRegistry] = None,
        rng: Optional[random.Random] = None,
    ):
        self.floor_width = floor_width
        self.floor_depth = floor_depth
        self.floor_height = floor_height
        self.step = step
        self.room_configuration = room_configuration
        self.fixed_registry = fixed_registry if fixed_registry is not None else FixedRoomRegistry()
        self.rng = rng or random.Random()
        self.grid = OccupancyGrid(floor_width, floor_depth, step)

    def plan_floor(self, floor_index: int) -> List[Room]:
        self.grid = OccupancyGrid(self.floor_width, self.floor_depth, self.step)

        configs = self.room_configuration.generate_room_configs(
            self.floor_width, self.floor_depth, self.floor_height, floor_index
        )
        room_types = [t for t, _ in configs]
        sizes = snap_room_sizes(configs, self.step)
        sizes = rebalance_room_sizes(
            sizes,
            room_types,
            floor_width=self.floor_width,
            floor_depth=self.floor_depth,
            step=self.step,
            is_fixed=self.room_configuration.is_fixed,
        )

        placer = RoomPlacer(
            self.grid,
            floor_index=floor_index,
            floor_height=self.floor_height,
            rng=self.rng,
            is_fixed=self.room_configuration.is_fixed,
            fixed_registry=self.fixed_registry,
        )
        rooms: List[Room] = []
        for room_type, size in zip(room_types, sizes):
            room = placer.place_room(size, room_type)
            if room is not None:
                rooms.append(room)
        log.info("Floor %d: placed %d/%d rooms", floor_index, len(rooms), len(configs))
        return rooms
