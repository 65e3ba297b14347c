from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Tuple

from geometry.kernel import Room, Vec3
from solver.occupancy_grid import OccupancyGrid, get_free_spaces

log = logging.getLogger(__name__)


class FixedRoomRegistry:
    """Ground-floor placements of fixed room types, reused on every other floor.

    Scoped to one building; call :meth:`clear` when the building is done.
    """

    def __init__(self) -> None:
        self._positions: Dict[str, List[Vec3]] = {}
        self._sizes: Dict[str, Vec3] = {}

    def record(self, room_type: str, position: Vec3, size: Vec3) -> None:
        self._positions.setdefault(room_type, []).append(position)
        self._sizes.setdefault(room_type, size)

    def lookup(self, room_type: str) -> Optional[Tuple[Vec3, Vec3]]:
        positions = self._positions.get(room_type) or []
        if not positions:
            return None
        return positions[0], self._sizes[room_type]

    def clear(self) -> None:
        self._positions.clear()
        self._sizes.clear()


class RoomPlacer:
    def __init__(
        self,
        grid: OccupancyGrid,
        *,
        floor_index: int,
        floor_height: int,
        rng: random.Random,
        is_fixed: Callable[[str], bool],
        fixed_registry: FixedRoomRegistry,
    ):
        self.grid = grid
        self.floor_index = floor_index
        self.floor_height = floor_height
        self.rng = rng
        self.is_fixed = is_fixed
        self.fixed_registry = fixed_registry

    def _candidates(self, desired_size: Vec3) -> List[Vec3]:
        spaces = get_free_spaces(self.grid, desired_size)
        candidates: List[Vec3] = []
        for tier in (spaces.corner, spaces.edge, spaces.regular):
            shuffled = list(tier)
            self.rng.shuffle(shuffled)
            candidates.extend(shuffled)
        return candidates

    def _commit(self, position: Vec3, size: Vec3, room_type: str) -> Room:
        room = Room(
            Vec3(int(position.x), self.floor_index * self.floor_height, int(position.z)),
            Vec3(int(size.x), int(size.y), int(size.z)),
            room_type,
        )
        lo, hi = room.get_bounds()
        self.grid.occupy_area(lo, hi - lo)
        return room

    def _place_fixed_from_registry(self, room_type: str) -> Optional[Room]:
        recorded = self.fixed_registry.lookup(room_type)
        if recorded is None:
            return None
        position, size = recorded
        if not self.grid.is_area_available(position, size):
            log.warning(
                "Fixed room %s cannot reuse ground-floor position (%s, %s) on floor %d: area taken",
                room_type, position.x, position.z, self.floor_index,
            )
            return None
        return self._commit(position, size, room_type)

    def place_room(self, desired_size: Vec3, room_type: str) -> Optional[Room]:
        """Place a room of ``desired_size``, shrinking by one grid step per failed pass.

        Candidates are computed once for ``desired_size`` and retested at every
        smaller size. Returns ``None`` when no size down to one grid step fits.
        """
        fixed = self.is_fixed(room_type)
        if fixed and self.floor_index > 0 and self.fixed_registry.lookup(room_type) is not None:
            return self._place_fixed_from_registry(room_type)

        candidates = self._candidates(desired_size)
        step = self.grid.step
        min_x, min_z = step, step
        current = desired_size
        while current.x >= min_x and current.z >= min_z:
            for candidate in candidates:
                if self.grid.is_area_available(candidate, current):
                    if fixed and self.floor_index == 0:
                        self.fixed_registry.record(room_type, candidate, current)
                    return self._commit(candidate, current, room_type)
            shrunk = Vec3(max(current.x - step, min_x), current.y, max(current.z - step, min_z))
            if shrunk == current:
                break
            current = shrunk

        log.info("No free space for %s (%sx%s) on floor %d",
                 room_type, desired_size.x, desired_size.z, self.floor_index)
        return None
