"""Default door and window planners.

``DoorGapPlanner`` proposes one interior door per pair of rooms sharing a wall
long enough for it. ``ExteriorOpeningPlanner`` puts a window on every room span
that reaches the building envelope, plus an entrance door on the ground floor.
Both only decide *where* openings go; carving happens in ``geometry``.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from Generate.constants import (
    DOOR_HEIGHT_DEFAULT,
    DOOR_WIDTH_DEFAULT,
    WINDOW_EDGE_MARGIN,
    WINDOW_HEIGHT_DEFAULT,
    WINDOW_SILL_FRACTION,
    WINDOW_WIDTH_DEFAULT,
)
from geometry.kernel import DoorCandidate, OpeningDescriptor, Room, WallSide, WALL_ORDER

log = logging.getLogger(__name__)

GroupedCandidates = Dict[Tuple[int, WallSide], List[DoorCandidate]]


def _overlap(a1: float, a2: float, b1: float, b2: float) -> Optional[Tuple[float, float]]:
    lo = max(a1, b1)
    hi = min(a2, b2)
    return (lo, hi) if hi > lo else None


class DoorGapPlanner:
    def __init__(self, door_width: float = DOOR_WIDTH_DEFAULT, door_height: float = DOOR_HEIGHT_DEFAULT):
        self.door_width = door_width
        self.door_height = door_height

    def door_height_for(self, floor_height: float) -> float:
        return min(self.door_height, float(floor_height))

    def _door_start(self, span: Tuple[float, float]) -> Optional[int]:
        lo, hi = span
        if hi - lo < self.door_width:
            return None
        return int(lo + (hi - lo - self.door_width) // 2)

    def find_door_candidates(self, rooms: Sequence[Room]) -> GroupedCandidates:
        """Group door candidates by (room index, wall side), in room order."""
        grouped: GroupedCandidates = {}

        def add(idx: int, side: WallSide, cand: DoorCandidate) -> None:
            grouped.setdefault((idx, side), []).append(cand)

        for i, a in enumerate(rooms):
            a_lo, a_hi = a.get_bounds()
            for j in range(i + 1, len(rooms)):
                b_lo, b_hi = rooms[j].get_bounds()
                # shared wall perpendicular to x (a's right / b's left or the reverse)
                for a_side, b_side, coord in (
                    (WallSide.RIGHT, WallSide.LEFT, a_hi.x if a_hi.x == b_lo.x else None),
                    (WallSide.LEFT, WallSide.RIGHT, a_lo.x if a_lo.x == b_hi.x else None),
                ):
                    if coord is None:
                        continue
                    span = _overlap(a_lo.z, a_hi.z, b_lo.z, b_hi.z)
                    start = self._door_start(span) if span else None
                    if start is not None:
                        cand = DoorCandidate(coord, start)
                        add(i, a_side, cand)
                        add(j, b_side, cand)
                # shared wall perpendicular to z
                for a_side, b_side, coord in (
                    (WallSide.BACK, WallSide.FRONT, a_hi.z if a_hi.z == b_lo.z else None),
                    (WallSide.FRONT, WallSide.BACK, a_lo.z if a_lo.z == b_hi.z else None),
                ):
                    if coord is None:
                        continue
                    span = _overlap(a_lo.x, a_hi.x, b_lo.x, b_hi.x)
                    start = self._door_start(span) if span else None
                    if start is not None:
                        cand = DoorCandidate(start, coord)
                        add(i, a_side, cand)
                        add(j, b_side, cand)
        log.debug("Door candidates on %d walls", len(grouped))
        return grouped


class ExteriorOpeningPlanner:
    def __init__(
        self,
        *,
        window_width: float = WINDOW_WIDTH_DEFAULT,
        window_height: float = WINDOW_HEIGHT_DEFAULT,
        window_vertical: float = WINDOW_SILL_FRACTION,
        door_width: float = DOOR_WIDTH_DEFAULT,
        margin: float = WINDOW_EDGE_MARGIN,
    ):
        self.window_width = window_width
        self.window_height = window_height
        self.window_vertical = window_vertical
        self.door_width = door_width
        self.margin = margin

    @staticmethod
    def _exterior_span(room: Room, side: WallSide, width: int, depth: int) -> Optional[Tuple[float, float]]:
        lo, hi = room.get_bounds()
        touches = {
            WallSide.FRONT: lo.z == 0,
            WallSide.BACK: hi.z == depth,
            WallSide.LEFT: lo.x == 0,
            WallSide.RIGHT: hi.x == width,
        }[side]
        if not touches:
            return None
        return room.axis_range(side)

    def plan(
        self,
        rooms: Sequence[Room],
        *,
        floor_width: int,
        floor_depth: int,
        floor_height: float,
        door_height: float,
        is_ground_floor: bool,
    ) -> Dict[WallSide, List[OpeningDescriptor]]:
        openings: Dict[WallSide, List[OpeningDescriptor]] = {side: [] for side in WALL_ORDER}
        entrance_placed = not is_ground_floor
        for room in rooms:
            for side in WALL_ORDER:
                span = self._exterior_span(room, side, floor_width, floor_depth)
                if span is None:
                    continue
                a, b = span
                dim = floor_width if side.is_x_axis else floor_depth
                center = (a + b) / 2.0 / dim
                if side == WallSide.FRONT and not entrance_placed and b - a >= self.door_width + 2 * self.margin:
                    openings[side].append(OpeningDescriptor(
                        center, door_height / 2.0 / floor_height, self.door_width, door_height))
                    entrance_placed = True
                elif b - a >= self.window_width + 2 * self.margin:
                    openings[side].append(OpeningDescriptor(
                        center, self.window_vertical, self.window_width, self.window_height))
        for side in WALL_ORDER:
            openings[side].sort(key=lambda o: o.position)
        return openings
