"""Interior wall carving around door candidates.

A room wall with one door candidate is split into the piece before the door,
the piece after it and a header over it. A wall with several candidates is
rebuilt from an alternating solid/gap walk along the wall axis, dropping any
interval shorter than ``SEGMENT_THRESHOLD``.

Adjoining rooms carve their shared wall independently, so both ask for a
header over the same doorway. The floor's :class:`HeaderPositionSet` makes
the first request win: later requests within tolerance place nothing but
still reserve the doorway as a furniture-exclusion zone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from Generate.constants import (
    DOOR_CLEARANCE_MARGIN,
    HEADER_DEDUP_TOLERANCE,
    SEGMENT_THRESHOLD,
    WALL_THICKNESS_DEFAULT,
)
from geometry.kernel import (
    Box,
    DoorCandidate,
    ExclusionZone,
    Header,
    Rect,
    Room,
    RoomKey,
    Vec3,
    WallSegment,
    WallSide,
)

log = logging.getLogger(__name__)


class HeaderPositionSet:
    """Building-relative header centres placed so far on one floor."""

    def __init__(self, tolerance: float = HEADER_DEDUP_TOLERANCE):
        self.tolerance = tolerance
        self._positions: List[Vec3] = []

    def __len__(self) -> int:
        return len(self._positions)

    def is_duplicate(self, pos: Vec3) -> bool:
        return any(pos.distance_to(existing) <= self.tolerance for existing in self._positions)

    def claim(self, pos: Vec3) -> bool:
        """Record ``pos`` unless an existing header is within tolerance; True if recorded."""
        if self.is_duplicate(pos):
            return False
        self._positions.append(pos)
        return True


@dataclass
class WallCarveResult:
    room_key: Optional[RoomKey] = None
    side: Optional[WallSide] = None
    solids: List[WallSegment] = field(default_factory=list)
    headers: List[Header] = field(default_factory=list)
    openings: List[Box] = field(default_factory=list)
    exclusion_zones: List[ExclusionZone] = field(default_factory=list)
    suppressed_headers: int = 0
    fitted: bool = True


def build_segments(room_min: float, room_max: float, door_width: float,
                   positions: Sequence[float]) -> List[WallSegment]:
    """Alternate solid/gap intervals along a wall for sorted door start positions."""
    segments: List[WallSegment] = []
    current = room_min
    for gap_start in positions:
        gap_end = gap_start + door_width
        if gap_start > current:
            segments.append(WallSegment(current, gap_start, False))
        segments.append(WallSegment(gap_start, gap_end, True))
        current = gap_end
    if current < room_max:
        segments.append(WallSegment(current, room_max, False))
    return segments


class InteriorWallCarver:
    def __init__(
        self,
        *,
        door_width: float,
        door_height: float,
        header_positions: HeaderPositionSet,
        building_id: str,
        floor_index: int,
        segment_threshold: float = SEGMENT_THRESHOLD,
        clearance_margin: float = DOOR_CLEARANCE_MARGIN,
        wall_thickness: float = WALL_THICKNESS_DEFAULT,
    ):
        self.door_width = door_width
        self.door_height = door_height
        self.header_positions = header_positions
        self.building_id = building_id
        self.floor_index = floor_index
        self.segment_threshold = segment_threshold
        self.clearance_margin = clearance_margin
        self.wall_thickness = wall_thickness
        self.exclusion_zones: Dict[RoomKey, List[ExclusionZone]] = {}

    def room_key(self, room: Room, room_index: int) -> RoomKey:
        return RoomKey(self.building_id, self.floor_index, room_index, room.room_type)

    # -- entry points -------------------------------------------------

    def carve_grouped(
        self,
        grouped: Mapping[Tuple[int, WallSide], List[DoorCandidate]],
        rooms: Sequence[Room],
    ) -> List[WallCarveResult]:
        results: List[WallCarveResult] = []
        for (room_index, side), candidates in grouped.items():
            if not 0 <= room_index < len(rooms):
                log.warning("Door candidates reference room #%d which is not on floor %d",
                            room_index, self.floor_index)
                continue
            results.append(self.carve(rooms[room_index], side, candidates, room_index))
        return results

    def carve(self, room: Room, side: WallSide, candidates: Sequence[DoorCandidate],
              room_index: int) -> WallCarveResult:
        key = self.room_key(room, room_index)
        result = WallCarveResult(room_key=key, side=side)
        if not candidates:
            return result
        if room.walls.get(side) is None:
            log.warning("Missing %s for %s on floor %d", side.value, room.room_type, self.floor_index)
            result.fitted = False
            return result
        if len(candidates) == 1:
            self._carve_single(room, side, candidates[0], key, result)
        else:
            self._carve_multiple(room, side, candidates, key, result)
        return result

    # -- single door ---------------------------------------------------

    def _carve_single(self, room: Room, side: WallSide, candidate: DoorCandidate,
                      key: RoomKey, result: WallCarveResult) -> None:
        wall = room.walls[side]
        room_min, room_max = room.axis_range(side)
        coord = candidate.axis_coord(side)
        first = coord - room_min
        second = room_max - (coord + self.door_width)
        if first < 0 or second < 0:
            axis = "x" if side.is_x_axis else "z"
            log.warning("Door gap on %s-axis does not fit in room %s", axis, room.room_type)
            result.fitted = False
            return

        solids: List[WallSegment] = []
        if first >= self.segment_threshold:
            solids.append(WallSegment(room_min, coord, False))
        if second >= self.segment_threshold:
            solids.append(WallSegment(coord + self.door_width, room_max, False))
        wall.segments = solids
        result.solids.extend(solids)

        if self.door_width >= self.segment_threshold:
            self._request_header(room, side, WallSegment(coord, coord + self.door_width, True), key, result)

    # -- multiple doors --------------------------------------------------

    def _carve_multiple(self, room: Room, side: WallSide, candidates: Sequence[DoorCandidate],
                        key: RoomKey, result: WallCarveResult) -> None:
        wall = room.walls[side]
        room_min, room_max = room.axis_range(side)
        positions = sorted(c.axis_coord(side) for c in candidates)
        segments = build_segments(room_min, room_max, self.door_width, positions)

        solids: List[WallSegment] = []
        for seg in segments:
            if seg.length < self.segment_threshold:
                continue
            if seg.is_gap:
                self._request_header(room, side, seg, key, result)
            else:
                solids.append(seg)
        wall.segments = solids
        result.solids.extend(solids)
        if not solids:
            log.warning("No solid wall left on %s of %s (%s)", side.value, room.room_type, self.building_id)

    # -- headers ---------------------------------------------------------

    def _header_geometry(self, room: Room, side: WallSide, span: WallSegment) -> Tuple[Vec3, Vec3]:
        wall = room.walls[side]
        room_height = room.size.y
        header_height = room_height - self.door_height
        center_y = room.position.y + self.door_height + header_height * 0.5
        if side.is_x_axis:
            center = Vec3(span.center, center_y, wall.fixed_coord)
            size = Vec3(span.length, header_height, self.wall_thickness)
        else:
            center = Vec3(wall.fixed_coord, center_y, span.center)
            size = Vec3(self.wall_thickness, header_height, span.length)
        return center, size

    def _door_zone(self, room: Room, side: WallSide, span: WallSegment) -> ExclusionZone:
        lo, hi = room.get_bounds()
        margin = self.clearance_margin
        if side == WallSide.FRONT:
            rect = Rect(span.start, lo.z, span.length, min(margin, room.size.z))
        elif side == WallSide.BACK:
            depth = min(margin, room.size.z)
            rect = Rect(span.start, hi.z - depth, span.length, depth)
        elif side == WallSide.LEFT:
            rect = Rect(lo.x, span.start, min(margin, room.size.x), span.length)
        else:
            width = min(margin, room.size.x)
            rect = Rect(hi.x - width, span.start, width, span.length)
        return ExclusionZone(rect, room.position.y, room.position.y + self.door_height, "door")

    def _request_header(self, room: Room, side: WallSide, span: WallSegment,
                        key: RoomKey, result: WallCarveResult) -> None:
        center, size = self._header_geometry(room, side, span)
        zone = self._door_zone(room, side, span)
        result.exclusion_zones.append(zone)
        self.exclusion_zones.setdefault(key, []).append(zone)

        if not self.header_positions.claim(center):
            result.suppressed_headers += 1
            log.debug("Duplicate header near (%.2f, %.2f, %.2f) for %s; skipped",
                      center.x, center.y, center.z, room.room_type)
            return

        # door as tall as the room: nothing above it, the doorway still dedups
        if size.y > 0:
            result.headers.append(Header(side, span, center, size))
        void_center = Vec3(center.x, room.position.y + self.door_height * 0.5, center.z)
        void_size = Vec3(size.x, self.door_height, size.z)
        result.openings.append(Box("door_gap", "opening", void_center, void_size))
