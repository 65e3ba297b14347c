"""Exterior wall segmentation around windows and doors.

Openings arrive per wall per floor as fractions along the wall. Two zero-size
sentinels are added at 0 and 1, and each consecutive pair of openings bounds
one solid span. Each real opening also gets a sill below it and a lintel
above it.

All interval math is done in normalised wall space first and only then scaled
to world units, so the exclusion scale and position bias rules stay explicit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from Generate.constants import GAP_POSITION_OFFSET, GAP_SCALE_FACTOR, WALL_THICKNESS_DEFAULT
from geometry.kernel import Box, OpeningDescriptor, Vec3, WallSegment, WallSide, WALL_ORDER

log = logging.getLogger(__name__)


@dataclass
class Filler:
    """Solid band above or below an opening, in wall-local units."""
    kind: str  # "sill" or "lintel"
    span: WallSegment
    bottom: float
    height: float

    @property
    def center_y(self) -> float:
        return self.bottom + self.height * 0.5


@dataclass
class WallSegmentation:
    wall_length: float
    floor_height: float
    solids: List[WallSegment] = field(default_factory=list)
    gaps: List[WallSegment] = field(default_factory=list)
    fillers: List[Filler] = field(default_factory=list)

    def covered_length(self) -> float:
        return sum(s.length for s in self.solids) + sum(g.length for g in self.gaps)


def insert_boundary_openings(openings: Sequence[OpeningDescriptor]) -> List[OpeningDescriptor]:
    ordered = sorted(openings, key=lambda o: o.position)
    return [OpeningDescriptor.boundary(0.0)] + ordered + [OpeningDescriptor.boundary(1.0)]


def gap_scaling_and_positioning(gaps: Sequence[OpeningDescriptor], j: int, dim: float) -> Tuple[float, float]:
    """Exclusion scale (fraction of ``dim``) and position bias (world units) for span ``j``."""
    if j == 1:
        scaling = (gaps[j].width / 2.0) / dim
        positioning = -GAP_POSITION_OFFSET * gaps[j].width
    elif j == len(gaps) - 1:
        scaling = (gaps[j - 1].width / 2.0) / dim
        positioning = GAP_POSITION_OFFSET * gaps[j - 1].width
    else:
        scaling = ((gaps[j].width + gaps[j - 1].width) / 2.0) / dim
        positioning = -GAP_POSITION_OFFSET * (gaps[j].width - gaps[j - 1].width)
    return scaling, positioning


def opening_fillers(opening: OpeningDescriptor, wall_length: float, floor_height: float) -> List[Filler]:
    center = opening.position * wall_length
    span = WallSegment(center - opening.width / 2.0, center + opening.width / 2.0, False)
    fillers: List[Filler] = []
    for kind in ("sill", "lintel"):
        if kind == "sill":
            amount = opening.vertical
            offset = -GAP_POSITION_OFFSET
            mid_fraction = opening.vertical / 2.0
        else:
            amount = 1.0 - opening.vertical
            offset = GAP_POSITION_OFFSET
            mid_fraction = 1.0 - (1.0 - opening.vertical) / 2.0
        height = max(amount - GAP_SCALE_FACTOR * opening.height / floor_height, 0.0) * floor_height
        if height == 0:
            continue
        center_y = mid_fraction * floor_height + opening.height * offset
        fillers.append(Filler(kind, span, center_y - height / 2.0, height))
    return fillers


def segment_exterior_wall(
    openings: Sequence[OpeningDescriptor],
    wall_length: float,
    floor_height: float,
) -> WallSegmentation:
    """Split one wall on one floor into solid spans, opening gaps and fillers."""
    gaps = insert_boundary_openings(openings)
    result = WallSegmentation(wall_length=wall_length, floor_height=floor_height)
    for j in range(1, len(gaps)):
        scaling, positioning = gap_scaling_and_positioning(gaps, j, wall_length)
        length = gaps[j].position - gaps[j - 1].position - scaling
        if length > 0:
            mid = (gaps[j].position + gaps[j - 1].position) / 2.0
            center = mid * wall_length + positioning
            half = length * wall_length / 2.0
            result.solids.append(WallSegment(center - half, center + half, False))
        if j < len(gaps) - 1:
            # fillers follow every real opening, even when the span before it was dropped
            opening = gaps[j]
            c = opening.position * wall_length
            result.gaps.append(WallSegment(c - opening.width / 2.0, c + opening.width / 2.0, True))
            result.fillers.extend(opening_fillers(opening, wall_length, floor_height))
    return result


def _wall_frame(side: WallSide, origin: Vec3, size: Vec3, thickness: float) -> Tuple[float, float]:
    """Return (axis start, fixed plan coordinate) of an exterior wall's outer slab."""
    if side == WallSide.FRONT:
        return origin.x, origin.z - thickness / 2.0
    if side == WallSide.BACK:
        return origin.x, origin.z + size.z + thickness / 2.0
    if side == WallSide.LEFT:
        return origin.z, origin.x - thickness / 2.0
    return origin.z, origin.x + size.x + thickness / 2.0


def _box(side: WallSide, name: str, kind: str, axis_center: float, axis_len: float,
         fixed: float, center_y: float, height: float, thickness: float) -> Box:
    if side.is_x_axis:
        return Box(name, kind, Vec3(axis_center, center_y, fixed), Vec3(axis_len, height, thickness))
    return Box(name, kind, Vec3(fixed, center_y, axis_center), Vec3(thickness, height, axis_len))


def exterior_wall_pieces(
    segmentation: WallSegmentation,
    side: WallSide,
    *,
    building_origin: Vec3,
    building_size: Vec3,
    floor_index: int,
    wall_thickness: float = WALL_THICKNESS_DEFAULT,
) -> List[Box]:
    axis_start, fixed = _wall_frame(side, building_origin, building_size, wall_thickness)
    base = floor_index * segmentation.floor_height
    pieces: List[Box] = []
    for n, seg in enumerate(segmentation.solids, start=1):
        pieces.append(_box(
            side, f"horizontalWall_{side.value}_{n}_Floor{floor_index}", "wall",
            axis_start + seg.center, seg.length, fixed,
            base + segmentation.floor_height / 2.0, segmentation.floor_height, wall_thickness,
        ))
    for n, filler in enumerate(segmentation.fillers, start=1):
        pieces.append(_box(
            side, f"verticalSegment_{side.value}_{filler.kind}_{n}_Floor{floor_index}", filler.kind,
            axis_start + filler.span.center, filler.span.length, fixed,
            base + filler.center_y, filler.height, wall_thickness,
        ))
    return pieces


def segment_building_exterior(
    floor_openings: Dict[int, Dict[WallSide, List[OpeningDescriptor]]],
    *,
    building_origin: Vec3,
    building_size: Vec3,
    floor_height: float,
    wall_thickness: float = WALL_THICKNESS_DEFAULT,
) -> Dict[int, Dict[WallSide, Tuple[WallSegmentation, List[Box]]]]:
    """Segment every exterior wall of every floor once all floors are laid out."""
    out: Dict[int, Dict[WallSide, Tuple[WallSegmentation, List[Box]]]] = {}
    for floor_index in sorted(floor_openings):
        per_side = floor_openings[floor_index]
        out[floor_index] = {}
        for side in WALL_ORDER:
            wall_length = building_size.x if side.is_x_axis else building_size.z
            seg = segment_exterior_wall(per_side.get(side, []), wall_length, floor_height)
            pieces = exterior_wall_pieces(
                seg, side,
                building_origin=building_origin,
                building_size=building_size,
                floor_index=floor_index,
                wall_thickness=wall_thickness,
            )
            out[floor_index][side] = (seg, pieces)
        log.debug("Floor %d exterior: %d pieces", floor_index,
                  sum(len(p) for _, p in out[floor_index].values()))
    return out
