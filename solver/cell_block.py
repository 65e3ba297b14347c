from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from Generate.constants import CELLS_PER_SIDE, CELL_WIDTH
from geometry.kernel import ExclusionZone, Rect, Room, Vec3

log = logging.getLogger(__name__)


@dataclass
class CellCandidate:
    z_offset: int   # relative to the cell block's front edge
    length: int


def cell_candidates(available_length: int, step: int, cells_per_side: int = CELLS_PER_SIDE) -> List[CellCandidate]:
    """Evenly sized cells along a side; leftover depth goes before the first cell."""
    cell_length = (available_length // cells_per_side // step) * step
    if cell_length <= 0:
        return []
    leftover = available_length - cell_length * cells_per_side
    return [CellCandidate(leftover + i * cell_length, cell_length) for i in range(cells_per_side)]


def _overlaps_any(rect: Rect, zones: Sequence[ExclusionZone]) -> bool:
    return any(rect.overlaps(z.rect) for z in zones)


def plan_cell_rooms(
    block: Room,
    zones: Sequence[ExclusionZone],
    *,
    step: int,
    cell_width: int = CELL_WIDTH,
    cells_per_side: int = CELLS_PER_SIDE,
) -> List[Room]:
    """Subdivide a cell block into cell rooms along its left and right walls.

    Cells overlapping a furniture-exclusion zone (doorways, fixed rooms) are skipped.
    """
    if block.size.x < cell_width:
        log.warning("Cell block %s is narrower than one cell (%s < %s)",
                    block.room_type, block.size.x, cell_width)
        return []
    sides = [("LeftSide", block.position.x)]
    if block.size.x >= 2 * cell_width:
        sides.append(("RightSide", block.position.x + block.size.x - cell_width))

    cells: List[Room] = []
    candidates = cell_candidates(int(block.size.z), step, cells_per_side)
    for label, wall_x in sides:
        index = 1
        for cand in candidates:
            z = block.position.z + cand.z_offset
            rect = Rect(wall_x, z, cell_width, cand.length)
            if _overlaps_any(rect, zones):
                continue
            cell = Room(
                Vec3(wall_x, block.position.y, z),
                Vec3(cell_width, block.size.y, cand.length),
                f"Room_Cell_{label}_{index}",
                parent=block.room_type,
            )
            cell.build_walls()
            cells.append(cell)
            index += 1
    log.debug("Cell block %s: %d cells", block.room_type, len(cells))
    return cells
