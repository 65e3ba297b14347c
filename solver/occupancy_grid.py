"""Per-floor occupancy tracking over a fixed-step grid.

Footprints and anchors are expressed in world units and must lie on multiples
of the grid step. A cell is claimed once a committed room covers it and is
never released until the floor is discarded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from geometry.kernel import Vec3


@dataclass
class FreeSpaces:
    corner: List[Vec3] = field(default_factory=list)
    edge: List[Vec3] = field(default_factory=list)
    regular: List[Vec3] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.corner) + len(self.edge) + len(self.regular)


class OccupancyGrid:
    def __init__(self, width: int, depth: int, step: int):
        if step <= 0:
            raise ValueError("Grid step must be positive")
        self.width = int(width)
        self.depth = int(depth)
        self.step = int(step)
        self.cols = int(math.ceil(self.width / self.step))
        self.rows = int(math.ceil(self.depth / self.step))
        self.cells = [[False] * self.rows for _ in range(self.cols)]

    def _cell_span(self, origin: Vec3, size: Vec3) -> Tuple[int, int, int, int]:
        i0 = int(origin.x // self.step)
        k0 = int(origin.z // self.step)
        i1 = int(math.ceil((origin.x + size.x) / self.step))
        k1 = int(math.ceil((origin.z + size.z) / self.step))
        return i0, k0, i1, k1

    def is_area_available(self, origin: Vec3, size: Vec3) -> bool:
        if size.x <= 0 or size.z <= 0:
            return False
        if origin.x + size.x > self.width or origin.z + size.z > self.depth:
            return False
        i0, k0, i1, k1 = self._cell_span(origin, size)
        if i0 < 0 or k0 < 0 or i1 > self.cols or k1 > self.rows:
            return False
        for i in range(i0, i1):
            column = self.cells[i]
            for k in range(k0, k1):
                if column[k]:
                    return False
        return True

    def occupy_area(self, origin: Vec3, size: Vec3) -> None:
        i0, k0, i1, k1 = self._cell_span(origin, size)
        for i in range(max(0, i0), min(self.cols, i1)):
            for k in range(max(0, k0), min(self.rows, k1)):
                self.cells[i][k] = True

    def occupied_count(self) -> int:
        return sum(sum(1 for c in col if c) for col in self.cells)

    def render(self) -> str:
        """Text map of the grid, one row per z cell, '#' for claimed cells."""
        lines = []
        for k in reversed(range(self.rows)):
            row = "".join("#" if self.cells[i][k] else "." for i in range(self.cols))
            lines.append(f"{k * self.step:>5} {row}")
        return "\n".join(lines)


def _sides_touched(grid: OccupancyGrid, origin: Vec3, size: Vec3) -> int:
    touched = 0
    if origin.x == 0:
        touched += 1
    if origin.x + size.x == grid.width:
        touched += 1
    if origin.z == 0:
        touched += 1
    if origin.z + size.z == grid.depth:
        touched += 1
    return touched


def get_free_spaces(grid: OccupancyGrid, desired_size: Vec3) -> FreeSpaces:
    """Return every anchor where ``desired_size`` fits, bucketed by boundary contact."""
    spaces = FreeSpaces()
    for i in range(grid.cols):
        for k in range(grid.rows):
            anchor = Vec3(i * grid.step, 0, k * grid.step)
            if not grid.is_area_available(anchor, desired_size):
                continue
            touched = _sides_touched(grid, anchor, desired_size)
            if touched >= 2:
                spaces.corner.append(anchor)
            elif touched == 1:
                spaces.edge.append(anchor)
            else:
                spaces.regular.append(anchor)
    return spaces
