from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Vec3:
    # x/z are plan coordinates, y is vertical
    x: float
    y: float
    z: float

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def distance_to(self, other: "Vec3") -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def as_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass
class Rect:
    """Axis-aligned plan rectangle (x along width, z along depth)."""
    x: float
    z: float
    w: float
    d: float

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.x, self.z, self.x + self.w, self.z + self.d)

    def overlaps(self, other: "Rect") -> bool:
        ax1, az1, ax2, az2 = self.bounds
        bx1, bz1, bx2, bz2 = other.bounds
        return ax1 < bx2 and ax2 > bx1 and az1 < bz2 and az2 > bz1

    def area(self) -> float:
        return max(0.0, self.w) * max(0.0, self.d)


class WallSide(str, Enum):
    FRONT = "frontWall"
    BACK = "backWall"
    LEFT = "leftWall"
    RIGHT = "rightWall"

    @property
    def is_x_axis(self) -> bool:
        """Front/back walls run along x; left/right walls run along z."""
        return self in (WallSide.FRONT, WallSide.BACK)


WALL_ORDER: Tuple[WallSide, ...] = (WallSide.FRONT, WallSide.BACK, WallSide.LEFT, WallSide.RIGHT)


@dataclass
class WallSegment:
    start: float
    end: float
    is_gap: bool = False

    @property
    def length(self) -> float:
        return self.end - self.start

    @property
    def center(self) -> float:
        return self.start + self.length * 0.5


@dataclass
class RoomWall:
    """One side of a room. Carving replaces ``segments``; an empty list means the wall is gone."""
    side: WallSide
    fixed_coord: float
    start: float
    end: float
    base_y: float
    height: float
    segments: List[WallSegment] = field(default_factory=list)

    @property
    def length(self) -> float:
        return self.end - self.start

    @property
    def destroyed(self) -> bool:
        return not self.segments


@dataclass
class Room:
    position: Vec3
    size: Vec3
    room_type: str
    walls: Dict[WallSide, RoomWall] = field(default_factory=dict)
    parent: Optional[str] = None  # enclosing room type for nested cell rooms

    def get_bounds(self) -> Tuple[Vec3, Vec3]:
        return self.position, self.position + self.size

    @property
    def footprint(self) -> Rect:
        return Rect(self.position.x, self.position.z, self.size.x, self.size.z)

    def axis_range(self, side: WallSide) -> Tuple[float, float]:
        lo, hi = self.get_bounds()
        if side.is_x_axis:
            return lo.x, hi.x
        return lo.z, hi.z

    def build_walls(self) -> None:
        """Attach four full-length solid walls along the room's footprint edges."""
        lo, hi = self.get_bounds()
        fixed = {
            WallSide.FRONT: lo.z,
            WallSide.BACK: hi.z,
            WallSide.LEFT: lo.x,
            WallSide.RIGHT: hi.x,
        }
        for side in WALL_ORDER:
            start, end = self.axis_range(side)
            self.walls[side] = RoomWall(
                side=side,
                fixed_coord=fixed[side],
                start=start,
                end=end,
                base_y=lo.y,
                height=self.size.y,
                segments=[WallSegment(start, end, False)],
            )


@dataclass(frozen=True)
class RoomKey:
    building_id: str
    floor_index: int
    room_index: int
    room_type: str


@dataclass
class Box:
    """Axis-aligned solid handed to the mesh backend: centre and full extents."""
    name: str
    kind: str
    center: Vec3
    size: Vec3


@dataclass
class Header:
    side: WallSide
    span: WallSegment
    center: Vec3
    size: Vec3


@dataclass
class OpeningDescriptor:
    position: float
    vertical: float
    width: float
    height: float

    @classmethod
    def boundary(cls, position: float) -> "OpeningDescriptor":
        return cls(position, position, 0.0, 0.0)


@dataclass(frozen=True)
class DoorCandidate:
    x: float
    z: float

    def axis_coord(self, side: WallSide) -> float:
        return self.x if side.is_x_axis else self.z


@dataclass
class ExclusionZone:
    rect: Rect
    y_min: float
    y_max: float
    source: str = "door"


def snap_down(value: float, step: int) -> int:
    return int(value // step) * step


def snap_up(value: float, step: int) -> int:
    return int(math.ceil(value / float(step))) * step
