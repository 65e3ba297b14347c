"""
Room configuration: which rooms a floor asks for and how big they want to be.

The generator treats this as an external source of (room type, desired size)
pairs. When the building parameters carry an explicit ``rooms`` list that list
is used verbatim on every floor; otherwise a default catalog is sampled.
"""
import logging
import random
from typing import Dict, Iterable, List, Optional, Tuple

from geometry.kernel import Vec3

logger = logging.getLogger(__name__)

# Size options (width, depth) in world units; the order of this mapping is the
# order rooms are requested in.
DEFAULT_ROOM_SIZES: Dict[str, List[Tuple[int, int]]] = {
    "Staircase": [(10, 10)],
    "Cell Block": [(45, 50), (45, 60)],
    "Shower Room": [(10, 15), (15, 15)],
    "Visitation Room": [(20, 20), (20, 25), (25, 25)],
    "Toilet Room": [(10, 10), (10, 15)],
    "Laundry Room": [(10, 15), (15, 15), (15, 20)],
}

# Rooms that only make sense on the ground floor
GROUND_FLOOR_ONLY = {"Visitation Room"}


class RoomConfiguration:
    """Supply the (room type, desired size) list for each floor."""

    def __init__(self, requests: Optional[Iterable[Tuple[str, int, int]]] = None,
                 fixed_room_types: Iterable[str] = (),
                 rng: Optional[random.Random] = None):
        self.requests = list(requests) if requests is not None else None
        self.fixed_room_types = {t for t in fixed_room_types}
        self.rng = rng or random.Random()

    @classmethod
    def from_params(cls, params, rng: Optional[random.Random] = None) -> "RoomConfiguration":
        requests = None
        if params.rooms is not None:
            requests = [(r.type, r.width, r.depth) for r in params.rooms]
        return cls(requests, params.fixedRoomTypes, rng=rng)

    def is_fixed(self, room_type: str) -> bool:
        return room_type in self.fixed_room_types

    def _choose_room_size(self, room_type: str, max_w: int, max_d: int) -> Tuple[int, int]:
        options = DEFAULT_ROOM_SIZES.get(room_type, [(10, 10)])
        w, d = self.rng.choice(options)
        return min(w, max_w), min(d, max_d)

    def generate_room_configs(self, floor_width: int, floor_depth: int, floor_height: int,
                              floor_index: int = 0) -> List[Tuple[str, Vec3]]:
        if self.requests is not None:
            return [(t, Vec3(w, floor_height, d)) for t, w, d in self.requests]

        configs: List[Tuple[str, Vec3]] = []
        for room_type in DEFAULT_ROOM_SIZES:
            if floor_index > 0 and room_type in GROUND_FLOOR_ONLY:
                continue
            w, d = self._choose_room_size(room_type, floor_width, floor_depth)
            configs.append((room_type, Vec3(w, floor_height, d)))
        logger.debug("Floor %d requests %d rooms", floor_index, len(configs))
        return configs
