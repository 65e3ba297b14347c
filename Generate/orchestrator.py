import os, json, logging, random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from Generate.params import BuildingParams
from Generate.constants import VERSION, WALL_THICKNESS_DEFAULT
from dataset.openings import DoorGapPlanner, ExteriorOpeningPlanner, GroupedCandidates
from dataset.room_catalog import RoomConfiguration
from geometry.exterior_walls import WallSegmentation, segment_building_exterior
from geometry.interior_walls import HeaderPositionSet, InteriorWallCarver, WallCarveResult
from geometry.kernel import (
    Box,
    ExclusionZone,
    OpeningDescriptor,
    Room,
    RoomKey,
    Vec3,
    WallSide,
)
from solver.cell_block import plan_cell_rooms
from solver.floor_planner import FloorLayoutPlanner
from solver.room_placer import FixedRoomRegistry

log = logging.getLogger(__name__)


def emit_params_schema(path: str) -> None:
    """Write the versioned JSON Schema for BuildingParams to the given path."""
    schema = BuildingParams.model_json_schema()
    # add versioned id
    schema["$id"] = f"urn:building-layout-generator:params:{VERSION}"
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2)


@dataclass
class FloorLayout:
    index: int
    rooms: List[Room]
    room_keys: List[RoomKey]
    door_height: float
    door_candidates: GroupedCandidates
    carve_results: List[WallCarveResult]
    header_positions: HeaderPositionSet
    exclusion_zones: Dict[RoomKey, List[ExclusionZone]]
    exterior_openings: Dict[WallSide, List[OpeningDescriptor]]
    grid_dump: str = ""


@dataclass
class BuildingLayout:
    building_id: str
    origin: Vec3
    size: Vec3
    floor_height: int
    grid_step: int
    seed: Optional[int]
    floors: List[FloorLayout] = field(default_factory=list)
    exterior: Dict[int, Dict[WallSide, Tuple[WallSegmentation, List[Box]]]] = field(default_factory=dict)


class BuildingGenerator:
    """Lay out every floor of one building, then segment its exterior walls."""

    def __init__(self, params: BuildingParams, *, seed: Optional[int] = None,
                 room_configuration: Optional[RoomConfiguration] = None,
                 door_planner: Optional[DoorGapPlanner] = None,
                 opening_planner: Optional[ExteriorOpeningPlanner] = None):
        self.params = params
        self.seed = seed if seed is not None else params.seed
        self.rng = random.Random(self.seed)
        self.room_configuration = room_configuration or RoomConfiguration.from_params(params, rng=self.rng)
        self.door_planner = door_planner or DoorGapPlanner(params.door.width, params.door.height)
        self.opening_planner = opening_planner or ExteriorOpeningPlanner(
            window_width=params.window.width,
            window_height=params.window.height,
            window_vertical=params.window.vertical,
            door_width=params.door.width,
        )
        self.fixed_registry = FixedRoomRegistry()

    def generate(self) -> BuildingLayout:
        p = self.params
        dims = p.dimensions
        layout = BuildingLayout(
            building_id=p.name,
            origin=Vec3(p.position.x, 0, p.position.z),
            size=Vec3(dims.width, dims.height, dims.depth),
            floor_height=p.floorHeight,
            grid_step=p.gridStep,
            seed=self.seed,
        )
        planner = FloorLayoutPlanner(
            floor_width=dims.width,
            floor_depth=dims.depth,
            floor_height=p.floorHeight,
            step=p.gridStep,
            room_configuration=self.room_configuration,
            fixed_registry=self.fixed_registry,
            rng=self.rng,
        )
        num_floors = p.num_floors
        log.info("Generating %s: %dx%dx%d, %d floors", p.name, dims.width, dims.depth, dims.height, num_floors)
        try:
            for floor_index in range(num_floors):
                layout.floors.append(self._process_floor(planner, floor_index))
        finally:
            self.fixed_registry.clear()

        layout.exterior = segment_building_exterior(
            {f.index: f.exterior_openings for f in layout.floors},
            building_origin=layout.origin,
            building_size=layout.size,
            floor_height=p.floorHeight,
            wall_thickness=WALL_THICKNESS_DEFAULT,
        )
        return layout

    def _process_floor(self, planner: FloorLayoutPlanner, floor_index: int) -> FloorLayout:
        p = self.params
        rooms = planner.plan_floor(floor_index)
        for room in rooms:
            room.build_walls()

        door_height = self.door_planner.door_height_for(p.floorHeight)
        headers = HeaderPositionSet()
        carver = InteriorWallCarver(
            door_width=self.door_planner.door_width,
            door_height=door_height,
            header_positions=headers,
            building_id=p.name,
            floor_index=floor_index,
        )
        grouped = self.door_planner.find_door_candidates(rooms)
        carve_results = carver.carve_grouped(grouped, rooms)

        zones = carver.exclusion_zones
        room_keys = [carver.room_key(room, i) for i, room in enumerate(rooms)]
        for key, room in zip(room_keys, rooms):
            if self.room_configuration.is_fixed(room.room_type):
                zones.setdefault(key, []).append(
                    ExclusionZone(room.footprint, room.position.y, room.position.y + room.size.y, "fixed")
                )

        exterior_openings = self.opening_planner.plan(
            rooms,
            floor_width=p.dimensions.width,
            floor_depth=p.dimensions.depth,
            floor_height=p.floorHeight,
            door_height=door_height,
            is_ground_floor=floor_index == 0,
        )

        all_zones = [z for zl in zones.values() for z in zl]
        for room in list(rooms):
            if room.room_type not in p.cellBlockTypes:
                continue
            for cell in plan_cell_rooms(room, all_zones, step=p.gridStep):
                room_keys.append(carver.room_key(cell, len(rooms)))
                rooms.append(cell)

        grid_dump = planner.grid.render()
        log.debug("Floor %d occupancy:\n%s", floor_index, grid_dump)
        log.info("Floor %d: %d rooms, %d headers placed", floor_index, len(rooms), len(headers))
        return FloorLayout(
            index=floor_index,
            rooms=rooms,
            room_keys=room_keys,
            door_height=door_height,
            door_candidates=grouped,
            carve_results=carve_results,
            header_positions=headers,
            exclusion_zones=zones,
            exterior_openings=exterior_openings,
            grid_dump=grid_dump,
        )


def generate_building(params: BuildingParams, *, seed: Optional[int] = None) -> BuildingLayout:
    return BuildingGenerator(params, seed=seed).generate()
