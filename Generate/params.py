from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from Generate.constants import (
    GRID_STEP,
    DOOR_WIDTH_DEFAULT,
    DOOR_HEIGHT_DEFAULT,
    WINDOW_WIDTH_DEFAULT,
    WINDOW_HEIGHT_DEFAULT,
    WINDOW_SILL_FRACTION,
    FLOOR_HEIGHT_DEFAULT,
    FIXED_ROOM_TYPES_DEFAULT,
    CELL_BLOCK_TYPES_DEFAULT,
)


class Dimensions(BaseModel):
    width: int = Field(gt=0)
    depth: int = Field(gt=0)
    height: int = Field(gt=0)


class Position(BaseModel):
    x: int = 0
    z: int = 0


class RoomRequest(BaseModel):
    type: str
    width: int = Field(gt=0)
    depth: int = Field(gt=0)

    @field_validator("type")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        label = value.strip()
        if not label:
            raise ValueError("Room type cannot be empty")
        return label


class DoorSettings(BaseModel):
    width: float = Field(default=DOOR_WIDTH_DEFAULT, gt=0)
    height: float = Field(default=DOOR_HEIGHT_DEFAULT, gt=0)


class WindowSettings(BaseModel):
    width: float = Field(default=WINDOW_WIDTH_DEFAULT, gt=0)
    height: float = Field(default=WINDOW_HEIGHT_DEFAULT, gt=0)
    vertical: float = Field(default=WINDOW_SILL_FRACTION, gt=0, lt=1)


class BuildingParams(BaseModel):
    name: str = "building"
    position: Position = Position()
    dimensions: Dimensions
    floorHeight: int = Field(default=FLOOR_HEIGHT_DEFAULT, gt=0)
    gridStep: int = Field(default=GRID_STEP, gt=0)
    rooms: Optional[List[RoomRequest]] = None
    fixedRoomTypes: List[str] = Field(default_factory=lambda: list(FIXED_ROOM_TYPES_DEFAULT))
    cellBlockTypes: List[str] = Field(default_factory=lambda: list(CELL_BLOCK_TYPES_DEFAULT))
    door: DoorSettings = DoorSettings()
    window: WindowSettings = WindowSettings()
    seed: Optional[int] = None

    @model_validator(mode="after")
    def _check_floor_height(self) -> "BuildingParams":
        if self.floorHeight > self.dimensions.height:
            raise ValueError("floorHeight cannot exceed building height")
        return self

    @property
    def num_floors(self) -> int:
        return self.dimensions.height // self.floorHeight
