# backend/schemas/warehouse.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# One marker on the floor plan, in percent of image width/height
class Point(BaseModel):
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)


class WarehouseOut(BaseModel):
    id: int
    name: str
    image_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# List entry when the caller asked for a product's point counts
class WarehouseWithCount(WarehouseOut):
    points_count: int = 0


class WarehouseCreate(BaseModel):
    name: str


class WarehouseRename(BaseModel):
    name: str


class WarehouseImagePath(BaseModel):
    image_path: str


class ImageUploaded(BaseModel):
    success: bool = True
    message: str
    image_path: str = Field(alias="imagePath")

    model_config = ConfigDict(populate_by_name=True)


class PositionsUpdate(BaseModel):
    product_id: int = Field(alias="productId", gt=0)
    positions: List[Point]

    model_config = ConfigDict(populate_by_name=True)


class PositionsMap(BaseModel):
    warehouse_id: int = Field(alias="warehouseId")
    product_id: Optional[int] = Field(default=None, alias="productId")
    positions: List[Point]

    model_config = ConfigDict(populate_by_name=True)


class PositionsSaved(PositionsMap):
    success: bool = True
    message: str = "Positions saved successfully"
