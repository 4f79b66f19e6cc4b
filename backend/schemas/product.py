# backend/schemas/product.py
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from schemas.warehouse import Point


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Base for camelCase wire models; Python code uses the snake_case names
class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ProductCreate(BaseModel):
    name: str


class ProductOut(ORMBase):
    id: int
    name: str


# Paginated response for product listings
class ProductListPage(CamelModel):
    items: List[ProductOut]
    page: int
    limit: int
    total: int
    has_more: bool = Field(alias="hasMore")


class BatchDeleteRequest(CamelModel):
    product_ids: List[Annotated[StrictInt, Field(gt=0)]] = Field(alias="productIds", min_length=1)


class BatchDeleteResult(CamelModel):
    message: str
    deleted_products: List[ProductOut] = Field(alias="deletedProducts")


# Outcome of a spreadsheet reconciliation; errors is omitted when empty
class ImportResult(CamelModel):
    message: str
    created_products: List[ProductOut] = Field(alias="createdProducts")
    deleted_products: List[ProductOut] = Field(alias="deletedProducts")
    errors: Optional[List[str]] = None
    total_processed: int = Field(alias="totalProcessed")
    total_in_excel: int = Field(alias="totalInExcel")
    total_in_database: int = Field(alias="totalInDatabase")


class ProductWarehouse(BaseModel):
    id: int
    name: str
    positions: List[Point]


class ProductWarehouses(CamelModel):
    product_id: int = Field(alias="productId")
    warehouses: List[ProductWarehouse]


class PositionsSummary(CamelModel):
    total: int
    with_positions: int = Field(alias="withPositions")
    without_positions: int = Field(alias="withoutPositions")
