# backend/models/warehouse.py
from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


# A warehouse with its floor-plan image. image_path is a URL path such as
# /uploads/warehouses/warehouse-1-<id>.png or the shared placeholder asset.
class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    image_path = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
