# backend/models/position.py
from sqlalchemy import Column, Integer, DateTime, JSON, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from database import Base


# Marker coordinates of one product on one warehouse floor plan.
# positions holds [{"x": float, "y": float}, ...] as percentages (0-100).
# No foreign keys: the services delete position-sets explicitly whenever
# a product or a warehouse is removed.
class WarehousePosition(Base):
    __tablename__ = "warehouse_positions"
    __table_args__ = (
        UniqueConstraint("warehouse_id", "product_id", name="uq_warehouse_positions_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    warehouse_id = Column(Integer, nullable=False, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    positions = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
