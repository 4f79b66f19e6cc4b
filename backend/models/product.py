# backend/models/product.py
from sqlalchemy import Column, Integer, String
from database import Base


# Catalog entry. Products are created by an admin or by a spreadsheet import
# and identified on the floor plan only through their position-sets.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
