from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base


class InventoryItem(Base):
    """Shop consumables and spare parts counted in pieces: boxes, labels, motors, tools."""

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    barcode = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text)
    category = Column(String, index=True, nullable=False)

    quantity = Column(Integer, default=0, nullable=False)
    min_stock = Column(Integer, default=0, nullable=False)
    min_order = Column(Integer, default=0, nullable=False)
    status = Column(String, default="In Stock")  # In Stock, Low Stock, Out of Stock

    location = Column(String)
    image_url = Column(String)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
