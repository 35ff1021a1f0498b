from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base


class MaterialUnit(Base):
    """A physical spool, resin bottle or powder batch held in stock."""

    __tablename__ = "material_units"

    id = Column(Integer, primary_key=True, index=True)
    unit_code = Column(String, unique=True, index=True, nullable=False)  # SP001, RS001, PW001
    kind = Column(String, index=True, nullable=False)  # spool, resin, powder
    name = Column(String, nullable=False)
    brand = Column(String)

    # Matching keys
    material = Column(String, nullable=False)  # PLA, PETG, resin type, PA12, etc.
    color = Column(String)  # hex, compared case-sensitively
    finish = Column(String)  # spools only

    # Capacity and usage (grams, or ml for resins)
    capacity = Column(Float, nullable=False)
    used = Column(Float, default=0.0, nullable=False)
    status = Column(String, default="New")  # New, Active, Low, Critical, Empty

    # Purchasing
    price = Column(Float, default=0.0)
    currency = Column(String, default="USD")
    min_stock = Column(Integer, default=0)
    min_order = Column(Integer, default=0)
    location = Column(String)
    notes = Column(Text)

    # Reservation
    assigned_printer_id = Column(Integer, ForeignKey("printers.id"), nullable=True)
    assigned_job_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def remaining(self) -> float:
        return max(0.0, (self.capacity or 0.0) - (self.used or 0.0))

    @property
    def is_assigned(self) -> bool:
        return self.assigned_printer_id is not None
