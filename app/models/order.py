from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.services.utils.status_utils import is_overdue as deadline_passed


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, index=True, nullable=False)
    customer = Column(String, nullable=False)
    project_code = Column(String, nullable=False)

    order_date = Column(Date, nullable=False)
    deadline = Column(Date)

    # pending, in-progress, overdue, qc, packing, dispatched, completed
    status = Column(String, default="pending", nullable=False)
    items = Column(Integer, default=1, nullable=False)
    priority = Column(String, default="medium")  # low, medium, high
    printer_tech = Column(String)
    sales_person = Column(String)
    notes = Column(Text)
    image_url = Column(String)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    jobs = relationship("PrintJob", back_populates="order")

    @property
    def is_overdue(self) -> bool:
        return deadline_passed(self.status, self.deadline)
