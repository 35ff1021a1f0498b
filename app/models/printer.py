from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Printer(Base):
    __tablename__ = "printers"

    id = Column(Integer, primary_key=True, index=True)
    code_name = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    model = Column(String)
    location = Column(String)
    technology = Column(String, nullable=False)  # FDM, SLA, SLS, DLP, MJF, EBM, DMLS
    capacity = Column(String)
    material = Column(String)
    initialization_date = Column(Date)

    status = Column(String, default="idle")  # printing, idle, maintenance, offline
    idle_since = Column(DateTime)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    jobs = relationship(
        "PrintJob",
        back_populates="printer",
        cascade="all, delete",
        order_by="PrintJob.start_time",
    )
