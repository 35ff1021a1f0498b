from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class PrintJob(Base):
    __tablename__ = "print_jobs"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(String, unique=True, index=True, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)
    printer_id = Column(Integer, ForeignKey("printers.id"), nullable=True)

    # Job details
    name = Column(String, nullable=False)
    project_code = Column(String)
    order_number = Column(String)
    priority = Column(String)
    required_technology = Column(String)
    items = Column(Integer, default=1)
    estimated_time_min = Column(Integer, default=0)
    deadline = Column(Date)
    image_url = Column(String)
    notes = Column(Text)

    # Schedule
    status = Column(String, default="queued")  # queued, scheduled, confirmed
    start_time = Column(DateTime)
    end_time = Column(DateTime)
    duration_hours = Column(Float, default=0.0)
    is_confirmed = Column(Boolean, default=False)
    color = Column(String)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    printer = relationship("Printer", back_populates="jobs")
    order = relationship("Order", back_populates="jobs")
    item_groups = relationship(
        "ItemGroup",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="ItemGroup.id",
    )

    @property
    def requirements(self):
        return [m for group in self.item_groups for m in group.materials]


class ItemGroup(Base):
    __tablename__ = "item_groups"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("print_jobs.id"), nullable=False)
    quantity = Column(Integer, default=1)

    # Relationships
    job = relationship("PrintJob", back_populates="item_groups")
    materials = relationship(
        "MaterialRequirement",
        back_populates="item_group",
        cascade="all, delete-orphan",
        order_by="MaterialRequirement.id",
    )


class MaterialRequirement(Base):
    __tablename__ = "material_requirements"

    id = Column(Integer, primary_key=True, index=True)
    item_group_id = Column(Integer, ForeignKey("item_groups.id"), nullable=False)
    material = Column(String, nullable=False)
    color = Column(String)
    finish = Column(String)

    # Relationships
    item_group = relationship("ItemGroup", back_populates="materials")
