from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.db.base import Base


class CostingTemplate(Base):
    """Named set of cost inputs and pricing that can be reloaded later."""

    __tablename__ = "costing_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    inputs = Column(JSON, nullable=False)
    pricing = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class LoggedCalculation(Base):
    """A calculation kept with the inputs it was made from."""

    __tablename__ = "logged_calculations"

    id = Column(Integer, primary_key=True, index=True)
    job_name = Column(String)
    inputs = Column(JSON, nullable=False)
    pricing = Column(JSON, nullable=False)
    results = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
