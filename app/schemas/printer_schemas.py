from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class PrinterCreate(BaseModel):
    code_name: str
    name: str
    technology: str
    model: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[str] = None
    material: Optional[str] = None
    initialization_date: Optional[date] = None


class CurrentJob(BaseModel):
    job_id: str
    name: str
    progress: float


class PrinterResponse(BaseModel):
    id: int
    code_name: str
    name: str
    model: Optional[str]
    location: Optional[str]
    technology: str
    capacity: Optional[str]
    material: Optional[str]
    initialization_date: Optional[date]
    status: str
    idle_since: Optional[datetime]
    current_job: Optional[CurrentJob] = None
    completion_estimate: Optional[datetime] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class PrinterStatusUpdate(BaseModel):
    status: str
