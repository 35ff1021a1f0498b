from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MaterialUnitCreate(BaseModel):
    kind: str
    name: str
    material: str
    capacity: float = Field(gt=0)
    color: Optional[str] = None
    finish: Optional[str] = None
    brand: Optional[str] = None
    used: float = Field(default=0.0, ge=0)
    price: float = 0.0
    currency: str = "USD"
    location: Optional[str] = None
    min_stock: int = 0
    min_order: int = 0
    notes: Optional[str] = None
    unit_code: Optional[str] = None


class MaterialUnitResponse(BaseModel):
    id: int
    unit_code: str
    kind: str
    name: str
    brand: Optional[str]
    material: str
    color: Optional[str]
    finish: Optional[str]
    capacity: float
    used: float
    remaining: float
    status: str
    price: Optional[float]
    currency: Optional[str]
    location: Optional[str]
    min_stock: Optional[int]
    min_order: Optional[int]
    assigned_printer_id: Optional[int]
    assigned_job_id: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class MaterialAssignmentRequest(BaseModel):
    job_id: str
    requirement_id: Optional[int] = None
    material: Optional[str] = None
    color: Optional[str] = None
    finish: Optional[str] = None
    printer_id: Optional[int] = None


class MaterialReturnRequest(BaseModel):
    used_amount: float = 0.0


class ColorStock(BaseModel):
    color: str
    hex: str
    stock: int


class RequiredMaterial(BaseModel):
    id: int
    material: str
    color: Optional[str]
    finish: str
    is_assigned: bool
    available_stock: int


class RequiredAssignment(BaseModel):
    job_id: str
    job_name: str
    project_code: Optional[str]
    printer_id: int
    printer_name: str
    start_time: datetime
    materials: List[RequiredMaterial]
