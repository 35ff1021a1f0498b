from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MaterialRequirementIn(BaseModel):
    material: str
    color: Optional[str] = None
    finish: Optional[str] = None


class ItemGroupIn(BaseModel):
    quantity: int = Field(default=1, ge=1)
    materials: List[MaterialRequirementIn] = []


class PrintJobCreate(BaseModel):
    name: str
    project_code: Optional[str] = None
    required_technology: Optional[str] = None
    priority: Optional[str] = None
    items: int = Field(default=1, ge=1)
    estimated_time_min: int = Field(default=0, ge=0)
    deadline: Optional[date] = None
    item_groups: List[ItemGroupIn] = []
    image_url: Optional[str] = None
    notes: Optional[str] = None


class PrintJobUpdate(BaseModel):
    name: Optional[str] = None
    project_code: Optional[str] = None
    required_technology: Optional[str] = None
    priority: Optional[str] = None
    items: Optional[int] = Field(default=None, ge=1)
    estimated_time_min: Optional[int] = Field(default=None, ge=0)
    deadline: Optional[date] = None
    item_groups: Optional[List[ItemGroupIn]] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None


class MaterialRequirementResponse(BaseModel):
    id: int
    material: str
    color: Optional[str]
    finish: Optional[str]

    class Config:
        from_attributes = True


class ItemGroupResponse(BaseModel):
    id: int
    quantity: int
    materials: List[MaterialRequirementResponse]

    class Config:
        from_attributes = True


class PrintJobResponse(BaseModel):
    id: int
    job_id: str
    name: str
    project_code: Optional[str]
    order_id: Optional[int]
    order_number: Optional[str]
    priority: Optional[str]
    required_technology: Optional[str]
    items: int
    estimated_time_min: Optional[int]
    deadline: Optional[date]
    printer_id: Optional[int]
    status: str
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    duration_hours: Optional[float]
    is_confirmed: bool
    color: Optional[str]
    item_groups: List[ItemGroupResponse]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class JobAssignment(BaseModel):
    printer_id: int
    start_time: Optional[datetime] = None


class JobConfirmation(BaseModel):
    printer_id: int


class SlotResponse(BaseModel):
    printer_id: int
    printer_name: str
    start_time: datetime
    end_time: datetime
