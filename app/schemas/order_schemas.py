from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    customer: str
    items: int = Field(ge=1)
    printer_tech: str
    order_date: Optional[date] = None
    deadline: Optional[date] = None
    priority: str = "medium"
    project_code: Optional[str] = None
    sales_person: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    order_number: str
    customer: str
    project_code: str
    order_date: date
    deadline: Optional[date]
    status: str
    items: int
    priority: Optional[str]
    printer_tech: Optional[str]
    sales_person: Optional[str]
    notes: Optional[str]
    image_url: Optional[str]
    is_overdue: bool = False
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: str


class OrderSummary(BaseModel):
    total: int
    pending: int
    overdue: int
    completed: int


class BoardMove(BaseModel):
    order_id: int
    column_id: str


class BoardColumn(BaseModel):
    id: str
    title: str
    items: List[OrderResponse]


class ScanRequest(BaseModel):
    payload: str


class ScanResponse(BaseModel):
    order: OrderResponse
    next_statuses: List[str]
