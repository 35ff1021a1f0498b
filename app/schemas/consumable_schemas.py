from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InventoryItemCreate(BaseModel):
    name: str
    category: str
    quantity: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    min_order: int = Field(default=0, ge=0)
    description: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    barcode: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    min_stock: Optional[int] = Field(default=None, ge=0)
    min_order: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None


class InventoryItemResponse(BaseModel):
    id: int
    barcode: str
    name: str
    description: Optional[str]
    category: str
    quantity: int
    min_stock: int
    min_order: int
    status: str
    location: Optional[str]
    image_url: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ItemUsage(BaseModel):
    quantity_used: int = Field(gt=0)


class ReorderLine(BaseModel):
    item: InventoryItemResponse
    reorder_qty: int
