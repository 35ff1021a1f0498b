from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_consumable_service, raise_service_error
from app.schemas.consumable_schemas import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    ItemUsage,
    ReorderLine,
)
from app.services.consumable_service import ConsumableService

router = APIRouter()


@router.post("/", response_model=InventoryItemResponse)
def create_item(
    item_data: InventoryItemCreate,
    consumable_service: ConsumableService = Depends(get_consumable_service),
):
    """Add a consumable or spare part"""
    item = consumable_service.create_item(**item_data.model_dump())
    if not item:
        raise_service_error(consumable_service, "Failed to create inventory item")
    return item


@router.get("/", response_model=List[InventoryItemResponse])
def get_items(
    category: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    consumable_service: ConsumableService = Depends(get_consumable_service),
):
    return consumable_service.list_items(category=category, status=status, search=search)


@router.get("/reorder", response_model=List[ReorderLine])
def get_reorder_list(consumable_service: ConsumableService = Depends(get_consumable_service)):
    """Items to reorder, out of stock first"""
    return consumable_service.reorder_list()


@router.get("/{item_id}", response_model=InventoryItemResponse)
def get_item(item_id: int, consumable_service: ConsumableService = Depends(get_consumable_service)):
    item = consumable_service.get_item(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return item


@router.patch("/{item_id}", response_model=InventoryItemResponse)
def update_item(
    item_id: int,
    changes: InventoryItemUpdate,
    consumable_service: ConsumableService = Depends(get_consumable_service),
):
    item = consumable_service.update_item(item_id, **changes.model_dump(exclude_unset=True))
    if not item:
        raise_service_error(consumable_service, "Failed to update inventory item")
    return item


@router.delete("/{item_id}")
def delete_item(item_id: int, consumable_service: ConsumableService = Depends(get_consumable_service)):
    if not consumable_service.delete_item(item_id):
        raise_service_error(consumable_service, "Failed to delete inventory item")
    return {"message": f"Inventory item {item_id} deleted"}


@router.post("/{item_id}/use", response_model=InventoryItemResponse)
def use_item(
    item_id: int,
    usage: ItemUsage,
    consumable_service: ConsumableService = Depends(get_consumable_service),
):
    """Take items out of stock"""
    item = consumable_service.use_item(item_id, usage.quantity_used)
    if not item:
        raise_service_error(consumable_service, "Failed to use inventory item")
    return item
