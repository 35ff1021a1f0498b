from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_order_service, raise_service_error
from app.schemas.order_schemas import (
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate,
    OrderSummary,
)
from app.services.order_service import OrderService
from app.services.utils.status_utils import next_statuses

router = APIRouter()


@router.post("/", response_model=OrderResponse)
def create_order(
    order_data: OrderCreate, order_service: OrderService = Depends(get_order_service)
):
    """Create a pending order and queue its print job"""
    order = order_service.create_order(
        customer=order_data.customer,
        items=order_data.items,
        printer_tech=order_data.printer_tech,
        order_date=order_data.order_date,
        deadline=order_data.deadline,
        priority=order_data.priority,
        project_code=order_data.project_code,
        sales_person=order_data.sales_person,
        notes=order_data.notes,
        image_url=order_data.image_url,
    )
    if not order:
        raise_service_error(order_service, "Failed to create order")
    return order


@router.get("/", response_model=List[OrderResponse])
def get_orders(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    order_service: OrderService = Depends(get_order_service),
):
    """List orders, newest first"""
    return order_service.list_orders(status=status, priority=priority, search=search)


@router.get("/summary", response_model=OrderSummary)
def get_order_summary(order_service: OrderService = Depends(get_order_service)):
    return order_service.summary()


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, order_service: OrderService = Depends(get_order_service)):
    order = order_service.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/{order_id}/next-statuses", response_model=List[str])
def get_next_statuses(
    order_id: int, order_service: OrderService = Depends(get_order_service)
):
    """Statuses the order may still move to"""
    order = order_service.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return next_statuses(order.status)


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    order_service: OrderService = Depends(get_order_service),
):
    """Advance an order to a later status"""
    order = order_service.update_status(order_id, status_data.status)
    if not order:
        raise_service_error(order_service, "Failed to update order status")
    return order
