from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_order_service, raise_service_error
from app.schemas.order_schemas import (
    BoardColumn,
    BoardMove,
    OrderResponse,
    ScanRequest,
    ScanResponse,
)
from app.services.order_service import OrderService

router = APIRouter()


@router.get("/board", response_model=List[BoardColumn])
def get_board(order_service: OrderService = Depends(get_order_service)):
    """Orders grouped into workflow columns"""
    return order_service.board()


@router.post("/board/move", response_model=OrderResponse)
def move_card(move: BoardMove, order_service: OrderService = Depends(get_order_service)):
    """Move an order card to another column (forward only)"""
    order = order_service.move_to_column(move.order_id, move.column_id)
    if not order:
        raise_service_error(order_service, "Failed to move order")
    return order


@router.post("/scan", response_model=ScanResponse)
def scan_code(scan: ScanRequest, order_service: OrderService = Depends(get_order_service)):
    """Look up an order from a scanned project QR code"""
    result = order_service.scan(scan.payload)
    if not result:
        raise_service_error(order_service, "Invalid QR Code")
    order, statuses = result
    return {"order": order, "next_statuses": statuses}
