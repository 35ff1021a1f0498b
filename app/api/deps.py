from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.base import get_db

ERROR_STATUS_CODES = {
    "not_found": 404,
    "out_of_stock": 409,
    "action_denied": 409,
    "usage_exceeds_total": 409,
}


def get_job_service(db: Session = Depends(get_db)):
    from app.services.job_service import JobService

    return JobService(db)


def get_inventory_service(db: Session = Depends(get_db)):
    from app.services.inventory_service import InventoryService

    return InventoryService(db)


def get_printer_service(db: Session = Depends(get_db)):
    from app.services.printer_service import PrinterService

    return PrinterService(db)


def get_order_service(db: Session = Depends(get_db)):
    from app.services.order_service import OrderService

    return OrderService(db)


def get_consumable_service(db: Session = Depends(get_db)):
    from app.services.consumable_service import ConsumableService

    return ConsumableService(db)


def get_costing_service(db: Session = Depends(get_db)):
    from app.services.costing_service import CostingService

    return CostingService(db)


def raise_service_error(service, default_detail: str) -> None:
    """Turn the last error recorded by a service into an HTTP error."""
    status_code = ERROR_STATUS_CODES.get(service.last_error_code, 400)
    detail = service.last_error_message or default_detail
    raise HTTPException(status_code=status_code, detail=detail)
