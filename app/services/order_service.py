import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.order import Order
from app.services.utils.job_utils import build_job_queue
from app.services.utils.material_utils import TECHNOLOGIES
from app.services.utils.status_utils import (
    KANBAN_COLUMNS,
    PRIORITIES,
    can_transition,
    column_for_status,
    is_valid_status,
    next_statuses,
    parse_qr_payload,
    primary_status_for_column,
)

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.last_error_message: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def _set_error(self, message: str, code: str = "invalid_request") -> None:
        self.last_error_message = message
        self.last_error_code = code
        if code in ("invalid_transition", "invalid_qr_code"):
            logger.warning(message)
        else:
            logger.error(message)

    def create_order(
        self,
        customer: str,
        items: int,
        printer_tech: str,
        order_date: date = None,
        deadline: date = None,
        priority: str = "medium",
        project_code: str = None,
        sales_person: str = None,
        notes: str = None,
        image_url: str = None,
    ) -> Optional[Order]:
        """Take a new order in as pending and queue its print job."""
        if items < 1:
            self._set_error("An order needs at least one item")
            return None
        if priority not in PRIORITIES:
            self._set_error(f"Unknown priority: {priority}")
            return None
        if printer_tech not in TECHNOLOGIES:
            self._set_error(f"Unknown printer technology: {printer_tech}")
            return None
        try:
            next_id = (self.db.query(func.max(Order.id)).scalar() or 0) + 1
            order = Order(
                id=next_id,
                order_number=f"ORD-{next_id:03d}",
                customer=customer,
                project_code=project_code or f"PRJ-{next_id:03d}",
                order_date=order_date or date.today(),
                deadline=deadline,
                status="pending",
                items=items,
                priority=priority,
                printer_tech=printer_tech,
                sales_person=sales_person,
                notes=notes,
                image_url=image_url,
            )
            self.db.add(order)
            for job in build_job_queue([order]):
                self.db.add(job)
            self.db.commit()
            logger.info(
                f"Created order {order.order_number} for {customer} and queued its job"
            )
            return order
        except Exception as e:
            self._set_error(f"Error creating order: {str(e)}")
            self.db.rollback()
            return None

    def update_status(self, order_id: int, new_status: str) -> Optional[Order]:
        """Advance an order; only statuses later in the workflow are accepted."""
        try:
            order = self.get_order(order_id)
            if not order:
                self._set_error(f"Order {order_id} not found", "not_found")
                return None
            if not is_valid_status(new_status):
                self._set_error(f"Unknown order status: {new_status}")
                return None
            if not can_transition(order.status, new_status):
                self._set_error(
                    f"Order {order.order_number} cannot move from {order.status} "
                    f"to {new_status}",
                    "invalid_transition",
                )
                return None
            previous = order.status
            order.status = new_status
            self.db.commit()
            logger.info(f"Order {order.order_number} moved from {previous} to {new_status}")
            return order
        except Exception as e:
            self._set_error(f"Error updating order status: {str(e)}")
            self.db.rollback()
            return None

    def move_to_column(self, order_id: int, column_id: str) -> Optional[Order]:
        """Drop an order card on a tracking board column."""
        order = self.get_order(order_id)
        if not order:
            self._set_error(f"Order {order_id} not found", "not_found")
            return None
        target = primary_status_for_column(column_id)
        if target is None:
            self._set_error(f"Unknown board column: {column_id}")
            return None
        if column_for_status(order.status) == column_id:
            return order
        return self.update_status(order_id, target)

    def scan(self, payload: str) -> Optional[Tuple[Order, List[str]]]:
        """Resolve a project QR code to its order and the statuses it may move to."""
        order_number = parse_qr_payload(payload, settings.qr_prefix)
        if not order_number:
            self._set_error(
                "Invalid QR Code: scanned code is not a valid project code",
                "invalid_qr_code",
            )
            return None
        order = self.get_by_number(order_number)
        if not order:
            self._set_error(f"Order {order_number} not found", "not_found")
            return None
        return order, next_statuses(order.status)

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_by_number(self, order_number: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.order_number == order_number).first()

    def list_orders(
        self, status: str = None, priority: str = None, search: str = None
    ) -> List[Order]:
        """Orders newest first, optionally filtered"""
        query = self.db.query(Order)
        if status:
            query = query.filter(Order.status == status)
        if priority:
            query = query.filter(Order.priority == priority)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Order.order_number.ilike(pattern),
                    Order.customer.ilike(pattern),
                    Order.project_code.ilike(pattern),
                )
            )
        return query.order_by(Order.order_date.desc(), Order.id.desc()).all()

    def summary(self) -> Dict[str, int]:
        counts = dict(
            self.db.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
        )
        return {
            "total": sum(counts.values()),
            "pending": counts.get("pending", 0),
            "overdue": counts.get("overdue", 0),
            "completed": counts.get("completed", 0) + counts.get("dispatched", 0),
        }

    def board(self) -> List[Dict]:
        """Tracking board columns with their order cards."""
        orders = self.list_orders()
        columns = []
        for column_id, (title, statuses) in KANBAN_COLUMNS.items():
            columns.append(
                {
                    "id": column_id,
                    "title": title,
                    "items": [o for o in orders if o.status in statuses],
                }
            )
        return columns
