"""Order workflow: fixed status ordering, tracking board columns and QR payloads."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

ORDER_STATUSES: List[str] = [
    "pending",
    "in-progress",
    "overdue",
    "qc",
    "packing",
    "dispatched",
    "completed",
]

STATUS_LABELS: Dict[str, str] = {
    "pending": "Order Received",
    "in-progress": "Printing",
    "overdue": "Printing (Overdue)",
    "qc": "Quality Control",
    "packing": "Packing",
    "dispatched": "Dispatched",
    "completed": "Completed",
}

# Column id -> (title, statuses). The first status is the one a card takes
# when it is dropped on the column.
KANBAN_COLUMNS: Dict[str, tuple] = {
    "order-received": ("Order Received", ["pending"]),
    "printing": ("Printing", ["in-progress", "overdue"]),
    "qc": ("Quality Control", ["qc"]),
    "packing": ("Packing", ["packing"]),
    "dispatched": ("Dispatched", ["dispatched", "completed"]),
}

PRIORITIES = ["low", "medium", "high"]


def is_valid_status(status: str) -> bool:
    return status in ORDER_STATUSES


def next_statuses(status: str) -> List[str]:
    """All statuses strictly after ``status``; empty for the final stage."""
    if status not in ORDER_STATUSES:
        return []
    return ORDER_STATUSES[ORDER_STATUSES.index(status) + 1 :]


def can_transition(current: str, target: str) -> bool:
    if current not in ORDER_STATUSES or target not in ORDER_STATUSES:
        return False
    return ORDER_STATUSES.index(target) > ORDER_STATUSES.index(current)


def column_for_status(status: str) -> Optional[str]:
    for column_id, (_, statuses) in KANBAN_COLUMNS.items():
        if status in statuses:
            return column_id
    return None


def primary_status_for_column(column_id: str) -> Optional[str]:
    column = KANBAN_COLUMNS.get(column_id)
    if not column:
        return None
    return column[1][0]


def is_overdue(status: str, deadline: Optional[date], today: Optional[date] = None) -> bool:
    """Deadline has passed while the order is still before quality control."""
    if deadline is None or status not in ORDER_STATUSES:
        return False
    today = today or date.today()
    if ORDER_STATUSES.index(status) >= ORDER_STATUSES.index("qc"):
        return False
    return deadline < today


def parse_qr_payload(data: str, prefix: str) -> Optional[str]:
    """Extract the order number from ``<prefix><orderNumber>/item-N``."""
    if not data or not data.startswith(prefix):
        return None
    order_number = data[len(prefix) :].split("/")[0].strip()
    return order_number or None
