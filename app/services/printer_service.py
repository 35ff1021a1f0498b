import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.printer import Printer
from app.services.inventory_service import InventoryService
from app.services.utils.job_utils import PrinterState, effective_printer_state, utcnow
from app.services.utils.material_utils import TECHNOLOGIES

logger = logging.getLogger(__name__)

PRINTER_STATUSES = ["printing", "idle", "maintenance", "offline"]
GUARDED_STATUSES = ("maintenance", "offline")


class PrinterService:
    def __init__(self, db: Session):
        self.db = db
        self.inventory_service = InventoryService(db)
        self.last_error_message: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def _set_error(self, message: str, code: str = "invalid_request") -> None:
        self.last_error_message = message
        self.last_error_code = code
        if code == "action_denied":
            logger.warning(message)
        else:
            logger.error(message)

    def create_printer(
        self,
        code_name: str,
        name: str,
        technology: str,
        model: str = None,
        location: str = None,
        capacity: str = None,
        material: str = None,
        initialization_date: date = None,
    ) -> Optional[Printer]:
        """Register a new idle printer"""
        if technology not in TECHNOLOGIES:
            self._set_error(f"Unknown printer technology: {technology}")
            return None
        try:
            existing = self.db.query(Printer).filter(Printer.code_name == code_name).first()
            if existing:
                self._set_error(f"Printer with code name {code_name} already exists")
                return None
            printer = Printer(
                code_name=code_name,
                name=name,
                technology=technology,
                model=model,
                location=location,
                capacity=capacity,
                material=material,
                initialization_date=initialization_date,
                status="idle",
                idle_since=utcnow(),
            )
            self.db.add(printer)
            self.db.commit()
            logger.info(f"Created {technology} printer {code_name}")
            return printer
        except Exception as e:
            self._set_error(f"Error creating printer: {str(e)}")
            self.db.rollback()
            return None

    def delete_printer(self, printer_id: int) -> bool:
        """Remove a printer together with its schedule; reserved units go back to stock."""
        try:
            printer = self.get_printer(printer_id)
            if not printer:
                self._set_error(f"Printer {printer_id} not found", "not_found")
                return False
            released = self.inventory_service.release_printer_units(printer_id)
            self.db.flush()
            self.db.delete(printer)
            self.db.commit()
            logger.info(f"Deleted printer {printer_id}, released {released} material unit(s)")
            return True
        except Exception as e:
            self._set_error(f"Error deleting printer: {str(e)}")
            self.db.rollback()
            return False

    def update_status(
        self, printer_id: int, status: str, now: datetime = None
    ) -> Optional[Printer]:
        """Change printer status; a printing machine cannot go to maintenance or offline."""
        if status not in PRINTER_STATUSES:
            self._set_error(f"Unknown printer status: {status}")
            return None
        try:
            printer = self.get_printer(printer_id)
            if not printer:
                self._set_error(f"Printer {printer_id} not found", "not_found")
                return None

            state = self.get_state(printer, now)
            if state.status == "printing" and status in GUARDED_STATUSES:
                self._set_error(
                    f"Action Denied: cannot change status of printer {printer_id} "
                    f"while it is printing",
                    "action_denied",
                )
                return None

            if status == "idle" and printer.status != "idle":
                printer.idle_since = now or utcnow()
            printer.status = status
            self.db.commit()
            logger.info(f"Printer {printer_id} status updated to {status}")
            return printer
        except Exception as e:
            self._set_error(f"Error updating printer status: {str(e)}")
            self.db.rollback()
            return None

    def get_printer(self, printer_id: int) -> Optional[Printer]:
        return self.db.query(Printer).filter(Printer.id == printer_id).first()

    def get_state(self, printer: Printer, now: datetime = None) -> PrinterState:
        return effective_printer_state(printer.status, printer.jobs, now or utcnow())

    def list_printers(
        self, technology: str = None, now: datetime = None
    ) -> List[Tuple[Printer, PrinterState]]:
        """Printers with their effective status derived from the schedule."""
        now = now or utcnow()
        query = self.db.query(Printer)
        if technology:
            query = query.filter(Printer.technology == technology)
        return [(p, self.get_state(p, now)) for p in query.order_by(Printer.id).all()]
