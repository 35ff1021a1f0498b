import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.inventory import MaterialUnit
from app.models.job import PrintJob
from app.models.printer import Printer
from app.services.utils.job_utils import utcnow
from app.services.utils.material_utils import (
    MATERIAL_KINDS,
    calculate_material_status,
    format_unit_code,
    matches_requirement,
    normalize_finish,
    pool_for_technology,
    relevant_pool,
)

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, db: Session):
        self.db = db
        self.last_error_message: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def _set_error(self, message: str, code: str = "invalid_request") -> None:
        self.last_error_message = message
        self.last_error_code = code
        if code in ("out_of_stock", "usage_exceeds_total"):
            logger.warning(message)
        else:
            logger.error(message)

    def create_unit(
        self,
        kind: str,
        name: str,
        material: str,
        capacity: float,
        color: str = None,
        finish: str = None,
        brand: str = None,
        used: float = 0.0,
        price: float = 0.0,
        currency: str = "USD",
        location: str = None,
        min_stock: int = 0,
        min_order: int = 0,
        notes: str = None,
        unit_code: str = None,
    ) -> Optional[MaterialUnit]:
        """Add a stock unit; the unit code is generated when not given."""
        if kind not in MATERIAL_KINDS:
            self._set_error(f"Unknown material kind: {kind}")
            return None
        if capacity <= 0 or used < 0 or used > capacity:
            self._set_error(f"Invalid usage {used} for capacity {capacity}")
            return None
        try:
            if unit_code is None:
                unit_code = self._next_unit_code(kind)
            elif self.get_unit(unit_code):
                self._set_error(f"Material unit {unit_code} already exists")
                return None

            unit = MaterialUnit(
                unit_code=unit_code,
                kind=kind,
                name=name,
                brand=brand,
                material=material,
                color=color,
                finish=finish if kind == "spool" else None,
                capacity=capacity,
                used=used,
                status=calculate_material_status(used, capacity),
                price=price,
                currency=currency,
                location=location,
                min_stock=min_stock,
                min_order=min_order,
                notes=notes,
            )
            self.db.add(unit)
            self.db.commit()
            logger.info(f"Created {kind} {unit_code} ({material}, {color})")
            return unit
        except Exception as e:
            self._set_error(f"Error creating material unit: {str(e)}")
            self.db.rollback()
            return None

    def _next_unit_code(self, kind: str) -> str:
        count = (
            self.db.query(func.count(MaterialUnit.id))
            .filter(MaterialUnit.kind == kind)
            .scalar()
        )
        number = (count or 0) + 1
        code = format_unit_code(kind, number)
        while self.get_unit(code):
            number += 1
            code = format_unit_code(kind, number)
        return code

    def get_unit(self, unit_code: str) -> Optional[MaterialUnit]:
        return (
            self.db.query(MaterialUnit).filter(MaterialUnit.unit_code == unit_code).first()
        )

    def list_units(self, kind: str = None) -> List[MaterialUnit]:
        query = self.db.query(MaterialUnit)
        if kind:
            query = query.filter(MaterialUnit.kind == kind)
        return query.order_by(MaterialUnit.id).all()

    def get_assigned_units(self) -> List[MaterialUnit]:
        """Units currently checked out to a printer."""
        return (
            self.db.query(MaterialUnit)
            .filter(MaterialUnit.assigned_printer_id.isnot(None))
            .order_by(MaterialUnit.id)
            .all()
        )

    def get_low_stock_units(self) -> List[MaterialUnit]:
        return (
            self.db.query(MaterialUnit)
            .filter(MaterialUnit.status.in_(["Low", "Critical", "Empty"]))
            .order_by(MaterialUnit.id)
            .all()
        )

    # Stock lookups by printer technology

    def _pool(self, technology: str) -> List[MaterialUnit]:
        kind = relevant_pool(technology)
        if kind is None:
            return []
        return self.list_units(kind)

    def available_materials(self, technology: str) -> List[str]:
        seen: List[str] = []
        for unit in self._pool(technology):
            if unit.material not in seen:
                seen.append(unit.material)
        return seen

    def available_finishes(self, technology: str, material: str) -> List[str]:
        if not material:
            return []
        seen: List[str] = []
        for unit in self._pool(technology):
            finish = normalize_finish(unit.finish)
            if unit.material == material and finish not in seen:
                seen.append(finish)
        return seen

    def available_colors(self, technology: str, material: str, finish: str) -> List[Dict]:
        """Colors with unit counts for a material+finish, ignoring empty units."""
        if not material or not finish:
            return []
        stock: Dict[str, int] = {}
        for unit in self._pool(technology):
            if (
                unit.material == material
                and normalize_finish(unit.finish) == finish
                and unit.status != "Empty"
            ):
                stock[unit.color] = stock.get(unit.color, 0) + 1
        return [{"color": color, "hex": color, "stock": count} for color, count in stock.items()]

    def available_stock_count(
        self, technology: str, material: str, color: str, finish: str = None
    ) -> int:
        kind = relevant_pool(technology)
        if kind is None:
            return 0
        return len(self._candidates(kind, material, color, finish))

    def _candidates(self, kind: str, material: str, color: str, finish: str = None):
        query = (
            self.db.query(MaterialUnit)
            .filter(
                MaterialUnit.kind == kind,
                MaterialUnit.assigned_printer_id.is_(None),
                MaterialUnit.status != "Empty",
                MaterialUnit.material == material,
                MaterialUnit.color == color,
                func.coalesce(MaterialUnit.finish, settings.default_finish)
                == normalize_finish(finish),
            )
            .order_by(MaterialUnit.id)
        )
        return query.all()

    # Reservation

    def assign_material(
        self,
        material: str,
        color: str,
        finish: Optional[str],
        printer: Printer,
        job_id: str,
    ) -> Optional[MaterialUnit]:
        """Reserve the first free matching unit in the printer's pool for a job.

        Returns None with ``out_of_stock`` when nothing matches; the pool is
        left untouched in that case.
        """
        kind = pool_for_technology(printer.technology)
        try:
            for candidate in self._candidates(kind, material, color, finish):
                # Conditional update so a unit reserved by a concurrent request is skipped
                claimed = (
                    self.db.query(MaterialUnit)
                    .filter(
                        MaterialUnit.id == candidate.id,
                        MaterialUnit.assigned_printer_id.is_(None),
                    )
                    .update(
                        {
                            MaterialUnit.assigned_printer_id: printer.id,
                            MaterialUnit.assigned_job_id: job_id,
                        },
                        synchronize_session=False,
                    )
                )
                if claimed == 1:
                    self.db.commit()
                    self.db.refresh(candidate)
                    logger.info(
                        f"Assigned {candidate.kind} {candidate.unit_code} to printer "
                        f"{printer.id} for job {job_id}"
                    )
                    return candidate

            self.db.rollback()
            self._set_error(
                f'Out of Stock: no available "{material} - {color}" '
                f"({normalize_finish(finish)}) {kind} found in inventory",
                "out_of_stock",
            )
            return None
        except Exception as e:
            self._set_error(f"Error assigning material: {str(e)}")
            self.db.rollback()
            return None

    def assign_for_job(
        self,
        job_id: str,
        requirement_id: int = None,
        material: str = None,
        color: str = None,
        finish: str = None,
        printer_id: int = None,
    ) -> Optional[MaterialUnit]:
        """Resolve job, printer and requirement, then reserve a unit."""
        job = self.db.query(PrintJob).filter(PrintJob.job_id == job_id).first()
        if not job:
            self._set_error(f"Job {job_id} not found", "not_found")
            return None

        if requirement_id is not None:
            requirement = next(
                (r for r in job.requirements if r.id == requirement_id), None
            )
            if not requirement:
                self._set_error(
                    f"Requirement {requirement_id} not found on job {job_id}", "not_found"
                )
                return None
            material, color, finish = requirement.material, requirement.color, requirement.finish
        if not material:
            self._set_error("A requirement id or a material is required")
            return None

        if job.printer_id is not None and printer_id is not None and printer_id != job.printer_id:
            self._set_error(
                f"Job {job_id} is scheduled on printer {job.printer_id}, not {printer_id}"
            )
            return None
        printer_id = printer_id if printer_id is not None else job.printer_id
        if printer_id is None:
            self._set_error(f"Job {job_id} is not scheduled on a printer")
            return None
        printer = self.db.query(Printer).filter(Printer.id == printer_id).first()
        if not printer:
            self._set_error(f"Printer {printer_id} not found", "not_found")
            return None

        return self.assign_material(material, color, finish, printer, job.job_id)

    def return_unit(self, unit_code: str, used_amount: float = 0.0) -> Optional[MaterialUnit]:
        """Check a unit back into stock, recording how much was consumed."""
        try:
            unit = self.get_unit(unit_code)
            if not unit:
                self._set_error(f"Material unit {unit_code} not found", "not_found")
                return None
            if used_amount < 0:
                self._set_error(f"Used amount cannot be negative ({used_amount})")
                return None
            new_used = unit.used + used_amount
            if new_used > unit.capacity:
                self._set_error(
                    f"Usage Exceeds Total: {new_used:g} used on {unit_code} "
                    f"with capacity {unit.capacity:g}",
                    "usage_exceeds_total",
                )
                return None

            previous_job = unit.assigned_job_id
            unit.used = new_used
            unit.status = calculate_material_status(new_used, unit.capacity)
            unit.assigned_printer_id = None
            unit.assigned_job_id = None
            self.db.commit()
            logger.info(
                f"Returned {unit_code} from job {previous_job}: {used_amount:g} used, "
                f"status {unit.status}"
            )
            return unit
        except Exception as e:
            self._set_error(f"Error returning material: {str(e)}")
            self.db.rollback()
            return None

    def release_printer_units(self, printer_id: int) -> int:
        """Clear reservations held by a printer without recording usage."""
        units = (
            self.db.query(MaterialUnit)
            .filter(MaterialUnit.assigned_printer_id == printer_id)
            .all()
        )
        for unit in units:
            unit.assigned_printer_id = None
            unit.assigned_job_id = None
        return len(units)

    # Material log

    def is_requirement_assigned(self, job_id: str, requirement) -> bool:
        units = (
            self.db.query(MaterialUnit).filter(MaterialUnit.assigned_job_id == job_id).all()
        )
        return any(
            matches_requirement(u, requirement.material, requirement.color, requirement.finish)
            for u in units
        )

    def required_assignments(self, now: datetime = None) -> List[Dict]:
        """Confirmed, not yet started jobs that still need materials checked out."""
        now = now or utcnow()
        jobs = (
            self.db.query(PrintJob)
            .filter(
                PrintJob.is_confirmed == True,
                PrintJob.printer_id.isnot(None),
                PrintJob.start_time > now,
            )
            .order_by(PrintJob.start_time)
            .all()
        )
        result = []
        for job in jobs:
            materials = []
            for requirement in job.requirements:
                printer = job.printer
                materials.append(
                    {
                        "id": requirement.id,
                        "material": requirement.material,
                        "color": requirement.color,
                        "finish": normalize_finish(requirement.finish),
                        "is_assigned": self.is_requirement_assigned(job.job_id, requirement),
                        "available_stock": self.available_stock_count(
                            printer.technology,
                            requirement.material,
                            requirement.color,
                            requirement.finish,
                        ),
                    }
                )
            if any(not m["is_assigned"] for m in materials):
                result.append({"job": job, "printer": job.printer, "materials": materials})
        return result
