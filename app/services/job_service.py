import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.job import ItemGroup, MaterialRequirement, PrintJob
from app.models.order import Order
from app.models.printer import Printer
from app.services.utils.job_utils import (
    UNCONFIRMED_COLOR,
    SlotOption,
    build_job_queue,
    color_for_duration,
    find_optimal_slot,
    find_overlap,
    next_start_after,
    utcnow,
)
from app.services.utils.material_utils import TECHNOLOGIES

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "project_code",
    "priority",
    "required_technology",
    "items",
    "estimated_time_min",
    "deadline",
    "image_url",
    "notes",
)


def _build_item_groups(item_groups: List[Dict]) -> List[ItemGroup]:
    groups = []
    for group in item_groups or []:
        materials = [
            MaterialRequirement(
                material=m["material"], color=m.get("color"), finish=m.get("finish")
            )
            for m in group.get("materials", [])
        ]
        groups.append(ItemGroup(quantity=group.get("quantity", 1), materials=materials))
    return groups


class JobService:
    def __init__(self, db: Session):
        self.db = db
        self.last_error_message: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def _set_error(self, message: str, code: str = "invalid_request") -> None:
        self.last_error_message = message
        self.last_error_code = code
        logger.error(message)

    # Queue

    def sync_job_queue(self) -> List[PrintJob]:
        """Create queued jobs for pending orders that do not have one yet."""
        try:
            pending = (
                self.db.query(Order)
                .filter(Order.status == "pending", ~Order.jobs.any())
                .order_by(Order.id)
                .all()
            )
            jobs = build_job_queue(pending)
            for job in jobs:
                self.db.add(job)
            self.db.commit()
            if jobs:
                logger.info(f"Queued {len(jobs)} job(s) from pending orders")
            return jobs
        except Exception as e:
            self._set_error(f"Error building job queue: {str(e)}")
            self.db.rollback()
            return []

    def get_queue(self) -> List[PrintJob]:
        """Jobs waiting for a printer."""
        return (
            self.db.query(PrintJob)
            .filter(PrintJob.status == "queued")
            .order_by(PrintJob.id)
            .all()
        )

    def create_job(
        self,
        name: str,
        project_code: str = None,
        required_technology: str = None,
        priority: str = None,
        items: int = 1,
        estimated_time_min: int = 0,
        deadline: date = None,
        item_groups: List[Dict] = None,
        image_url: str = None,
        notes: str = None,
    ) -> Optional[PrintJob]:
        """Queue a job that is not tied to an order"""
        if required_technology is not None and required_technology not in TECHNOLOGIES:
            self._set_error(f"Unknown printer technology: {required_technology}")
            return None
        try:
            job_id = f"JOB_{uuid.uuid4().hex[:8].upper()}"
            job = PrintJob(
                job_id=job_id,
                name=name,
                project_code=project_code,
                required_technology=required_technology,
                priority=priority,
                items=items,
                estimated_time_min=estimated_time_min,
                deadline=deadline,
                image_url=image_url,
                notes=notes,
                status="queued",
                is_confirmed=False,
                duration_hours=0.0,
                item_groups=_build_item_groups(item_groups),
            )
            self.db.add(job)
            self.db.commit()
            logger.info(f"Queued job {job_id} ({name})")
            return job
        except Exception as e:
            self._set_error(f"Error creating job: {str(e)}")
            self.db.rollback()
            return None

    def update_job(self, job_id: str, **changes) -> Optional[PrintJob]:
        """Edit a queued job; ``item_groups`` replaces all groups when given."""
        try:
            job = self.get_job_by_id(job_id)
            if not job:
                self._set_error(f"Job {job_id} not found", "not_found")
                return None
            if job.status != "queued":
                self._set_error("Only queued jobs can be edited")
                return None
            technology = changes.get("required_technology")
            if technology is not None and technology not in TECHNOLOGIES:
                self._set_error(f"Unknown printer technology: {technology}")
                return None
            for field in EDITABLE_FIELDS:
                if changes.get(field) is not None:
                    setattr(job, field, changes[field])
            if changes.get("item_groups") is not None:
                job.item_groups = _build_item_groups(changes["item_groups"])
            self.db.commit()
            logger.info(f"Updated queued job {job_id}")
            return job
        except Exception as e:
            self._set_error(f"Error updating job: {str(e)}")
            self.db.rollback()
            return None

    def delete_job(self, job_id: str) -> bool:
        """Delete a job only if it's still queued."""
        try:
            job = self.get_job_by_id(job_id)
            if not job:
                self._set_error(f"Job {job_id} not found", "not_found")
                return False
            if job.status != "queued":
                self._set_error("Only queued jobs can be deleted")
                return False
            self.db.delete(job)
            self.db.commit()
            logger.info(f"Deleted queued job {job_id}")
            return True
        except Exception as e:
            self._set_error(f"Error deleting job: {str(e)}")
            self.db.rollback()
            return False

    # Printer matching

    def compatible_printers(self, job: PrintJob) -> List[Printer]:
        query = self.db.query(Printer)
        if job.required_technology:
            query = query.filter(Printer.technology == job.required_technology)
        return query.order_by(Printer.id).all()

    def assign_job_to_printer(
        self, job_id: str, printer_id: int, start_time: datetime = None, now: datetime = None
    ) -> Optional[PrintJob]:
        """Place a queued job on a printer, after its last scheduled job by default."""
        try:
            job = self.get_job_by_id(job_id)
            if not job:
                self._set_error(f"Job {job_id} not found", "not_found")
                return None
            if job.status != "queued":
                self._set_error(f"Job {job_id} is not in the queue")
                return None
            printer = self.db.query(Printer).filter(Printer.id == printer_id).first()
            if not printer:
                self._set_error(f"Printer {printer_id} not found", "not_found")
                return None
            if job.required_technology and printer.technology != job.required_technology:
                self._set_error(
                    f"Printer {printer_id} ({printer.technology}) cannot run a "
                    f"{job.required_technology} job"
                )
                return None

            now = now or utcnow()
            schedule = self.get_schedule(printer_id)
            duration_hours = (job.estimated_time_min or 0) / 60
            if start_time is not None:
                if start_time.tzinfo is not None:
                    # Schedule columns hold naive UTC
                    start_time = start_time.astimezone(timezone.utc).replace(tzinfo=None)
                if start_time < now:
                    self._set_error(f"Start time {start_time.isoformat()} is in the past")
                    return None
                clash = find_overlap(
                    schedule, start_time, start_time + timedelta(hours=duration_hours)
                )
                if clash is not None:
                    self._set_error(
                        f"Start time {start_time.isoformat()} overlaps job {clash.job_id} "
                        f"on printer {printer_id}"
                    )
                    return None
            start = start_time or next_start_after(schedule, now)

            job.printer_id = printer.id
            job.start_time = start
            job.end_time = start + timedelta(hours=duration_hours)
            job.duration_hours = duration_hours
            job.is_confirmed = False
            job.color = UNCONFIRMED_COLOR
            job.status = "scheduled"

            self.db.commit()
            logger.info(
                f"Scheduled job {job_id} on printer {printer_id} at {start.isoformat()} "
                f"awaiting confirmation"
            )
            return job
        except Exception as e:
            self._set_error(f"Error assigning job: {str(e)}")
            self.db.rollback()
            return None

    def confirm_job(self, job_id: str, printer_id: int) -> Optional[PrintJob]:
        """Confirm the file upload for a job scheduled on this printer."""
        try:
            job = (
                self.db.query(PrintJob)
                .filter(PrintJob.job_id == job_id, PrintJob.printer_id == printer_id)
                .first()
            )
            if not job:
                self._set_error(
                    f"Job {job_id} is not scheduled on printer {printer_id}", "not_found"
                )
                return None
            job.is_confirmed = True
            job.status = "confirmed"
            job.color = color_for_duration(job.duration_hours or 0)
            self.db.commit()
            logger.info(f"Confirmed job {job_id} on printer {printer_id}")
            return job
        except Exception as e:
            self._set_error(f"Error confirming job: {str(e)}")
            self.db.rollback()
            return None

    def find_optimal_slot(self, job_id: str, now: datetime = None) -> Optional[SlotOption]:
        job = self.get_job_by_id(job_id)
        if not job:
            self._set_error(f"Job {job_id} not found", "not_found")
            return None
        now = now or utcnow()
        schedules = [
            (printer, self.get_schedule(printer.id)) for printer in self.compatible_printers(job)
        ]
        slot = find_optimal_slot(schedules, job.estimated_time_min, job.deadline, now)
        if not slot:
            self._set_error(f"No slot finishes before the deadline for job {job_id}")
        return slot

    def auto_assign(self, job_id: str, now: datetime = None) -> Optional[PrintJob]:
        now = now or utcnow()
        slot = self.find_optimal_slot(job_id, now=now)
        if not slot:
            return None
        return self.assign_job_to_printer(
            job_id, slot.printer.id, start_time=slot.start_time, now=now
        )

    # Queries

    def get_job_by_id(self, job_id: str) -> Optional[PrintJob]:
        """Get job by ID"""
        return self.db.query(PrintJob).filter(PrintJob.job_id == job_id).first()

    def get_schedule(self, printer_id: int) -> List[PrintJob]:
        """Jobs placed on a printer, earliest first."""
        return (
            self.db.query(PrintJob)
            .filter(PrintJob.printer_id == printer_id)
            .order_by(PrintJob.start_time)
            .all()
        )

    def get_unconfirmed_jobs(self) -> List[PrintJob]:
        return (
            self.db.query(PrintJob)
            .filter(PrintJob.status == "scheduled")
            .order_by(PrintJob.start_time)
            .all()
        )
