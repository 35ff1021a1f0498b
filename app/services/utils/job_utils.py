from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from app.core.config import settings
from app.models.job import ItemGroup, MaterialRequirement, PrintJob

UNCONFIRMED_COLOR = "#F97316"

_DURATION_COLORS = [
    (2, "#A5D8FF"),
    (4, "#69B3F7"),
    (6, "#4A90E2"),
    (8, "#3B71CA"),
    (10, "#2A5297"),
    (12, "#1C3A69"),
    (24, "#F7B500"),
]


def utcnow() -> datetime:
    """Naive UTC timestamp; schedule columns are stored without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def color_for_duration(duration_hours: float) -> str:
    for limit, color in _DURATION_COLORS:
        if duration_hours <= limit:
            return color
    return "#D0021B"


def deadline_cutoff(deadline: Optional[date]) -> Optional[datetime]:
    if deadline is None:
        return None
    return datetime.combine(deadline, time.min)


def order_job_id(order_number: str) -> str:
    return f"JOB-{order_number}"


def build_job_queue(orders: Iterable) -> List[PrintJob]:
    """One unsaved job per pending order, in input order.

    Priority is copied onto the job but does not influence the ordering.
    """
    jobs = []
    for order in orders:
        if order.status != "pending":
            continue
        requirement = MaterialRequirement(
            material=settings.placeholder_material,
            color=settings.placeholder_color,
            finish=settings.placeholder_finish,
        )
        group = ItemGroup(quantity=order.items, materials=[requirement])
        jobs.append(
            PrintJob(
                job_id=order_job_id(order.order_number),
                order_id=order.id,
                name=f"Order: {order.order_number}",
                project_code=order.project_code,
                order_number=order.order_number,
                priority=order.priority,
                required_technology=order.printer_tech,
                items=order.items,
                estimated_time_min=order.items * settings.time_per_item_minutes,
                deadline=order.deadline,
                image_url=order.image_url,
                status="queued",
                is_confirmed=False,
                duration_hours=0.0,
                item_groups=[group],
            )
        )
    return jobs


def next_start_after(jobs: Sequence[PrintJob], now: datetime) -> datetime:
    """Start of the next job appended to a printer: after its last job, never in the past."""
    last_end = max((j.end_time for j in jobs if j.end_time), default=None)
    if last_end is None:
        return now
    return max(last_end, now)


def find_overlap(
    jobs: Sequence[PrintJob], start: datetime, end: datetime
) -> Optional[PrintJob]:
    """First scheduled job whose time range intersects [start, end)."""
    for job in jobs:
        if not (job.start_time and job.end_time):
            continue
        if start < job.end_time and end > job.start_time:
            return job
    return None


@dataclass
class SlotOption:
    printer: object
    start_time: datetime
    end_time: datetime


def find_optimal_slot(
    schedules: Iterable[Tuple[object, Sequence[PrintJob]]],
    estimated_time_min: int,
    deadline: Optional[date],
    now: datetime,
) -> Optional[SlotOption]:
    """Earliest-finishing slot across printers that ends before the deadline.

    ``schedules`` pairs each compatible printer with its scheduled jobs.
    Candidate slots are the gap before the first job, each gap between
    consecutive jobs, and the time after the last job.
    """
    required = timedelta(minutes=estimated_time_min or 0)
    earliest_end = deadline_cutoff(deadline)
    best: Optional[SlotOption] = None

    def consider(printer, start: datetime) -> None:
        nonlocal best, earliest_end
        end = start + required
        if earliest_end is None or end < earliest_end:
            best = SlotOption(printer=printer, start_time=start, end_time=end)
            earliest_end = end

    for printer, jobs in schedules:
        ordered = sorted(
            (j for j in jobs if j.start_time and j.end_time), key=lambda j: j.start_time
        )
        if ordered and ordered[0].start_time > now:
            if ordered[0].start_time - now >= required:
                consider(printer, now)
        for current, following in zip(ordered, ordered[1:]):
            gap_start = max(current.end_time, now)
            if following.start_time - gap_start >= required:
                consider(printer, gap_start)
        consider(printer, next_start_after(ordered, now))

    return best


@dataclass
class PrinterState:
    status: str
    current_job: Optional[PrintJob] = None
    progress: float = 0.0
    completion_estimate: Optional[datetime] = None


def effective_printer_state(
    stored_status: str, jobs: Sequence[PrintJob], now: datetime
) -> PrinterState:
    """A confirmed job covering ``now`` means printing; a stale 'printing' reads as idle."""
    for job in jobs:
        if not job.is_confirmed or not job.start_time or not job.end_time:
            continue
        if job.start_time <= now < job.end_time:
            total = (job.end_time - job.start_time).total_seconds()
            elapsed = (now - job.start_time).total_seconds()
            progress = min(100.0, elapsed / total * 100) if total > 0 else 0.0
            return PrinterState(
                status="printing",
                current_job=job,
                progress=progress,
                completion_estimate=job.end_time,
            )
    status = "idle" if stored_status == "printing" else stored_status
    return PrinterState(status=status)
