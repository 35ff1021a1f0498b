from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_job_service, raise_service_error
from app.schemas.job_schemas import (
    JobAssignment,
    JobConfirmation,
    PrintJobCreate,
    PrintJobResponse,
    PrintJobUpdate,
    SlotResponse,
)
from app.services.job_service import JobService

router = APIRouter()


@router.post("/", response_model=PrintJobResponse)
def create_job(
    job_data: PrintJobCreate, job_service: JobService = Depends(get_job_service)
):
    """Queue a new print job"""
    job = job_service.create_job(
        name=job_data.name,
        project_code=job_data.project_code,
        required_technology=job_data.required_technology,
        priority=job_data.priority,
        items=job_data.items,
        estimated_time_min=job_data.estimated_time_min,
        deadline=job_data.deadline,
        item_groups=[group.model_dump() for group in job_data.item_groups],
        image_url=job_data.image_url,
        notes=job_data.notes,
    )
    if not job:
        raise_service_error(job_service, "Failed to create job")
    return job


@router.get("/queue", response_model=List[PrintJobResponse])
def get_queue(job_service: JobService = Depends(get_job_service)):
    """Jobs waiting for a printer"""
    return job_service.get_queue()


@router.post("/queue/sync", response_model=List[PrintJobResponse])
def sync_queue(job_service: JobService = Depends(get_job_service)):
    """Queue jobs for pending orders that have none; returns the new jobs"""
    return job_service.sync_job_queue()


@router.get("/unconfirmed", response_model=List[PrintJobResponse])
def get_unconfirmed_jobs(job_service: JobService = Depends(get_job_service)):
    """Scheduled jobs waiting for file upload confirmation"""
    return job_service.get_unconfirmed_jobs()


@router.get("/{job_id}", response_model=PrintJobResponse)
def get_job(job_id: str, job_service: JobService = Depends(get_job_service)):
    """Get a specific job"""
    job = job_service.get_job_by_id(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.patch("/{job_id}", response_model=PrintJobResponse)
def update_job(
    job_id: str,
    job_data: PrintJobUpdate,
    job_service: JobService = Depends(get_job_service),
):
    """Edit a queued job"""
    changes = job_data.model_dump(exclude_none=True)
    job = job_service.update_job(job_id, **changes)
    if not job:
        raise_service_error(job_service, "Failed to update job")
    return job


@router.delete("/{job_id}")
def delete_job(job_id: str, job_service: JobService = Depends(get_job_service)):
    """Delete a queued job"""
    success = job_service.delete_job(job_id)
    if not success:
        raise_service_error(job_service, "Failed to delete job")
    return {"message": f"Job {job_id} deleted"}


@router.get("/{job_id}/slot", response_model=SlotResponse)
def get_optimal_slot(job_id: str, job_service: JobService = Depends(get_job_service)):
    """Earliest-finishing slot on a compatible printer before the deadline"""
    slot = job_service.find_optimal_slot(job_id)
    if not slot:
        raise_service_error(job_service, "No slot available")
    return {
        "printer_id": slot.printer.id,
        "printer_name": slot.printer.name,
        "start_time": slot.start_time,
        "end_time": slot.end_time,
    }


@router.post("/{job_id}/assign", response_model=PrintJobResponse)
def assign_job(
    job_id: str,
    assignment: JobAssignment,
    job_service: JobService = Depends(get_job_service),
):
    """Place a queued job on a printer"""
    job = job_service.assign_job_to_printer(
        job_id, assignment.printer_id, start_time=assignment.start_time
    )
    if not job:
        raise_service_error(job_service, "Failed to assign job")
    return job


@router.post("/{job_id}/auto-assign", response_model=PrintJobResponse)
def auto_assign_job(job_id: str, job_service: JobService = Depends(get_job_service)):
    """Place a queued job in its optimal slot"""
    job = job_service.auto_assign(job_id)
    if not job:
        raise_service_error(job_service, "Failed to auto-assign job")
    return job


@router.post("/{job_id}/confirm", response_model=PrintJobResponse)
def confirm_job(
    job_id: str,
    confirmation: JobConfirmation,
    job_service: JobService = Depends(get_job_service),
):
    """Confirm the file upload for a scheduled job"""
    job = job_service.confirm_job(job_id, confirmation.printer_id)
    if not job:
        raise_service_error(job_service, "Failed to confirm job")
    return job
