from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_job_service, get_printer_service, raise_service_error
from app.schemas.job_schemas import PrintJobResponse
from app.schemas.printer_schemas import (
    CurrentJob,
    PrinterCreate,
    PrinterResponse,
    PrinterStatusUpdate,
)
from app.services.job_service import JobService
from app.services.printer_service import PrinterService
from app.services.utils.job_utils import PrinterState

router = APIRouter()


def _printer_response(printer, state: PrinterState) -> PrinterResponse:
    response = PrinterResponse.model_validate(printer)
    response.status = state.status
    response.completion_estimate = state.completion_estimate
    if state.current_job is not None:
        response.current_job = CurrentJob(
            job_id=state.current_job.job_id,
            name=state.current_job.name,
            progress=round(state.progress, 1),
        )
    return response


@router.post("/", response_model=PrinterResponse)
def create_printer(
    printer_data: PrinterCreate,
    printer_service: PrinterService = Depends(get_printer_service),
):
    """Create a new printer"""
    printer = printer_service.create_printer(
        code_name=printer_data.code_name,
        name=printer_data.name,
        technology=printer_data.technology,
        model=printer_data.model,
        location=printer_data.location,
        capacity=printer_data.capacity,
        material=printer_data.material,
        initialization_date=printer_data.initialization_date,
    )
    if not printer:
        raise_service_error(printer_service, "Failed to create printer")
    return _printer_response(printer, printer_service.get_state(printer))


@router.get("/", response_model=List[PrinterResponse])
def get_printers(
    technology: Optional[str] = None,
    printer_service: PrinterService = Depends(get_printer_service),
):
    """Get all printers with their live status"""
    return [
        _printer_response(printer, state)
        for printer, state in printer_service.list_printers(technology=technology)
    ]


@router.get("/{printer_id}", response_model=PrinterResponse)
def get_printer(
    printer_id: int, printer_service: PrinterService = Depends(get_printer_service)
):
    """Get a specific printer"""
    printer = printer_service.get_printer(printer_id)
    if not printer:
        raise HTTPException(status_code=404, detail="Printer not found")
    return _printer_response(printer, printer_service.get_state(printer))


@router.get("/{printer_id}/schedule", response_model=List[PrintJobResponse])
def get_printer_schedule(
    printer_id: int,
    printer_service: PrinterService = Depends(get_printer_service),
    job_service: JobService = Depends(get_job_service),
):
    """Jobs placed on this printer, earliest first"""
    if not printer_service.get_printer(printer_id):
        raise HTTPException(status_code=404, detail="Printer not found")
    return job_service.get_schedule(printer_id)


@router.put("/{printer_id}/status", response_model=PrinterResponse)
def update_printer_status(
    printer_id: int,
    status_data: PrinterStatusUpdate,
    printer_service: PrinterService = Depends(get_printer_service),
):
    """Update printer status"""
    printer = printer_service.update_status(printer_id, status_data.status)
    if not printer:
        raise_service_error(printer_service, "Failed to update printer status")
    return _printer_response(printer, printer_service.get_state(printer))


@router.delete("/{printer_id}")
def delete_printer(
    printer_id: int, printer_service: PrinterService = Depends(get_printer_service)
):
    """Remove a printer and its schedule"""
    if not printer_service.delete_printer(printer_id):
        raise_service_error(printer_service, "Failed to delete printer")
    return {"message": f"Printer {printer_id} deleted"}
