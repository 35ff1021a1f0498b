from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_costing_service, raise_service_error
from app.schemas.costing_schemas import (
    CostBreakdownResponse,
    CostCalculationRequest,
    CostingTemplateCreate,
    CostingTemplateResponse,
    CostingTemplateUpdate,
    LoggedCalculationResponse,
)
from app.services.costing_service import CostingService

router = APIRouter()


@router.post("/calculate", response_model=CostBreakdownResponse)
def calculate(
    request: CostCalculationRequest,
    costing_service: CostingService = Depends(get_costing_service),
):
    """Cost breakdown and consumer/reseller prices for one part"""
    breakdown = costing_service.calculate(
        request.inputs.model_dump(), request.pricing.model_dump()
    )
    return breakdown.to_dict()


@router.post("/log", response_model=LoggedCalculationResponse)
def log_calculation(
    request: CostCalculationRequest,
    costing_service: CostingService = Depends(get_costing_service),
):
    """Calculate and keep the result in the calculation log"""
    entry = costing_service.log_calculation(
        request.inputs.model_dump(), request.pricing.model_dump()
    )
    if not entry:
        raise_service_error(costing_service, "Failed to log calculation")
    return entry


@router.get("/log", response_model=List[LoggedCalculationResponse])
def get_logged_calculations(costing_service: CostingService = Depends(get_costing_service)):
    return costing_service.list_logged()


@router.delete("/log/{log_id}")
def delete_logged_calculation(
    log_id: int, costing_service: CostingService = Depends(get_costing_service)
):
    if not costing_service.delete_logged(log_id):
        raise_service_error(costing_service, "Failed to delete logged calculation")
    return {"message": f"Logged calculation {log_id} deleted"}


@router.post("/templates", response_model=CostingTemplateResponse)
def save_template(
    template_data: CostingTemplateCreate,
    costing_service: CostingService = Depends(get_costing_service),
):
    template = costing_service.save_template(
        template_data.name, template_data.inputs.model_dump(), template_data.pricing.model_dump()
    )
    if not template:
        raise_service_error(costing_service, "Failed to save costing template")
    return template


@router.get("/templates", response_model=List[CostingTemplateResponse])
def get_templates(costing_service: CostingService = Depends(get_costing_service)):
    return costing_service.list_templates()


@router.get("/templates/{template_id}", response_model=CostingTemplateResponse)
def get_template(template_id: int, costing_service: CostingService = Depends(get_costing_service)):
    template = costing_service.get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Costing template not found")
    return template


@router.patch("/templates/{template_id}", response_model=CostingTemplateResponse)
def update_template(
    template_id: int,
    changes: CostingTemplateUpdate,
    costing_service: CostingService = Depends(get_costing_service),
):
    template = costing_service.update_template(
        template_id,
        name=changes.name,
        inputs=changes.inputs.model_dump() if changes.inputs else None,
        pricing=changes.pricing.model_dump() if changes.pricing else None,
    )
    if not template:
        raise_service_error(costing_service, "Failed to update costing template")
    return template


@router.delete("/templates/{template_id}")
def delete_template(template_id: int, costing_service: CostingService = Depends(get_costing_service)):
    if not costing_service.delete_template(template_id):
        raise_service_error(costing_service, "Failed to delete costing template")
    return {"message": f"Costing template {template_id} deleted"}


@router.get("/templates/{template_id}/calculate", response_model=CostBreakdownResponse)
def calculate_template(
    template_id: int, costing_service: CostingService = Depends(get_costing_service)
):
    """Recalculate a saved template with its stored inputs"""
    breakdown = costing_service.calculate_template(template_id)
    if breakdown is None:
        raise_service_error(costing_service, "Failed to calculate template")
    return breakdown.to_dict()
