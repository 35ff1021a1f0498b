from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_inventory_service, raise_service_error
from app.schemas.inventory_schemas import (
    ColorStock,
    MaterialAssignmentRequest,
    MaterialReturnRequest,
    MaterialUnitCreate,
    MaterialUnitResponse,
    RequiredAssignment,
)
from app.services.inventory_service import InventoryService

router = APIRouter()


@router.post("/units", response_model=MaterialUnitResponse)
def create_unit(
    unit_data: MaterialUnitCreate,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Add a spool, resin or powder unit to stock"""
    unit = inventory_service.create_unit(**unit_data.model_dump())
    if not unit:
        raise_service_error(inventory_service, "Failed to create material unit")
    return unit


@router.get("/units", response_model=List[MaterialUnitResponse])
def get_units(
    kind: Optional[str] = None,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Get all stock units, optionally of one kind"""
    return inventory_service.list_units(kind)


@router.get("/units/assigned", response_model=List[MaterialUnitResponse])
def get_assigned_units(
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Units currently checked out to printers"""
    return inventory_service.get_assigned_units()


@router.get("/units/low-stock", response_model=List[MaterialUnitResponse])
def get_low_stock_units(
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Units that are Low, Critical or Empty"""
    return inventory_service.get_low_stock_units()


@router.get("/units/{unit_code}", response_model=MaterialUnitResponse)
def get_unit(
    unit_code: str, inventory_service: InventoryService = Depends(get_inventory_service)
):
    """Get a specific unit"""
    unit = inventory_service.get_unit(unit_code)
    if not unit:
        raise HTTPException(status_code=404, detail="Material unit not found")
    return unit


@router.post("/units/{unit_code}/return", response_model=MaterialUnitResponse)
def return_unit(
    unit_code: str,
    return_data: MaterialReturnRequest,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Check a unit back into stock"""
    unit = inventory_service.return_unit(unit_code, return_data.used_amount)
    if not unit:
        raise_service_error(inventory_service, "Failed to return material unit")
    return unit


@router.post("/assignments", response_model=MaterialUnitResponse)
def assign_material(
    request: MaterialAssignmentRequest,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Reserve a matching unit for a job on its printer"""
    unit = inventory_service.assign_for_job(
        job_id=request.job_id,
        requirement_id=request.requirement_id,
        material=request.material,
        color=request.color,
        finish=request.finish,
        printer_id=request.printer_id,
    )
    if not unit:
        raise_service_error(inventory_service, "Failed to assign material")
    return unit


@router.get("/assignments/required", response_model=List[RequiredAssignment])
def get_required_assignments(
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Confirmed upcoming jobs that still need materials checked out"""
    return [
        {
            "job_id": entry["job"].job_id,
            "job_name": entry["job"].name,
            "project_code": entry["job"].project_code,
            "printer_id": entry["printer"].id,
            "printer_name": entry["printer"].name,
            "start_time": entry["job"].start_time,
            "materials": entry["materials"],
        }
        for entry in inventory_service.required_assignments()
    ]


@router.get("/options/{technology}/materials", response_model=List[str])
def get_material_options(
    technology: str, inventory_service: InventoryService = Depends(get_inventory_service)
):
    return inventory_service.available_materials(technology)


@router.get("/options/{technology}/finishes", response_model=List[str])
def get_finish_options(
    technology: str,
    material: str,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    return inventory_service.available_finishes(technology, material)


@router.get("/options/{technology}/colors", response_model=List[ColorStock])
def get_color_options(
    technology: str,
    material: str,
    finish: str,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    return inventory_service.available_colors(technology, material, finish)


@router.get("/stock-count")
def get_stock_count(
    technology: str,
    material: str,
    color: Optional[str] = None,
    finish: Optional[str] = None,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """Free, non-empty units matching a requirement on a printer technology"""
    count = inventory_service.available_stock_count(technology, material, color, finish)
    return {"technology": technology, "material": material, "count": count}
