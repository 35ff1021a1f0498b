from fastapi import APIRouter

from app.api.v1.endpoints import consumables, costing, inventory, jobs, orders, printers, tracking

api_router = APIRouter()

api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(tracking.router, prefix="/tracking", tags=["tracking"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(printers.router, prefix="/printers", tags=["printers"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(consumables.router, prefix="/consumables", tags=["consumables"])
api_router.include_router(costing.router, prefix="/costing", tags=["costing"])
