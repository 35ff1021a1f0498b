from app.models.consumable import InventoryItem
from app.models.costing import CostingTemplate, LoggedCalculation
from app.models.inventory import MaterialUnit
from app.models.job import ItemGroup, MaterialRequirement, PrintJob
from app.models.order import Order
from app.models.printer import Printer

__all__ = [
    "CostingTemplate",
    "InventoryItem",
    "ItemGroup",
    "LoggedCalculation",
    "MaterialRequirement",
    "MaterialUnit",
    "Order",
    "PrintJob",
    "Printer",
]
