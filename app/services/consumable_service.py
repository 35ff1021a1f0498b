import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.consumable import InventoryItem
from app.services.utils.consumable_utils import (
    CATEGORIES,
    REORDER_PRIORITY,
    calculate_inventory_status,
    needs_reorder,
    remaining_after_use,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "category",
    "quantity",
    "min_stock",
    "min_order",
    "location",
    "image_url",
)


class ConsumableService:
    def __init__(self, db: Session):
        self.db = db
        self.last_error_message: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def _set_error(self, message: str, code: str = "invalid_request") -> None:
        self.last_error_message = message
        self.last_error_code = code
        logger.error(message)

    def _check_counts(self, quantity: int, min_stock: int, min_order: int) -> bool:
        if quantity < 0 or min_stock < 0 or min_order < 0:
            self._set_error("Quantity, minimum stock and minimum order cannot be negative")
            return False
        return True

    def create_item(
        self,
        name: str,
        category: str,
        quantity: int = 0,
        min_stock: int = 0,
        min_order: int = 0,
        description: str = None,
        location: str = None,
        image_url: str = None,
        barcode: str = None,
    ) -> Optional[InventoryItem]:
        """Add a consumable; the barcode is generated when not given."""
        if category not in CATEGORIES:
            self._set_error(f"Unknown inventory category: {category}")
            return None
        if not self._check_counts(quantity, min_stock, min_order):
            return None
        try:
            if barcode is None:
                barcode = f"ITEM-{uuid.uuid4().hex[:8].upper()}"
            elif self.get_by_barcode(barcode):
                self._set_error(f"Inventory item {barcode} already exists")
                return None

            item = InventoryItem(
                barcode=barcode,
                name=name,
                description=description,
                category=category,
                quantity=quantity,
                min_stock=min_stock,
                min_order=min_order,
                status=calculate_inventory_status(quantity, min_stock),
                location=location,
                image_url=image_url,
            )
            self.db.add(item)
            self.db.commit()
            logger.info(f"Added inventory item {barcode} ({name}), {quantity} in stock")
            return item
        except Exception as e:
            self._set_error(f"Error creating inventory item: {str(e)}")
            self.db.rollback()
            return None

    def get_item(self, item_id: int) -> Optional[InventoryItem]:
        return self.db.query(InventoryItem).filter(InventoryItem.id == item_id).first()

    def get_by_barcode(self, barcode: str) -> Optional[InventoryItem]:
        return self.db.query(InventoryItem).filter(InventoryItem.barcode == barcode).first()

    def list_items(
        self, category: str = None, status: str = None, search: str = None
    ) -> List[InventoryItem]:
        query = self.db.query(InventoryItem)
        if category:
            query = query.filter(InventoryItem.category == category)
        if status:
            query = query.filter(InventoryItem.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(InventoryItem.name.ilike(pattern), InventoryItem.barcode.ilike(pattern))
            )
        return query.order_by(InventoryItem.id).all()

    def update_item(self, item_id: int, **changes) -> Optional[InventoryItem]:
        """Edit an item; the stock status is recomputed from quantity and minimum."""
        try:
            item = self.get_item(item_id)
            if not item:
                self._set_error(f"Inventory item {item_id} not found", "not_found")
                return None
            category = changes.get("category")
            if category is not None and category not in CATEGORIES:
                self._set_error(f"Unknown inventory category: {category}")
                return None
            updated = {
                field: changes[field] if changes.get(field) is not None else getattr(item, field)
                for field in EDITABLE_FIELDS
            }
            if not self._check_counts(
                updated["quantity"], updated["min_stock"], updated["min_order"]
            ):
                return None
            for field, value in updated.items():
                setattr(item, field, value)
            item.status = calculate_inventory_status(item.quantity, item.min_stock)
            self.db.commit()
            logger.info(f"Updated inventory item {item.barcode}: {item.status}")
            return item
        except Exception as e:
            self._set_error(f"Error updating inventory item: {str(e)}")
            self.db.rollback()
            return None

    def delete_item(self, item_id: int) -> bool:
        try:
            item = self.get_item(item_id)
            if not item:
                self._set_error(f"Inventory item {item_id} not found", "not_found")
                return False
            barcode = item.barcode
            self.db.delete(item)
            self.db.commit()
            logger.info(f"Deleted inventory item {barcode}")
            return True
        except Exception as e:
            self._set_error(f"Error deleting inventory item: {str(e)}")
            self.db.rollback()
            return False

    def use_item(self, item_id: int, quantity_used: int) -> Optional[InventoryItem]:
        """Take items out of stock. Using more than is on hand leaves zero."""
        if quantity_used <= 0:
            self._set_error("Quantity used must be positive")
            return None
        try:
            item = self.get_item(item_id)
            if not item:
                self._set_error(f"Inventory item {item_id} not found", "not_found")
                return None
            item.quantity = remaining_after_use(item.quantity, quantity_used)
            item.status = calculate_inventory_status(item.quantity, item.min_stock)
            self.db.commit()
            logger.info(
                f"Used {quantity_used} of {item.barcode}, {item.quantity} left ({item.status})"
            )
            return item
        except Exception as e:
            self._set_error(f"Error using inventory item: {str(e)}")
            self.db.rollback()
            return None

    def reorder_list(self) -> List[Dict]:
        """Items low or out of stock, most urgent first, with the minimum order as quantity."""
        items = [
            item
            for item in self.db.query(InventoryItem).order_by(InventoryItem.id).all()
            if needs_reorder(item.status)
        ]
        items.sort(key=lambda item: REORDER_PRIORITY[item.status])
        return [{"item": item, "reorder_qty": item.min_order} for item in items]
