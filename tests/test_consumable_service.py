"""
Unit tests for consumables: stock status, usage and reordering.
"""

import pytest

from app.services.consumable_service import ConsumableService
from app.services.utils.consumable_utils import calculate_inventory_status, remaining_after_use


@pytest.fixture
def consumable_service(db):
    return ConsumableService(db)


@pytest.fixture
def make_item(consumable_service):
    def _make(name="Packing Boxes (Small)", category="Packing Material", quantity=450,
              min_stock=100, min_order=200, **extra):
        return consumable_service.create_item(
            name=name, category=category, quantity=quantity, min_stock=min_stock,
            min_order=min_order, **extra
        )

    return _make


# Tests for stock status

class TestInventoryStatus:
    @pytest.mark.parametrize(
        "quantity,min_stock,status",
        [
            (0, 5, "Out of Stock"),
            (-1, 0, "Out of Stock"),
            (4, 5, "Low Stock"),
            (5, 5, "In Stock"),
            (3, 2, "In Stock"),
        ],
    )
    def test_status(self, quantity, min_stock, status):
        assert calculate_inventory_status(quantity, min_stock) == status

    def test_remaining_never_negative(self):
        assert remaining_after_use(3, 5) == 0
        assert remaining_after_use(10, 4) == 6


# Tests for the item registry

class TestItems:
    def test_create_generates_barcode_and_status(self, make_item):
        item = make_item(quantity=50)

        assert item.barcode.startswith("ITEM-")
        assert item.status == "Low Stock"

    def test_duplicate_barcode(self, consumable_service, make_item):
        make_item(barcode="PACK-BOX-SML")
        assert make_item(barcode="PACK-BOX-SML") is None
        assert consumable_service.last_error_code == "invalid_request"

    def test_unknown_category(self, consumable_service, make_item):
        assert make_item(category="Food") is None
        assert "category" in consumable_service.last_error_message

    def test_negative_quantity(self, make_item):
        assert make_item(quantity=-1) is None

    def test_update_recomputes_status(self, consumable_service, make_item):
        item = make_item()

        updated = consumable_service.update_item(item.id, quantity=20, location="Shelf C-3")

        assert updated.quantity == 20
        assert updated.location == "Shelf C-3"
        assert updated.status == "Low Stock"

    def test_update_unknown_item(self, consumable_service):
        assert consumable_service.update_item(42, quantity=1) is None
        assert consumable_service.last_error_code == "not_found"

    def test_list_filters(self, consumable_service, make_item):
        make_item()
        make_item(name="Stepper Motors", category="Electronics", quantity=15, min_stock=10,
                  barcode="ELEC-STEP-N17")
        make_item(name="Calipers", category="Tools", quantity=0, min_stock=3)

        assert [i.name for i in consumable_service.list_items(category="Electronics")] == [
            "Stepper Motors"
        ]
        assert [i.name for i in consumable_service.list_items(status="Out of Stock")] == [
            "Calipers"
        ]
        assert len(consumable_service.list_items(search="elec-step")) == 1

    def test_delete(self, consumable_service, make_item):
        item_id = make_item().id
        assert consumable_service.delete_item(item_id) is True
        assert consumable_service.get_item(item_id) is None
        assert consumable_service.delete_item(item_id) is False


# Tests for usage and reordering

class TestUsage:
    def test_use_reduces_quantity(self, consumable_service, make_item):
        item = make_item(quantity=8, min_stock=5)

        used = consumable_service.use_item(item.id, 4)

        assert used.quantity == 4
        assert used.status == "Low Stock"

    def test_use_is_clamped_at_zero(self, consumable_service, make_item):
        item = make_item(quantity=3, min_stock=2)

        used = consumable_service.use_item(item.id, 10)

        assert used.quantity == 0
        assert used.status == "Out of Stock"

    def test_use_needs_positive_amount(self, consumable_service, make_item):
        item = make_item()
        assert consumable_service.use_item(item.id, 0) is None
        assert consumable_service.get_item(item.id).quantity == 450

    def test_reorder_list_most_urgent_first(self, consumable_service, make_item):
        make_item(name="Boxes", quantity=450)
        make_item(name="Labels", quantity=1, min_stock=2, min_order=2)
        make_item(name="Hotends", category="Electronics", quantity=0, min_stock=5, min_order=5)

        lines = consumable_service.reorder_list()

        assert [(line["item"].name, line["reorder_qty"]) for line in lines] == [
            ("Hotends", 5),
            ("Labels", 2),
        ]
