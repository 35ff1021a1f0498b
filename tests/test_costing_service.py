"""
Unit tests for the Costing Service: calculation log and saved templates.
"""

import pytest

from app.models.costing import LoggedCalculation
from app.services.costing_service import CostingService


@pytest.fixture
def costing_service(db):
    return CostingService(db)


class TestCalculationLog:
    def test_log_keeps_inputs_and_results(self, costing_service):
        entry = costing_service.log_calculation({"job_name": "Gear Prototype V2", "wastage": 8})

        assert entry.job_name == "Gear Prototype V2"
        assert entry.inputs["wastage"] == 8
        assert entry.inputs["spool_weight"] == 1000
        assert entry.pricing["reseller"]["credit_card_fee"] == 2
        assert entry.results["filament_cost"] == pytest.approx(120 / 1000 * 25 * 1.08)
        assert entry.results["subtotal"] == pytest.approx(
            costing_service.calculate(entry.inputs, entry.pricing).subtotal
        )

    def test_newest_first_and_delete(self, db, costing_service):
        first = costing_service.log_calculation({"job_name": "A"}).id
        second = costing_service.log_calculation({"job_name": "B"}).id

        assert [e.id for e in costing_service.list_logged()] == [second, first]
        assert costing_service.delete_logged(first) is True
        assert db.query(LoggedCalculation).count() == 1

    def test_delete_unknown_entry(self, costing_service):
        assert costing_service.delete_logged(99) is False
        assert costing_service.last_error_code == "not_found"


class TestTemplates:
    def test_save_and_calculate(self, costing_service):
        template = costing_service.save_template(
            "Standard PLA Part", {"daily_usage": 8, "design_time": 15, "setup_time": 10,
                                  "post_processing_time": 20, "qc_time": 5}
        )

        result = costing_service.calculate_template(template.id)

        assert result.labor_cost == pytest.approx(50 / 60 * 20)
        assert result.machine_cost == pytest.approx(500 / (3 * 365 * 8) * 5.5)

    def test_name_required(self, costing_service):
        assert costing_service.save_template("  ") is None
        assert costing_service.last_error_code == "invalid_request"

    def test_rename_and_replace_inputs(self, costing_service):
        template = costing_service.save_template("Draft", {"spool_price": 25})

        updated = costing_service.update_template(
            template.id, name="ABS Prototype", inputs={"spool_price": 30}
        )

        assert updated.name == "ABS Prototype"
        assert updated.inputs["spool_price"] == 30
        assert updated.pricing["consumer"]["ads_cost"] == 20

    def test_delete_template(self, costing_service):
        template_id = costing_service.save_template("Draft").id
        assert costing_service.delete_template(template_id) is True
        assert costing_service.get_template(template_id) is None
        assert costing_service.calculate_template(template_id) is None
        assert costing_service.last_error_code == "not_found"
