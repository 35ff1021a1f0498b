"""
API tests against an in-memory database.
"""

from datetime import date, datetime, timedelta

API = "/api/v1"


def create_printer(client, code_name="FDM01", technology="FDM"):
    response = client.post(
        f"{API}/printers/",
        json={"code_name": code_name, "name": code_name, "technology": technology},
    )
    assert response.status_code == 200
    return response.json()


def create_order(client, items=2, printer_tech="FDM", **extra):
    response = client.post(
        f"{API}/orders/",
        json={"customer": "Innovate LLC", "items": items, "printer_tech": printer_tech, **extra},
    )
    assert response.status_code == 200
    return response.json()


def create_spool(client, color="#FF0000", finish="Matte", used=0):
    response = client.post(
        f"{API}/inventory/units",
        json={
            "kind": "spool",
            "name": "PLA Red",
            "material": "PLA",
            "color": color,
            "finish": finish,
            "capacity": 1000,
            "used": used,
        },
    )
    assert response.status_code == 200
    return response.json()


def test_root_and_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200


class TestOrdersApi:
    def test_create_and_get(self, client):
        order = create_order(client, deadline=str(date.today() + timedelta(days=10)))
        assert order["order_number"] == "ORD-001"
        assert order["status"] == "pending"
        assert order["is_overdue"] is False

        response = client.get(f"{API}/orders/{order['id']}")
        assert response.json()["customer"] == "Innovate LLC"

    def test_overdue_flag_is_derived(self, client):
        order = create_order(client, deadline=str(date.today() - timedelta(days=1)))
        assert order["is_overdue"] is True
        assert order["status"] == "pending"

    def test_missing_order(self, client):
        assert client.get(f"{API}/orders/99").status_code == 404

    def test_status_moves_forward_only(self, client):
        order = create_order(client)
        url = f"{API}/orders/{order['id']}/status"

        assert client.put(url, json={"status": "qc"}).json()["status"] == "qc"
        response = client.put(url, json={"status": "in-progress"})
        assert response.status_code == 400
        assert "cannot move" in response.json()["detail"]

    def test_next_statuses(self, client):
        order = create_order(client)
        client.put(f"{API}/orders/{order['id']}/status", json={"status": "packing"})
        response = client.get(f"{API}/orders/{order['id']}/next-statuses")
        assert response.json() == ["dispatched", "completed"]

    def test_list_and_summary(self, client):
        create_order(client, priority="high")
        create_order(client, priority="low")
        assert len(client.get(f"{API}/orders/", params={"priority": "high"}).json()) == 1
        summary = client.get(f"{API}/orders/summary").json()
        assert summary == {"total": 2, "pending": 2, "overdue": 0, "completed": 0}

    def test_invalid_payload(self, client):
        response = client.post(f"{API}/orders/", json={"customer": "x", "items": 0})
        assert response.status_code == 422


class TestTrackingApi:
    def test_board_move_and_scan(self, client):
        order = create_order(client)

        board = client.get(f"{API}/tracking/board").json()
        assert board[0]["id"] == "order-received"
        assert board[0]["items"][0]["order_number"] == "ORD-001"

        moved = client.post(
            f"{API}/tracking/board/move", json={"order_id": order["id"], "column_id": "qc"}
        )
        assert moved.json()["status"] == "qc"

        back = client.post(
            f"{API}/tracking/board/move", json={"order_id": order["id"], "column_id": "printing"}
        )
        assert back.status_code == 400

        scan = client.post(
            f"{API}/tracking/scan", json={"payload": "PRYYSM://project/ORD-001/item-1"}
        ).json()
        assert scan["order"]["id"] == order["id"]
        assert scan["next_statuses"] == ["packing", "dispatched", "completed"]

    def test_scan_errors(self, client):
        assert client.post(f"{API}/tracking/scan", json={"payload": "nope"}).status_code == 400
        missing = client.post(
            f"{API}/tracking/scan", json={"payload": "PRYYSM://project/ORD-999/item-1"}
        )
        assert missing.status_code == 404


class TestJobsApi:
    def test_order_job_is_queued(self, client):
        create_order(client, items=2)
        queue = client.get(f"{API}/jobs/queue").json()
        assert [j["job_id"] for j in queue] == ["JOB-ORD-001"]
        assert queue[0]["estimated_time_min"] == 360
        assert queue[0]["item_groups"][0]["materials"][0]["color"] == "#FF0000"
        assert client.post(f"{API}/jobs/queue/sync").json() == []

    def test_assign_and_confirm(self, client):
        printer = create_printer(client)
        create_order(client, items=1)

        assigned = client.post(
            f"{API}/jobs/JOB-ORD-001/assign", json={"printer_id": printer["id"]}
        ).json()
        assert assigned["status"] == "scheduled"
        assert assigned["color"] == "#F97316"
        assert client.get(f"{API}/jobs/unconfirmed").json()[0]["job_id"] == "JOB-ORD-001"

        confirmed = client.post(
            f"{API}/jobs/JOB-ORD-001/confirm", json={"printer_id": printer["id"]}
        ).json()
        assert confirmed["is_confirmed"] is True
        assert confirmed["color"] == "#69B3F7"

        schedule = client.get(f"{API}/printers/{printer['id']}/schedule").json()
        assert [j["job_id"] for j in schedule] == ["JOB-ORD-001"]

    def test_assign_to_missing_printer(self, client):
        create_order(client)
        response = client.post(f"{API}/jobs/JOB-ORD-001/assign", json={"printer_id": 5})
        assert response.status_code == 404

    def test_assign_rejects_past_or_overlapping_start(self, client):
        printer = create_printer(client)
        create_order(client, items=1)
        create_order(client, items=1)
        url = f"{API}/jobs/JOB-ORD-002/assign"
        first = client.post(
            f"{API}/jobs/JOB-ORD-001/assign", json={"printer_id": printer["id"]}
        ).json()

        past = client.post(
            url, json={"printer_id": printer["id"], "start_time": "2020-01-01T08:00:00"}
        )
        assert past.status_code == 400
        assert "in the past" in past.json()["detail"]

        inside = datetime.fromisoformat(first["start_time"]) + timedelta(minutes=30)
        overlap = client.post(
            url, json={"printer_id": printer["id"], "start_time": inside.isoformat()}
        )
        assert overlap.status_code == 400
        assert "overlaps job JOB-ORD-001" in overlap.json()["detail"]
        assert client.get(f"{API}/jobs/JOB-ORD-002").json()["status"] == "queued"

    def test_unknown_technology_is_rejected(self, client):
        response = client.post(
            f"{API}/orders/", json={"customer": "x", "items": 1, "printer_tech": "XYZ"}
        )
        assert response.status_code == 400
        assert client.get(f"{API}/jobs/queue").json() == []

    def test_slot_and_auto_assign(self, client):
        create_printer(client, "SLA01", technology="SLA")
        printer = create_printer(client, "FDM01")
        create_order(client, deadline=str(date.today() + timedelta(days=5)))

        slot = client.get(f"{API}/jobs/JOB-ORD-001/slot").json()
        assert slot["printer_id"] == printer["id"]

        job = client.post(f"{API}/jobs/JOB-ORD-001/auto-assign").json()
        assert job["printer_id"] == printer["id"]

    def test_no_slot(self, client):
        create_order(client)
        assert client.get(f"{API}/jobs/JOB-ORD-001/slot").status_code == 400

    def test_create_update_delete(self, client):
        job = client.post(
            f"{API}/jobs/",
            json={
                "name": "Gears",
                "required_technology": "FDM",
                "estimated_time_min": 60,
                "item_groups": [{"quantity": 2, "materials": [{"material": "PLA"}]}],
            },
        ).json()
        url = f"{API}/jobs/{job['job_id']}"

        assert client.patch(url, json={"name": "Big Gears"}).json()["name"] == "Big Gears"
        assert client.delete(url).status_code == 200
        assert client.get(url).status_code == 404


class TestPrintersApi:
    def test_create_list_and_guard(self, client):
        printer = create_printer(client)
        create_order(client, items=1)
        client.post(f"{API}/jobs/JOB-ORD-001/assign", json={"printer_id": printer["id"]})
        client.post(f"{API}/jobs/JOB-ORD-001/confirm", json={"printer_id": printer["id"]})

        listed = client.get(f"{API}/printers/").json()
        assert listed[0]["status"] == "printing"
        assert listed[0]["current_job"]["job_id"] == "JOB-ORD-001"

        response = client.put(
            f"{API}/printers/{printer['id']}/status", json={"status": "maintenance"}
        )
        assert response.status_code == 409
        assert "Action Denied" in response.json()["detail"]

    def test_duplicate_and_delete(self, client):
        printer = create_printer(client)
        response = client.post(
            f"{API}/printers/", json={"code_name": "FDM01", "name": "x", "technology": "FDM"}
        )
        assert response.status_code == 400
        assert client.delete(f"{API}/printers/{printer['id']}").status_code == 200
        assert client.get(f"{API}/printers/{printer['id']}").status_code == 404


class TestInventoryApi:
    def test_assign_and_return(self, client):
        printer = create_printer(client)
        create_order(client, items=1)
        create_spool(client)
        client.post(f"{API}/jobs/JOB-ORD-001/assign", json={"printer_id": printer["id"]})

        unit = client.post(
            f"{API}/inventory/assignments", json={"job_id": "JOB-ORD-001", "material": "PLA",
                                                  "color": "#FF0000", "finish": "Matte"}
        ).json()
        assert unit["unit_code"] == "SP001"
        assert unit["assigned_printer_id"] == printer["id"]
        assert len(client.get(f"{API}/inventory/units/assigned").json()) == 1

        again = client.post(
            f"{API}/inventory/assignments", json={"job_id": "JOB-ORD-001", "material": "PLA",
                                                  "color": "#FF0000", "finish": "Matte"}
        )
        assert again.status_code == 409

        over = client.post(f"{API}/inventory/units/SP001/return", json={"used_amount": 2000})
        assert over.status_code == 409

        returned = client.post(f"{API}/inventory/units/SP001/return", json={}).json()
        assert returned["assigned_printer_id"] is None
        assert returned["status"] == "New"

    def test_stock_queries(self, client):
        create_spool(client)
        create_spool(client, color="#000000", finish="Glossy")
        create_spool(client, color="#000000", finish="Glossy", used=1000)

        assert client.get(f"{API}/inventory/options/FDM/materials").json() == ["PLA"]
        finishes = client.get(
            f"{API}/inventory/options/FDM/finishes", params={"material": "PLA"}
        ).json()
        assert finishes == ["Matte", "Glossy"]
        colors = client.get(
            f"{API}/inventory/options/FDM/colors", params={"material": "PLA", "finish": "Glossy"}
        ).json()
        assert colors == [{"color": "#000000", "hex": "#000000", "stock": 1}]
        count = client.get(
            f"{API}/inventory/stock-count",
            params={"technology": "FDM", "material": "PLA", "color": "#FF0000", "finish": "Matte"},
        ).json()
        assert count["count"] == 1
        low = client.get(f"{API}/inventory/units/low-stock").json()
        assert [u["unit_code"] for u in low] == ["SP003"]

    def test_missing_unit(self, client):
        assert client.get(f"{API}/inventory/units/SP404").status_code == 404


class TestConsumablesApi:
    def test_create_use_and_reorder(self, client):
        item = client.post(
            f"{API}/consumables/",
            json={"name": "Shipping Labels (Roll)", "category": "Packing Material",
                  "quantity": 3, "min_stock": 2, "min_order": 2, "barcode": "PACK-LABEL-ROLL"},
        ).json()
        assert item["status"] == "In Stock"
        assert client.get(f"{API}/consumables/reorder").json() == []

        used = client.post(f"{API}/consumables/{item['id']}/use", json={"quantity_used": 5}).json()
        assert used["quantity"] == 0
        assert used["status"] == "Out of Stock"

        reorder = client.get(f"{API}/consumables/reorder").json()
        assert reorder[0]["item"]["barcode"] == "PACK-LABEL-ROLL"
        assert reorder[0]["reorder_qty"] == 2

        patched = client.patch(f"{API}/consumables/{item['id']}", json={"quantity": 10}).json()
        assert patched["status"] == "In Stock"

    def test_errors(self, client):
        bad = client.post(f"{API}/consumables/", json={"name": "x", "category": "Food"})
        assert bad.status_code == 400
        assert client.get(f"{API}/consumables/7").status_code == 404
        assert client.delete(f"{API}/consumables/7").status_code == 404
        zero = client.post(f"{API}/consumables/7/use", json={"quantity_used": 0})
        assert zero.status_code == 422


class TestCostingApi:
    def test_calculate_with_defaults(self, client):
        result = client.post(f"{API}/costing/calculate", json={}).json()
        assert round(result["filament_cost"], 2) == 3.15
        assert round(result["labor_cost"], 2) == 28.33
        assert result["consumer_price"] > result["reseller_price"] > result["subtotal"]

    def test_log_and_templates(self, client):
        logged = client.post(
            f"{API}/costing/log", json={"inputs": {"job_name": "Bracket"}}
        ).json()
        assert logged["job_name"] == "Bracket"
        assert client.get(f"{API}/costing/log").json()[0]["id"] == logged["id"]

        template = client.post(
            f"{API}/costing/templates",
            json={"name": "Resin Miniature", "inputs": {"currency": "EUR", "print_hours": 4}},
        ).json()
        assert template["inputs"]["currency"] == "EUR"

        renamed = client.patch(
            f"{API}/costing/templates/{template['id']}", json={"name": "Resin Mini"}
        ).json()
        assert renamed["name"] == "Resin Mini"
        assert renamed["inputs"]["print_hours"] == 4

        breakdown = client.get(f"{API}/costing/templates/{template['id']}/calculate").json()
        assert breakdown["subtotal"] > 0

        assert client.delete(f"{API}/costing/templates/{template['id']}").status_code == 200
        assert client.get(f"{API}/costing/templates/{template['id']}").status_code == 404

    def test_negative_input_rejected(self, client):
        response = client.post(f"{API}/costing/calculate", json={"inputs": {"wastage": -1}})
        assert response.status_code == 422
