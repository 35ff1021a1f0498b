"""
Demo data for a fresh print farm database.

Generates the fleet, raw material stock, order history and a busy schedule
for printers that are currently printing, plus shop consumables and a few
costing templates. Only runs against an empty database.
"""

import logging
import random
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.consumable import InventoryItem
from app.models.costing import CostingTemplate
from app.models.inventory import MaterialUnit
from app.models.job import ItemGroup, PrintJob
from app.models.order import Order
from app.models.printer import Printer
from app.services.utils.consumable_utils import calculate_inventory_status
from app.services.utils.costing_utils import merge_inputs, merge_pricing
from app.services.utils.job_utils import (
    UNCONFIRMED_COLOR,
    build_job_queue,
    color_for_duration,
    utcnow,
)
from app.services.utils.material_utils import calculate_material_status, format_unit_code

logger = logging.getLogger(__name__)

CUSTOMERS = [
    "Innovate LLC",
    "Design Co.",
    "Engineering Dynamics",
    "AeroSpace Solutions",
    "MediTech Devices",
    "Auto Parts Pro",
]
ORDER_TECHNOLOGIES = ["FDM", "SLA", "SLS", "MJF"]
SALES_PEOPLE = ["John Smith", "Sarah Johnson", "Mike Davis", "Lisa Chen", "David Wilson"]
PRIORITY_CYCLE = ["low", "medium", "high"]

# code_name, name, model, location, technology, initialization date, capacity, material, status
PRINTERS = [
    ("PRUSA01", "Prusa i3 MK3S+", "i3 MK3S+", "Lab 1", "FDM", date(2023, 1, 15), "Standard", "PLA", "printing"),
    ("ENDER01", "Creality Ender 3 Pro", "Ender 3 Pro", "Lab 2", "FDM", date(2023, 3, 22), "Standard", "PLA", "idle"),
    ("ULTI01", "Ultimaker S5", "S5", "Design Studio", "SLA", date(2022, 5, 10), "Large", "Resin", "printing"),
    ("ANYC01", "Anycubic Mega X", "Mega X", "Workshop", "FDM", date(2021, 6, 1), "Large", "PETG", "maintenance"),
    ("BAMBU01", "Bambu Lab A1 mini", "A1 mini", "Lab 3", "FDM", date(2023, 8, 18), "Small", "PLA", "printing"),
    ("PRUSA02", "Prusa MINI+", "MINI+", "Lab 1", "FDM", date(2023, 9, 30), "Small", "PLA", "idle"),
    ("EOS01", "EOS Formiga P 110", "P 110", "Lab 2", "SLS", date(2023, 11, 1), "Medium", "PA 2200", "idle"),
    ("HPJF01", "HP Jet Fusion 5200", "5200", "Prototyping Center", "MJF", date(2023, 7, 15), "Production", "HP 3D HR PA 12", "maintenance"),
    ("CREA02", "Creality K1", "K1", "Lab 1", "FDM", date(2024, 1, 20), "Standard", "ABS", "offline"),
    ("FUSE01", "Formlabs Fuse 1", "Fuse 1", "SLS Room", "SLS", date(2024, 2, 10), "Standard", "Nylon 12", "idle"),
    ("RAISE01", "Raise3D Pro3", "Pro3", "Lab 3", "FDM", date(2023, 12, 12), "Large", "PC", "offline"),
    ("ANYC02", "Anycubic Photon M3", "M3", "Design Studio", "SLA", date(2024, 3, 1), "Small", "Standard Resin", "idle"),
]

# count, material, brand, color, finish, name, location
SPOOL_BATCHES = [
    (20, "PLA", "Overture", "#000000", "Matte", "PLA Black", "Rack A"),
    (15, "PLA", "Hatchbox", "#FFFFFF", "Glossy", "PLA White", "Rack B"),
    (10, "ABS", "Sunlu", "#FF0000", "Satin", "ABS Red", "Rack C"),
    (10, "PETG", "eSun", "#0000FF", "Transparent", "PETG Blue", "Rack D"),
    (5, "TPU", "NinjaFlex", "#808080", "Flexible", "TPU Grey", "Rack E"),
]

# name, brand, material, color, capacity, used, price, currency, location, notes
RESINS = [
    ("Standard Resin Grey", "Elegoo", "Standard", "#808080", 1000, 400, 35.0, "USD", "Resin Cabinet 1", "General purpose resin"),
    ("Tough Resin White", "Siraya Tech", "Tough", "#FFFFFF", 1000, 920, 55.0, "USD", "Resin Cabinet 2", "For durable parts"),
    ("Flexible Resin Clear", "Anycubic", "Flexible", "#FFFFFF", 500, 100, 45.0, "EUR", "Resin Cabinet 1", "For flexible prints"),
]

POWDERS = [
    ("PA12 White", "EOS", "PA12", "#FFFFFF", 20, 5, 1200.0, "EUR", "Powder Station 1", "High-performance nylon"),
    ("PA11 Black", "HP", "PA11", "#000000", 15, 14.5, 1500.0, "USD", "Powder Station 2", "Nearing empty"),
    ("TPU Powder", "Formlabs", "TPU", "#E0E0E0", 5, 0, 450.0, "USD", "Powder Station 1", "New, unopened"),
]

# barcode, name, description, category, quantity, min stock, min order, location
CONSUMABLES = [
    ("PACK-BOX-SML", "Packing Boxes (Small)", "10x10x10cm cardboard boxes", "Packing Material", 450, 100, 200, "Shelf A-1"),
    ("PACK-BOX-MED", "Packing Boxes (Medium)", "20x20x20cm cardboard boxes", "Packing Material", 300, 80, 150, "Shelf A-2"),
    ("PACK-BBL-ROLL", "Bubble Wrap (Roll)", "50m rolls of protective bubble wrap", "Packing Material", 15, 5, 10, "Shelf B-1"),
    ("ELEC-STEP-N17", "Stepper Motors", "NEMA 17, 12V, 400 steps/rev", "Electronics", 15, 10, 10, "Drawer E-2"),
    ("ELEC-HOTEND-FDM", "Hotend Assembly", "Complete hotend for FDM printers", "Electronics", 8, 5, 5, "Drawer E-4"),
    ("TOOL-CALIPER-D150", "Calipers", "Digital measuring tool, 0-150mm", "Tools", 8, 3, 5, "Tool Box 3"),
    ("MISC-ZIP-TIES", "Zip Ties (Pack)", "Pack of 100 assorted zip ties", "Miscellaneous", 8, 3, 5, "Drawer M-1"),
    ("PACK-LABEL-ROLL", "Shipping Labels (Roll)", "Roll of 500 thermal shipping labels", "Packing Material", 3, 2, 2, "Desk Area"),
]

COSTING_TEMPLATES = [
    (
        "Standard PLA Part (120g)",
        {
            "job_name": "Standard PLA Part", "print_hours": 5, "print_minutes": 30,
            "filament_weight": 120, "filament_type": "pla", "spool_price": 25, "wastage": 5,
            "printer_power": 200, "electricity_cost": 0.15, "labor_rate": 20, "design_time": 15,
            "setup_time": 10, "post_processing_time": 20, "qc_time": 5, "printer_cost": 500,
            "investment_return": 3, "daily_usage": 8, "repair_cost_percentage": 5,
        },
        {
            "consumer": {"tax": 5, "credit_card_fee": 3, "ads_cost": 10, "target_profit": 20},
            "reseller": {"tax": 5, "credit_card_fee": 2, "target_profit": 15},
        },
    ),
    (
        "Quick ABS Prototype (50g)",
        {
            "job_name": "Quick ABS Prototype", "print_hours": 2, "print_minutes": 0,
            "filament_weight": 50, "filament_type": "abs", "spool_price": 30, "wastage": 8,
            "printer_power": 250, "electricity_cost": 0.15, "labor_rate": 25, "design_time": 0,
            "setup_time": 5, "post_processing_time": 15, "qc_time": 5, "printer_cost": 800,
            "investment_return": 3, "daily_usage": 6, "repair_cost_percentage": 7,
        },
        {
            "consumer": {"tax": 5, "credit_card_fee": 3, "ads_cost": 15, "target_profit": 25},
            "reseller": {"tax": 5, "credit_card_fee": 2, "target_profit": 18},
        },
    ),
    (
        "Detailed Resin Miniature (15ml)",
        {
            "job_name": "Detailed Resin Miniature", "currency": "EUR", "print_hours": 4,
            "print_minutes": 0, "filament_weight": 20, "filament_type": "resin", "spool_price": 45,
            "wastage": 15, "printer_power": 80, "electricity_cost": 0.20, "labor_rate": 22,
            "design_time": 0, "setup_time": 20, "post_processing_time": 45, "qc_time": 15,
            "printer_cost": 2500, "investment_return": 4, "daily_usage": 10,
            "repair_cost_percentage": 10,
        },
        {
            "consumer": {"tax": 7, "credit_card_fee": 3, "ads_cost": 20, "target_profit": 30},
            "reseller": {"tax": 7, "credit_card_fee": 2, "target_profit": 20},
        },
    ),
]


def is_empty(db: Session) -> bool:
    return (
        db.query(Printer).first() is None
        and db.query(Order).first() is None
        and db.query(MaterialUnit).first() is None
    )


def _unit(kind, number, name, brand, material, color, capacity, used, **extra) -> MaterialUnit:
    return MaterialUnit(
        unit_code=format_unit_code(kind, number),
        kind=kind,
        name=name,
        brand=brand,
        material=material,
        color=color,
        capacity=capacity,
        used=used,
        status=calculate_material_status(used, capacity),
        **extra,
    )


def generate_materials():
    units = []
    number = 1
    for count, material, brand, color, finish, name, location in SPOOL_BATCHES:
        for i in range(count):
            units.append(
                _unit(
                    "spool", number, name, brand, material, color, 1000, (number % 10) * 100,
                    finish=finish, price=25 + (number % 5), currency="USD",
                    min_stock=2, min_order=5, location=f"{location}-{i + 1}",
                )
            )
            number += 1

    for kind, named, stock in (
        ("resin", RESINS, ("Standard Resin Grey", "Elegoo", "Standard", "#808080", 1000, 35.0, "USD", "Resin Cabinet", 15, 10, 100, 3)),
        ("powder", POWDERS, ("PA12 White", "EOS", "PA12", "#FFFFFF", 20, 1200.0, "EUR", "Powder Station", 8, 8, 2.5, 2)),
    ):
        number = 1
        for name, brand, material, color, capacity, used, price, currency, location, notes in named:
            units.append(
                _unit(
                    kind, number, name, brand, material, color, capacity, used,
                    price=price, currency=currency, location=location, notes=notes,
                    min_stock=1, min_order=1,
                )
            )
            number += 1
        name, brand, material, color, capacity, price, currency, location, count, cycle, step, stations = stock
        for i in range(count):
            units.append(
                _unit(
                    kind, number, name, brand, material, color, capacity, (i % cycle) * step,
                    price=price, currency=currency, location=f"{location} {i % stations + 1}",
                    notes="Stock", min_stock=2, min_order=2,
                )
            )
            number += 1
    return units


def generate_orders(today: date, rng: random.Random):
    orders = []
    for i in range(1, 61):
        order_date = today - timedelta(days=rng.randrange(180))
        deadline = order_date + timedelta(days=rng.randrange(10) + 5)
        if i % 4 == 0:
            status = "completed"
        elif deadline < today:
            status = "overdue"
        else:
            status = "in-progress"
        orders.append(_order(i, order_date, deadline, status, rng.randrange(10) + 1))
        orders[-1].notes = f"Notes for order {i}"

    # Pending orders feed the job queue
    for i in range(101, 106):
        order_date = today - timedelta(days=i - 100)
        orders.append(
            _order(i, order_date, order_date + timedelta(days=15), "pending", rng.randrange(20) + 1)
        )
    return orders


def _order(i: int, order_date: date, deadline: date, status: str, items: int) -> Order:
    return Order(
        id=i,
        order_number=f"ORD-{i:03d}",
        customer=CUSTOMERS[i % len(CUSTOMERS)],
        project_code=f"PRJ-{i:03d}",
        order_date=order_date,
        deadline=deadline,
        status=status,
        items=items,
        priority=PRIORITY_CYCLE[i % len(PRIORITY_CYCLE)],
        printer_tech=ORDER_TECHNOLOGIES[i % len(ORDER_TECHNOLOGIES)],
        sales_person=SALES_PEOPLE[i % len(SALES_PEOPLE)],
    )


def generate_busy_schedule(printer: Printer, now: datetime, rng: random.Random):
    """Back-to-back jobs for about two weeks, starting a few hours in the past.

    The first three jobs starting after ``now`` are left unconfirmed.
    """
    jobs = []
    current = now - timedelta(seconds=rng.random() * 4 * 3600)
    horizon = now + timedelta(days=16)
    for i in range(40):
        duration_hours = rng.randrange(12) + 4
        start = current
        end = start + timedelta(hours=duration_hours)
        if end > horizon:
            break
        confirmed = start < now or i > 2
        jobs.append(
            PrintJob(
                job_id=f"BUSY-{printer.code_name}-{i}",
                name=f"Job {i + 1} for {printer.code_name}",
                project_code=f"BUSY-{printer.code_name}-{i}",
                priority="medium",
                required_technology=printer.technology,
                items=1,
                estimated_time_min=duration_hours * 60,
                deadline=(end + timedelta(days=2)).date(),
                status="confirmed" if confirmed else "scheduled",
                start_time=start,
                end_time=end,
                duration_hours=float(duration_hours),
                is_confirmed=confirmed,
                color=color_for_duration(duration_hours) if confirmed else UNCONFIRMED_COLOR,
                item_groups=[ItemGroup(quantity=1, materials=[])],
            )
        )
        current = end
    return jobs


def generate_consumables() -> List[InventoryItem]:
    return [
        InventoryItem(
            barcode=barcode,
            name=name,
            description=description,
            category=category,
            quantity=quantity,
            min_stock=min_stock,
            min_order=min_order,
            location=location,
            status=calculate_inventory_status(quantity, min_stock),
        )
        for barcode, name, description, category, quantity, min_stock, min_order, location
        in CONSUMABLES
    ]


def generate_costing_templates() -> List[CostingTemplate]:
    return [
        CostingTemplate(name=name, inputs=merge_inputs(inputs), pricing=merge_pricing(pricing))
        for name, inputs, pricing in COSTING_TEMPLATES
    ]


def seed_sample_data(
    db: Session, now: Optional[datetime] = None, seed: Optional[int] = None
) -> Dict[str, int]:
    """Populate an empty database; returns how many rows of each kind were added."""
    if not is_empty(db):
        logger.info("Database already has data, skipping sample data")
        return {}

    now = now or utcnow()
    rng = random.Random(seed)
    try:
        printers = []
        for code, name, model, location, tech, init_date, capacity, material, status in PRINTERS:
            printer = Printer(
                code_name=code,
                name=name,
                model=model,
                location=location,
                technology=tech,
                initialization_date=init_date,
                capacity=capacity,
                material=material,
                status=status,
                idle_since=now if status == "idle" else None,
            )
            if status == "printing":
                printer.jobs = generate_busy_schedule(printer, now, rng)
            printers.append(printer)
        db.add_all(printers)

        units = generate_materials()
        db.add_all(units)

        orders = generate_orders(now.date(), rng)
        db.add_all(orders)
        queued = build_job_queue(orders)
        db.add_all(queued)

        consumables = generate_consumables()
        db.add_all(consumables)
        templates = generate_costing_templates()
        db.add_all(templates)

        db.commit()
        counts = {
            "printers": len(printers),
            "material_units": len(units),
            "orders": len(orders),
            "queued_jobs": len(queued),
            "scheduled_jobs": sum(len(p.jobs) for p in printers),
            "inventory_items": len(consumables),
            "costing_templates": len(templates),
        }
        logger.info(f"Seeded sample data: {counts}")
        return counts
    except Exception as e:
        logger.error(f"Error seeding sample data: {str(e)}")
        db.rollback()
        raise
