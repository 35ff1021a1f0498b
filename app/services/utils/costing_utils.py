"""
Per-part cost and price calculation.

Inputs and pricing are plain dicts (as posted by clients and as stored on
templates). Missing keys fall back to the shop defaults below. Percentages
are given as whole numbers (5 means 5%), times in minutes unless the key
says hours.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Mapping, Optional

DEFAULT_COST_INPUTS = {
    "job_name": "",
    "currency": "USD",
    "filament_type": "pla",
    "print_hours": 5,
    "print_minutes": 30,
    "filament_weight": 120,  # g
    "spool_price": 25.0,
    "spool_weight": 1000,  # g
    "wastage": 5,
    "printer_power": 200,  # W
    "electricity_cost": 0.15,  # per kWh
    "labor_rate": 20.0,  # per hour
    "design_time": 30,
    "setup_time": 30,
    "post_processing_time": 15,
    "qc_time": 10,
    "printer_cost": 500,
    "investment_return": 3,  # years
    "daily_usage": 4,  # hours per day
    "repair_cost_percentage": 5,
    "packaging_items": [],
    "extra_costs": [],
}

DEFAULT_PRICING = {
    "consumer": {"tax": 5, "credit_card_fee": 3, "ads_cost": 20, "target_profit": 25},
    "reseller": {"tax": 5, "credit_card_fee": 2, "target_profit": 15},
}


@dataclass
class ExtraCostValue:
    name: str
    value: float


@dataclass
class CostBreakdown:
    filament_cost: float
    electricity_cost: float
    machine_cost: float
    labor_cost: float
    repair_cost: float
    packaging_cost: float
    extra_costs: List[ExtraCostValue] = field(default_factory=list)
    extra_costs_total: float = 0.0
    subtotal: float = 0.0
    consumer_price: float = 0.0
    consumer_gross_profit: float = 0.0
    consumer_net_profit: float = 0.0
    reseller_price: float = 0.0
    reseller_gross_profit: float = 0.0
    reseller_net_profit: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


def _num(value) -> float:
    """Blank or non-numeric input counts as zero."""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def merge_inputs(inputs: Optional[Mapping]) -> Dict:
    return {**DEFAULT_COST_INPUTS, **(inputs or {})}


def merge_pricing(pricing: Optional[Mapping]) -> Dict:
    pricing = pricing or {}
    return {
        channel: {**defaults, **(pricing.get(channel) or {})}
        for channel, defaults in DEFAULT_PRICING.items()
    }


def channel_price(subtotal: float, deductions_percent: float, target_profit: float):
    """Price so that fees and profit, as shares of the price, are covered.

    Returns (price, gross_profit, net_profit). When the shares reach 100% the
    price falls back to the subtotal.
    """
    denominator = 1 - deductions_percent / 100 - target_profit / 100
    price = subtotal / denominator if denominator > 0 else subtotal
    return price, price - subtotal, price * target_profit / 100


def calculate_costs(
    inputs: Optional[Mapping] = None, pricing: Optional[Mapping] = None
) -> CostBreakdown:
    inputs = merge_inputs(inputs)
    pricing = merge_pricing(pricing)

    print_time_hours = _num(inputs["print_hours"]) + _num(inputs["print_minutes"]) / 60
    spool_weight = _num(inputs["spool_weight"])
    filament_cost = (
        _num(inputs["filament_weight"]) / spool_weight
        * _num(inputs["spool_price"])
        * (1 + _num(inputs["wastage"]) / 100)
        if spool_weight > 0
        else 0.0
    )
    electricity_cost = (
        _num(inputs["printer_power"]) / 1000 * print_time_hours * _num(inputs["electricity_cost"])
    )

    years = _num(inputs["investment_return"])
    daily_usage = _num(inputs["daily_usage"])
    if years > 0 and daily_usage > 0:
        hourly = _num(inputs["printer_cost"]) / (years * 365 * daily_usage)
        machine_cost = hourly * print_time_hours
    else:
        machine_cost = 0.0

    labor_minutes = sum(
        _num(inputs[key])
        for key in ("design_time", "setup_time", "post_processing_time", "qc_time")
    )
    labor_cost = labor_minutes / 60 * _num(inputs["labor_rate"])
    repair_cost = machine_cost * _num(inputs["repair_cost_percentage"]) / 100
    packaging_cost = sum(
        _num(item.get("quantity")) * _num(item.get("unit_price"))
        for item in inputs["packaging_items"] or []
    )

    extra_costs = [
        ExtraCostValue(
            name=cost.get("name", ""),
            value=_num(cost.get("base_amount")) * _num(cost.get("percentage")) / 100,
        )
        for cost in inputs["extra_costs"] or []
    ]
    extra_costs_total = sum(cost.value for cost in extra_costs)

    subtotal = (
        filament_cost
        + electricity_cost
        + machine_cost
        + labor_cost
        + repair_cost
        + packaging_cost
        + extra_costs_total
    )

    consumer = pricing["consumer"]
    consumer_price, consumer_gross, consumer_net = channel_price(
        subtotal,
        _num(consumer["tax"]) + _num(consumer["credit_card_fee"]) + _num(consumer["ads_cost"]),
        _num(consumer["target_profit"]),
    )
    # Resellers run their own ads
    reseller = pricing["reseller"]
    reseller_price, reseller_gross, reseller_net = channel_price(
        subtotal,
        _num(reseller["tax"]) + _num(reseller["credit_card_fee"]),
        _num(reseller["target_profit"]),
    )

    return CostBreakdown(
        filament_cost=filament_cost,
        electricity_cost=electricity_cost,
        machine_cost=machine_cost,
        labor_cost=labor_cost,
        repair_cost=repair_cost,
        packaging_cost=packaging_cost,
        extra_costs=extra_costs,
        extra_costs_total=extra_costs_total,
        subtotal=subtotal,
        consumer_price=consumer_price,
        consumer_gross_profit=consumer_gross,
        consumer_net_profit=consumer_net,
        reseller_price=reseller_price,
        reseller_gross_profit=reseller_gross,
        reseller_net_profit=reseller_net,
    )
