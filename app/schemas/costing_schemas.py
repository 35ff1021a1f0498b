from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PackagingItem(BaseModel):
    name: str = ""
    quantity: float = Field(default=1, ge=0)
    unit_price: float = Field(default=0.0, ge=0)


class ExtraCostItem(BaseModel):
    name: str
    base_amount: float = Field(default=0.0, ge=0)
    percentage: float = Field(default=0.0, ge=0)


class CostInputs(BaseModel):
    job_name: str = ""
    currency: str = "USD"
    filament_type: str = "pla"
    print_hours: float = Field(default=5, ge=0)
    print_minutes: float = Field(default=30, ge=0)
    filament_weight: float = Field(default=120, ge=0)
    spool_price: float = Field(default=25.0, ge=0)
    spool_weight: float = Field(default=1000, ge=0)
    wastage: float = Field(default=5, ge=0)
    printer_power: float = Field(default=200, ge=0)
    electricity_cost: float = Field(default=0.15, ge=0)
    labor_rate: float = Field(default=20.0, ge=0)
    design_time: float = Field(default=30, ge=0)
    setup_time: float = Field(default=30, ge=0)
    post_processing_time: float = Field(default=15, ge=0)
    qc_time: float = Field(default=10, ge=0)
    printer_cost: float = Field(default=500, ge=0)
    investment_return: float = Field(default=3, ge=0)
    daily_usage: float = Field(default=4, ge=0)
    repair_cost_percentage: float = Field(default=5, ge=0)
    packaging_items: List[PackagingItem] = []
    extra_costs: List[ExtraCostItem] = []


class ConsumerPricing(BaseModel):
    tax: float = Field(default=5, ge=0)
    credit_card_fee: float = Field(default=3, ge=0)
    ads_cost: float = Field(default=20, ge=0)
    target_profit: float = Field(default=25, ge=0)


class ResellerPricing(BaseModel):
    tax: float = Field(default=5, ge=0)
    credit_card_fee: float = Field(default=2, ge=0)
    target_profit: float = Field(default=15, ge=0)


class PricingInputs(BaseModel):
    consumer: ConsumerPricing = Field(default_factory=ConsumerPricing)
    reseller: ResellerPricing = Field(default_factory=ResellerPricing)


class CostCalculationRequest(BaseModel):
    inputs: CostInputs = Field(default_factory=CostInputs)
    pricing: PricingInputs = Field(default_factory=PricingInputs)


class ExtraCostValue(BaseModel):
    name: str
    value: float


class CostBreakdownResponse(BaseModel):
    filament_cost: float
    electricity_cost: float
    machine_cost: float
    labor_cost: float
    repair_cost: float
    packaging_cost: float
    extra_costs: List[ExtraCostValue]
    extra_costs_total: float
    subtotal: float
    consumer_price: float
    consumer_gross_profit: float
    consumer_net_profit: float
    reseller_price: float
    reseller_gross_profit: float
    reseller_net_profit: float


class CostingTemplateCreate(CostCalculationRequest):
    name: str


class CostingTemplateUpdate(BaseModel):
    name: Optional[str] = None
    inputs: Optional[CostInputs] = None
    pricing: Optional[PricingInputs] = None


class CostingTemplateResponse(BaseModel):
    id: int
    name: str
    inputs: Dict[str, Any]
    pricing: Dict[str, Any]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class LoggedCalculationResponse(BaseModel):
    id: int
    job_name: Optional[str]
    inputs: Dict[str, Any]
    pricing: Dict[str, Any]
    results: Dict[str, Any]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
