from pydantic import BaseModel, Field
from typing import Optional, List
from transfer_pricing.core.enums import AdjustmentType, Currency


class RuntimeConditions(BaseModel):
    occupancy_rate: Optional[float] = Field(None, ge=0, le=100)
    # Kilometres; defaults to the route's own distance when omitted
    distance: Optional[float] = Field(None, ge=0)


class QuoteRequest(BaseModel):
    route_id: str
    vehicle_type: str
    conditions: Optional[RuntimeConditions] = None


class AppliedRule(BaseModel):
    rule_id: str
    rule_name: str
    adjustment: float
    adjustment_type: AdjustmentType


class PriceQuote(BaseModel):
    base_price: float
    final_price: float
    applied_rules: List[AppliedRule] = Field(default_factory=list)
    currency: Currency
