from pydantic import BaseModel, Field
from typing import Optional, List, Annotated
from datetime import datetime
from transfer_pricing.core.enums import RuleType, AdjustmentType, DistanceUnit, VehicleType


class HourRange(BaseModel):
    start: int = Field(ge=0, le=23)
    end: int = Field(ge=0, le=23)


class DateRange(BaseModel):
    start: datetime
    end: datetime


class TimeConditions(BaseModel):
    # 0 = Sunday
    days_of_week: List[Annotated[int, Field(ge=0, le=6)]] = Field(default_factory=list)
    hour_ranges: List[HourRange] = Field(default_factory=list)
    date_ranges: List[DateRange] = Field(default_factory=list)


class DemandConditions(BaseModel):
    min_occupancy_rate: Optional[float] = Field(None, ge=0, le=100)
    max_occupancy_rate: Optional[float] = Field(None, ge=0, le=100)


class DistanceConditions(BaseModel):
    min_distance: Optional[float] = Field(None, ge=0)
    max_distance: Optional[float] = Field(None, ge=0)
    unit: DistanceUnit = DistanceUnit.KM


class PriceRule(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    priority: int = Field(0, ge=0)
    rule_type: RuleType
    adjustment_type: AdjustmentType = AdjustmentType.PERCENTAGE
    adjustment_value: float = Field(allow_inf_nan=False)
    # No ordering is enforced between the two bounds
    min_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    max_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    active: bool = True
    time_conditions: Optional[TimeConditions] = None
    demand_conditions: Optional[DemandConditions] = None
    distance_conditions: Optional[DistanceConditions] = None
    applicable_routes: List[str] = Field(default_factory=list)
    applicable_vehicle_types: List[VehicleType] = Field(default_factory=list)
    applied_count: int = Field(0, ge=0)
