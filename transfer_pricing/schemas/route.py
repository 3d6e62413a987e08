from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Annotated
from transfer_pricing.core.enums import Currency, LocationType, VehicleType


Price = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Location(BaseModel):
    name: str
    address: Optional[str] = None
    coordinates: Coordinates
    location_type: LocationType = LocationType.CUSTOM


class Route(BaseModel):
    id: str
    name: str = ""
    origin: Location
    destination: Location
    distance_km: float = Field(ge=0)
    duration_minutes: int = Field(ge=1)
    base_pricing: Dict[VehicleType, Price] = Field(default_factory=dict)
    base_price: Price
    currency: Currency = Currency.EUR
    rule_ids: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    active: bool = True
    is_popular: bool = False
    total_bookings: int = Field(0, ge=0)

    @field_validator("rule_ids")
    @classmethod
    def dedupe_rule_ids(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))


class RouteOut(Route):
    formatted_name: str
    price_per_km: float
