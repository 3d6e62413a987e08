from sqlalchemy import Column, String, Float, Boolean, Integer, Enum, JSON
from transfer_pricing.models.base import BaseModel
from transfer_pricing.core.enums import Currency


class Route(BaseModel):
    __tablename__ = "price_routes"

    name = Column(String(200), nullable=False, index=True)
    description = Column(String(1000), nullable=True)

    # {name, address, coordinates: {lat, lng}, location_type}
    origin = Column(JSON, nullable=False)
    destination = Column(JSON, nullable=False)
    origin_name = Column(String(200), nullable=False, index=True)
    destination_name = Column(String(200), nullable=False, index=True)
    origin_type = Column(String(20), nullable=False, default="custom")
    destination_type = Column(String(20), nullable=False, default="custom")

    distance_km = Column(Float, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    base_pricing = Column(JSON, nullable=False, default=dict)
    base_price = Column(Float, nullable=False, index=True)
    currency = Column(Enum(Currency), nullable=False, default=Currency.EUR)

    rule_ids = Column(JSON, nullable=False, default=list)
    categories = Column(JSON, nullable=False, default=list)

    active = Column(Boolean, nullable=False, default=True, index=True)
    is_popular = Column(Boolean, nullable=False, default=False, index=True)
    total_bookings = Column(Integer, nullable=False, default=0)
