from sqlalchemy import Column, String, Float, Boolean, Integer, Enum, JSON, Index
from transfer_pricing.models.base import BaseModel
from transfer_pricing.core.enums import RuleType, AdjustmentType


class PriceRule(BaseModel):
    __tablename__ = "price_rules"

    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)

    rule_type = Column(Enum(RuleType), nullable=False, index=True)
    adjustment_type = Column(Enum(AdjustmentType), nullable=False, default=AdjustmentType.PERCENTAGE)
    adjustment_value = Column(Float, nullable=False)
    min_price = Column(Float, nullable=True)
    max_price = Column(Float, nullable=True)

    priority = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True, index=True)

    time_conditions = Column(JSON, nullable=True)
    demand_conditions = Column(JSON, nullable=True)
    distance_conditions = Column(JSON, nullable=True)

    # Empty list means the rule applies everywhere
    applicable_routes = Column(JSON, nullable=False, default=list)
    applicable_vehicle_types = Column(JSON, nullable=False, default=list)

    applied_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_price_rules_active_priority", "active", "priority"),
    )
