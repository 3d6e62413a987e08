import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Iterable, Optional, Protocol

from transfer_pricing.core.enums import AdjustmentType, VehicleType
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.schemas.quote import AppliedRule, PriceQuote
from transfer_pricing.schemas.route import Route

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


class UsagePort(Protocol):
    def dispatch(self, rule_id: str) -> None: ...


class NoopUsagePort:
    def dispatch(self, rule_id: str) -> None:
        return None


def round_price(value: float) -> float:
    return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def select_base_price(route: Route, vehicle_type: VehicleType) -> float:
    price = route.base_pricing.get(vehicle_type)
    return route.base_price if price is None else price


def in_vehicle_scope(rule: PriceRule, vehicle_type: VehicleType) -> bool:
    return not rule.applicable_vehicle_types or vehicle_type in rule.applicable_vehicle_types


def _percentage(price: float, value: float) -> float:
    return price * (1 + value / 100)


def _fixed(price: float, value: float) -> float:
    return price + value


ADJUSTMENTS: Dict[AdjustmentType, Callable[[float, float], float]] = {
    AdjustmentType.PERCENTAGE: _percentage,
    AdjustmentType.FIXED: _fixed,
}


def clamp(price: float, min_price: Optional[float], max_price: Optional[float]) -> float:
    if min_price is not None and price < min_price:
        price = min_price
    if max_price is not None and price > max_price:
        price = max_price
    return price


class PriceComposer:
    """Folds eligible rules into a running price, one rule at a time.

    Each applied rule adjusts the current price (not the original base), then
    the result is clamped to the rule's bounds and rounded half-up to cents.
    Rules scoped to other vehicle types are skipped without trace. Usage is
    reported through ``usage`` and never influences the price.
    """

    def __init__(self, usage: Optional[UsagePort] = None, floor_at_zero: bool = True):
        self.usage = usage or NoopUsagePort()
        self.floor_at_zero = floor_at_zero

    def apply_rule(self, price: float, rule: PriceRule) -> float:
        adjusted = ADJUSTMENTS[rule.adjustment_type](price, rule.adjustment_value)
        adjusted = clamp(adjusted, rule.min_price, rule.max_price)

        if adjusted < 0:
            logger.warning(
                f"Rule {rule.id} ({rule.name}) drove price to {adjusted:.2f}; "
                f"{'flooring at 0' if self.floor_at_zero else 'keeping negative price'}"
            )
            if self.floor_at_zero:
                adjusted = 0.0

        return round_price(adjusted)

    def compose(
        self,
        route: Route,
        vehicle_type: VehicleType,
        eligible_rules: Iterable[PriceRule],
    ) -> PriceQuote:
        base_price = select_base_price(route, vehicle_type)
        price = base_price
        applied = []

        for rule in eligible_rules:
            if not in_vehicle_scope(rule, vehicle_type):
                continue

            price = self.apply_rule(price, rule)
            applied.append(AppliedRule(
                rule_id=rule.id,
                rule_name=rule.name,
                adjustment=rule.adjustment_value,
                adjustment_type=rule.adjustment_type,
            ))
            self.usage.dispatch(rule.id)

        return PriceQuote(
            base_price=base_price,
            final_price=price,
            applied_rules=applied,
            currency=route.currency,
        )
