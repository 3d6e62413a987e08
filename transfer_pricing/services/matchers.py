"""Condition matchers.

Each matcher answers whether a rule's own condition block currently holds.
Only the block belonging to the rule's ``rule_type`` is consulted; blocks of
another kind on the same rule are ignored.
"""
from datetime import datetime
from typing import Callable, Dict
from zoneinfo import ZoneInfo

from transfer_pricing.core.config import settings
from transfer_pricing.core.enums import RuleType, DistanceUnit
from transfer_pricing.schemas.price_rule import PriceRule, DistanceConditions
from transfer_pricing.schemas.quote import RuntimeConditions

KM_PER_MILE = 1.609344
PRICING_ZONE = ZoneInfo(settings.PRICING_TIMEZONE)

Matcher = Callable[[PriceRule, datetime, RuntimeConditions], bool]


def sunday_based_weekday(moment: datetime) -> int:
    """Weekday number with Sunday = 0 and Saturday = 6."""
    return moment.isoweekday() % 7


def localize(moment: datetime, zone: ZoneInfo = PRICING_ZONE) -> datetime:
    # Naive values are wall-clock times in the pricing timezone
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def is_currently_applicable(rule: PriceRule, now: datetime) -> bool:
    """Time-window check for a rule at ``now``. All bounds are inclusive."""
    if not rule.active:
        return False

    conditions = rule.time_conditions
    if conditions is None:
        return True

    now = localize(now)

    if conditions.days_of_week and sunday_based_weekday(now) not in conditions.days_of_week:
        return False

    if conditions.hour_ranges:
        in_range = any(r.start <= now.hour <= r.end for r in conditions.hour_ranges)
        if not in_range:
            return False

    if conditions.date_ranges:
        in_date_range = any(
            localize(r.start) <= now <= localize(r.end)
            for r in conditions.date_ranges
        )
        if not in_date_range:
            return False

    return True


def time_window_holds(rule: PriceRule, now: datetime, conditions: RuntimeConditions) -> bool:
    return is_currently_applicable(rule, now)


def demand_holds(rule: PriceRule, now: datetime, conditions: RuntimeConditions) -> bool:
    rate = conditions.occupancy_rate
    demand = rule.demand_conditions
    if rate is None or demand is None:
        return True

    if demand.min_occupancy_rate is not None and rate < demand.min_occupancy_rate:
        return False
    if demand.max_occupancy_rate is not None and rate > demand.max_occupancy_rate:
        return False
    return True


def _to_km(value: float, unit: DistanceUnit) -> float:
    if unit == DistanceUnit.MI:
        return value * KM_PER_MILE
    return value


def distance_bounds_km(conditions: DistanceConditions):
    min_km = None if conditions.min_distance is None else _to_km(conditions.min_distance, conditions.unit)
    max_km = None if conditions.max_distance is None else _to_km(conditions.max_distance, conditions.unit)
    return min_km, max_km


def distance_holds(rule: PriceRule, now: datetime, conditions: RuntimeConditions) -> bool:
    distance = conditions.distance
    bounds = rule.distance_conditions
    if distance is None or bounds is None:
        return True

    min_km, max_km = distance_bounds_km(bounds)
    if min_km is not None and distance < min_km:
        return False
    if max_km is not None and distance > max_km:
        return False
    return True


def always_holds(rule: PriceRule, now: datetime, conditions: RuntimeConditions) -> bool:
    # Scoped purely through applicable routes and vehicle types
    return True


MATCHERS: Dict[RuleType, Matcher] = {
    RuleType.TIME_BASED: time_window_holds,
    RuleType.DEMAND_BASED: demand_holds,
    RuleType.DISTANCE_BASED: distance_holds,
    RuleType.SEASON_BASED: always_holds,
    RuleType.CUSTOM: always_holds,
}

_unhandled = set(RuleType) - set(MATCHERS)
if _unhandled:
    raise RuntimeError(f"No condition matcher registered for rule types: {sorted(_unhandled)}")


def rule_conditions_hold(rule: PriceRule, now: datetime, conditions: RuntimeConditions) -> bool:
    return MATCHERS[rule.rule_type](rule, now, conditions)
