import logging
from datetime import datetime
from typing import List, Iterable

from transfer_pricing.repositories.base import RuleRepository
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.schemas.quote import RuntimeConditions
from transfer_pricing.services.matchers import rule_conditions_hold

logger = logging.getLogger(__name__)


def in_route_scope(rule: PriceRule, route_id: str) -> bool:
    return not rule.applicable_routes or route_id in rule.applicable_routes


def order_rules(rules: Iterable[PriceRule]) -> List[PriceRule]:
    """Highest priority first; equal priorities fall back to rule id."""
    return sorted(rules, key=lambda rule: (-rule.priority, rule.id))


class RuleResolver:
    """Returns the ordered set of rules eligible for a route right now."""

    def __init__(self, rule_repository: RuleRepository):
        self.rule_repository = rule_repository

    async def resolve(
        self,
        route_id: str,
        conditions: RuntimeConditions,
        now: datetime,
    ) -> List[PriceRule]:
        rules = await self.rule_repository.list_active_for_route(route_id)

        scoped = [rule for rule in rules if rule.active and in_route_scope(rule, route_id)]
        eligible = [
            rule for rule in order_rules(scoped)
            if rule_conditions_hold(rule, now, conditions)
        ]

        logger.debug(
            f"Resolved {len(eligible)}/{len(scoped)} eligible rules for route {route_id}"
        )
        return eligible
