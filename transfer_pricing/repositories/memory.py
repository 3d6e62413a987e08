from typing import Dict, Iterable, List, Optional

from transfer_pricing.core.enums import LocationType
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.schemas.route import Route


def _popular_first(routes: Iterable[Route]) -> List[Route]:
    return sorted(routes, key=lambda r: (not r.is_popular, -r.total_bookings))


class InMemoryRouteRepository:

    def __init__(self, routes: Iterable[Route] = ()):
        self._routes: Dict[str, Route] = {route.id: route for route in routes}

    async def get(self, route_id: str) -> Optional[Route]:
        route = self._routes.get(route_id)
        return route.model_copy(deep=True) if route else None

    async def find_by_locations(
        self,
        origin_name: Optional[str] = None,
        destination_name: Optional[str] = None,
    ) -> List[Route]:
        def matches(route: Route) -> bool:
            if origin_name and origin_name.lower() not in route.origin.name.lower():
                return False
            if destination_name and destination_name.lower() not in route.destination.name.lower():
                return False
            return True

        return _popular_first(r.model_copy(deep=True) for r in self._routes.values() if matches(r))

    async def find_by_location_type(
        self,
        origin_type: Optional[LocationType] = None,
        destination_type: Optional[LocationType] = None,
    ) -> List[Route]:
        def matches(route: Route) -> bool:
            if not route.active:
                return False
            if origin_type and route.origin.location_type != origin_type:
                return False
            if destination_type and route.destination.location_type != destination_type:
                return False
            return True

        return _popular_first(r.model_copy(deep=True) for r in self._routes.values() if matches(r))


class InMemoryRuleRepository:
    """Rule store kept in insertion order, like a document collection."""

    def __init__(self, rules: Iterable[PriceRule] = ()):
        self._rules: Dict[str, PriceRule] = {rule.id: rule for rule in rules}

    async def get(self, rule_id: str) -> Optional[PriceRule]:
        rule = self._rules.get(rule_id)
        return rule.model_copy(deep=True) if rule else None

    async def list_active_for_route(self, route_id: str) -> List[PriceRule]:
        return [
            rule.model_copy(deep=True)
            for rule in self._rules.values()
            if rule.active and (not rule.applicable_routes or route_id in rule.applicable_routes)
        ]

    async def increment_usage(self, rule_id: str) -> None:
        rule = self._rules.get(rule_id)
        if rule is None:
            return
        self._rules[rule_id] = rule.model_copy(update={"applied_count": rule.applied_count + 1})
