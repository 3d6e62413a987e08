"""Collaborator ports consumed by the pricing engine"""
from typing import Protocol, Optional, List

from transfer_pricing.core.enums import LocationType
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.schemas.route import Route


class RouteRepository(Protocol):

    async def get(self, route_id: str) -> Optional[Route]: ...

    async def find_by_locations(
        self,
        origin_name: Optional[str] = None,
        destination_name: Optional[str] = None,
    ) -> List[Route]: ...

    async def find_by_location_type(
        self,
        origin_type: Optional[LocationType] = None,
        destination_type: Optional[LocationType] = None,
    ) -> List[Route]: ...


class RuleRepository(Protocol):

    async def get(self, rule_id: str) -> Optional[PriceRule]: ...

    async def list_active_for_route(self, route_id: str) -> List[PriceRule]: ...

    async def increment_usage(self, rule_id: str) -> None: ...
