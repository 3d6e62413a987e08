"""Quote facade: validates the request, loads the route, resolves and composes."""
import asyncio
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar, Union
from zoneinfo import ZoneInfo

from transfer_pricing.core.config import settings
from transfer_pricing.core.enums import VehicleType
from transfer_pricing.core.exceptions import InvalidVehicleType, RouteNotFound, RepositoryUnavailable
from transfer_pricing.core.metrics import quotes_computed, quote_duration, rules_applied
from transfer_pricing.repositories.base import RouteRepository, RuleRepository
from transfer_pricing.schemas.quote import PriceQuote, RuntimeConditions
from transfer_pricing.services.composer import PriceComposer, UsagePort
from transfer_pricing.services.resolver import RuleResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_vehicle_type(value: Union[str, VehicleType]) -> VehicleType:
    try:
        return VehicleType(value)
    except ValueError:
        raise InvalidVehicleType(value) from None


def pricing_clock(timezone: str = settings.PRICING_TIMEZONE) -> Callable[[], datetime]:
    zone = ZoneInfo(timezone)
    return lambda: datetime.now(zone)


class QuoteService:

    def __init__(
        self,
        route_repository: RouteRepository,
        rule_repository: RuleRepository,
        usage: Optional[UsagePort] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: Optional[float] = settings.REPOSITORY_TIMEOUT_SECONDS,
        floor_at_zero: bool = settings.PRICE_FLOOR_AT_ZERO,
    ):
        self.route_repository = route_repository
        self.resolver = RuleResolver(rule_repository)
        self.composer = PriceComposer(usage=usage, floor_at_zero=floor_at_zero)
        self.clock = clock or pricing_clock()
        self.timeout = timeout

    async def _fetch(self, operation: str, call: Awaitable[T], timeout: Optional[float]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError:
            raise RepositoryUnavailable(operation, f"timed out after {timeout}s") from None

    async def quote(
        self,
        route_id: str,
        vehicle_type: Union[str, VehicleType],
        conditions: Optional[RuntimeConditions] = None,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> PriceQuote:
        start_time = time.time()
        try:
            result = await self._quote(route_id, vehicle_type, conditions, now, timeout)
        except RouteNotFound:
            quotes_computed.labels(outcome="route_not_found").inc()
            raise
        except InvalidVehicleType:
            quotes_computed.labels(outcome="invalid_vehicle_type").inc()
            raise
        except RepositoryUnavailable:
            quotes_computed.labels(outcome="repository_unavailable").inc()
            raise

        quotes_computed.labels(outcome="success").inc()
        quote_duration.observe(time.time() - start_time)
        for applied in result.applied_rules:
            rules_applied.labels(adjustment_type=str(applied.adjustment_type)).inc()
        return result

    async def _quote(self, route_id, vehicle_type, conditions, now, timeout) -> PriceQuote:
        vehicle = parse_vehicle_type(vehicle_type)
        timeout = self.timeout if timeout is None else timeout

        route = await self._fetch("route lookup", self.route_repository.get(route_id), timeout)
        if route is None:
            raise RouteNotFound(route_id)

        conditions = conditions or RuntimeConditions()
        if conditions.distance is None:
            conditions = conditions.model_copy(update={"distance": route.distance_km})

        now = now or self.clock()
        rules = await self._fetch(
            "rule lookup",
            self.resolver.resolve(route.id, conditions, now),
            timeout,
        )

        result = self.composer.compose(route, vehicle, rules)
        logger.info(
            f"Quoted route {route.id} for {vehicle}: {result.base_price} -> {result.final_price} "
            f"{result.currency} ({len(result.applied_rules)} rules)"
        )
        return result
