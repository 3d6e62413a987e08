import logging
from functools import wraps
from typing import Callable, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import OperationalError, InterfaceError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.future import select

from transfer_pricing.core.enums import LocationType
from transfer_pricing.core.exceptions import RepositoryUnavailable
from transfer_pricing.core.metrics import track_db_operation
from transfer_pricing.core.response_builders import build_route, build_price_rule
from transfer_pricing.models.route import Route as RouteRow
from transfer_pricing.models.price_rule import PriceRule as PriceRuleRow
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.schemas.route import Route

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


def unavailable_on_transient_error(operation: str) -> Callable:
    """Translate connection-level failures into RepositoryUnavailable"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except TRANSIENT_ERRORS as e:
                logger.error(f"Repository failure during {operation}: {e}")
                raise RepositoryUnavailable(operation, str(e)) from e
        return wrapper
    return decorator


def _popular_first(query):
    return query.order_by(RouteRow.is_popular.desc(), RouteRow.total_bookings.desc(), RouteRow.id)


class SqlRouteRepository:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @unavailable_on_transient_error("route lookup")
    @track_db_operation("select", "price_routes")
    async def get(self, route_id: str) -> Optional[Route]:
        async with self.session_factory() as db:
            res = await db.execute(select(RouteRow).where(RouteRow.id == route_id))
            row = res.scalars().first()
            return build_route(row) if row else None

    @unavailable_on_transient_error("route search")
    @track_db_operation("select", "price_routes")
    async def find_by_locations(
        self,
        origin_name: Optional[str] = None,
        destination_name: Optional[str] = None,
    ) -> List[Route]:
        q = select(RouteRow)
        if origin_name:
            q = q.where(func.lower(RouteRow.origin_name).contains(origin_name.lower(), autoescape=True))
        if destination_name:
            q = q.where(func.lower(RouteRow.destination_name).contains(destination_name.lower(), autoescape=True))

        async with self.session_factory() as db:
            res = await db.execute(_popular_first(q))
            return [build_route(row) for row in res.scalars().all()]

    @unavailable_on_transient_error("route search")
    @track_db_operation("select", "price_routes")
    async def find_by_location_type(
        self,
        origin_type: Optional[LocationType] = None,
        destination_type: Optional[LocationType] = None,
    ) -> List[Route]:
        q = select(RouteRow).where(RouteRow.active.is_(True))
        if origin_type:
            q = q.where(RouteRow.origin_type == str(origin_type))
        if destination_type:
            q = q.where(RouteRow.destination_type == str(destination_type))

        async with self.session_factory() as db:
            res = await db.execute(_popular_first(q))
            return [build_route(row) for row in res.scalars().all()]


class SqlRuleRepository:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @unavailable_on_transient_error("rule lookup")
    @track_db_operation("select", "price_rules")
    async def get(self, rule_id: str) -> Optional[PriceRule]:
        async with self.session_factory() as db:
            res = await db.execute(select(PriceRuleRow).where(PriceRuleRow.id == rule_id))
            row = res.scalars().first()
            return build_price_rule(row) if row else None

    @unavailable_on_transient_error("rule lookup")
    @track_db_operation("select", "price_rules")
    async def list_active_for_route(self, route_id: str) -> List[PriceRule]:
        q = (
            select(PriceRuleRow)
            .where(PriceRuleRow.active.is_(True))
            .order_by(PriceRuleRow.priority.desc(), PriceRuleRow.id)
        )
        async with self.session_factory() as db:
            res = await db.execute(q)
            rows = res.scalars().all()

        # Route scope lives in a JSON column, filtered here to stay backend-neutral
        return [
            build_price_rule(row) for row in rows
            if not row.applicable_routes or route_id in row.applicable_routes
        ]

    @unavailable_on_transient_error("usage increment")
    @track_db_operation("update", "price_rules")
    async def increment_usage(self, rule_id: str) -> None:
        async with self.session_factory() as db:
            await db.execute(
                update(PriceRuleRow)
                .where(PriceRuleRow.id == rule_id)
                .values(applied_count=PriceRuleRow.applied_count + 1)
            )
            await db.commit()
