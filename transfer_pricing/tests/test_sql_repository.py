import asyncio
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from transfer_pricing.core.enums import RuleType, AdjustmentType, Currency, LocationType, VehicleType
from transfer_pricing.core.exceptions import RepositoryUnavailable
from transfer_pricing.db.session import check_database
from transfer_pricing.models.base import Base
from transfer_pricing.models.route import Route as RouteRow
from transfer_pricing.models.price_rule import PriceRule as PriceRuleRow
from transfer_pricing.repositories.sql import SqlRouteRepository, SqlRuleRepository
from transfer_pricing.services.quotes import QuoteService
from transfer_pricing.services.tasks_internal import increment_rule_usage_async


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pricing.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


def route_row(route_id="route-a", origin="Antalya Airport", destination="Kemer", **kwargs):
    data = {
        "id": route_id,
        "name": f"{origin} - {destination}",
        "origin": {"name": origin, "coordinates": {"lat": 36.9, "lng": 30.8}, "location_type": "airport"},
        "destination": {"name": destination, "coordinates": {"lat": 36.6, "lng": 30.56}, "location_type": "hotel"},
        "origin_name": origin,
        "destination_name": destination,
        "origin_type": "airport",
        "destination_type": "hotel",
        "distance_km": 55.0,
        "duration_minutes": 50,
        "base_pricing": {"sedan": 100.0},
        "base_price": 80.0,
        "currency": Currency.EUR,
        "rule_ids": [],
        "categories": [],
        "active": True,
        "is_popular": False,
        "total_bookings": 0,
    }
    data.update(kwargs)
    return RouteRow(**data)


def rule_row(rule_id, **kwargs):
    data = {
        "id": rule_id,
        "name": f"Rule {rule_id}",
        "rule_type": RuleType.CUSTOM,
        "adjustment_type": AdjustmentType.PERCENTAGE,
        "adjustment_value": 10.0,
        "priority": 0,
        "active": True,
        "applicable_routes": [],
        "applicable_vehicle_types": [],
        "applied_count": 0,
    }
    data.update(kwargs)
    return PriceRuleRow(**data)


async def add_rows(session_factory, *rows):
    async with session_factory() as db:
        db.add_all(rows)
        await db.commit()


class BrokenSession:
    async def __aenter__(self):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    async def __aexit__(self, *exc):
        return False


class TestSqlRouteRepository:

    @pytest.mark.asyncio
    async def test_get_builds_domain_route(self, session_factory):
        await add_rows(session_factory, route_row())

        route = await SqlRouteRepository(session_factory).get("route-a")

        assert route.origin.name == "Antalya Airport"
        assert route.origin.location_type == LocationType.AIRPORT
        assert route.base_pricing == {VehicleType.SEDAN: 100.0}
        assert route.currency == Currency.EUR

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, session_factory):
        assert await SqlRouteRepository(session_factory).get("nope") is None

    @pytest.mark.asyncio
    async def test_find_by_locations_is_case_insensitive(self, session_factory):
        await add_rows(
            session_factory,
            route_row("r1", destination="Kemer"),
            route_row("r2", destination="Belek", is_popular=True),
            route_row("r3", origin="Dalaman Airport", destination="Fethiye"),
        )
        repo = SqlRouteRepository(session_factory)

        antalya = await repo.find_by_locations(origin_name="antalya")
        belek = await repo.find_by_locations(destination_name="BEL")

        assert [r.id for r in antalya] == ["r2", "r1"]
        assert [r.id for r in belek] == ["r2"]

    @pytest.mark.asyncio
    async def test_find_by_location_type_skips_inactive(self, session_factory):
        await add_rows(
            session_factory,
            route_row("r1"),
            route_row("r2", active=False),
            route_row("r3", destination_type="port"),
        )
        repo = SqlRouteRepository(session_factory)

        routes = await repo.find_by_location_type(LocationType.AIRPORT, LocationType.HOTEL)

        assert [r.id for r in routes] == ["r1"]

    @pytest.mark.asyncio
    async def test_connection_failure_is_repository_unavailable(self):
        repo = SqlRouteRepository(lambda: BrokenSession())
        with pytest.raises(RepositoryUnavailable):
            await repo.get("route-a")


class TestSqlRuleRepository:

    @pytest.mark.asyncio
    async def test_list_active_for_route(self, session_factory):
        await add_rows(
            session_factory,
            rule_row("global", priority=1),
            rule_row("scoped", priority=5, applicable_routes=["route-a"]),
            rule_row("elsewhere", priority=9, applicable_routes=["route-b"]),
            rule_row("disabled", priority=7, active=False),
        )
        repo = SqlRuleRepository(session_factory)

        rules = await repo.list_active_for_route("route-a")

        assert [r.id for r in rules] == ["scoped", "global"]

    @pytest.mark.asyncio
    async def test_condition_blocks_round_trip(self, session_factory):
        await add_rows(session_factory, rule_row(
            "peak",
            rule_type=RuleType.TIME_BASED,
            time_conditions={"days_of_week": [1, 2], "hour_ranges": [{"start": 7, "end": 9}], "date_ranges": []},
            applicable_vehicle_types=["sedan", "van"],
            max_price=150.0,
        ))

        rule = await SqlRuleRepository(session_factory).get("peak")

        assert rule.rule_type == RuleType.TIME_BASED
        assert rule.time_conditions.hour_ranges[0].end == 9
        assert rule.applicable_vehicle_types == [VehicleType.SEDAN, VehicleType.VAN]
        assert rule.max_price == 150.0
        assert rule.min_price is None

    @pytest.mark.asyncio
    async def test_concurrent_increments(self, session_factory):
        await add_rows(session_factory, rule_row("r1"))
        repo = SqlRuleRepository(session_factory)

        await asyncio.gather(*(repo.increment_usage("r1") for _ in range(10)))

        assert (await repo.get("r1")).applied_count == 10

    @pytest.mark.asyncio
    async def test_background_task_increments(self, session_factory):
        await add_rows(session_factory, rule_row("r1", applied_count=3))

        await increment_rule_usage_async("r1", session_factory=session_factory)

        assert (await SqlRuleRepository(session_factory).get("r1")).applied_count == 4


@pytest.mark.asyncio
async def test_quote_against_sql_store(session_factory):
    await add_rows(
        session_factory,
        route_row(),
        rule_row("r1", priority=10, adjustment_value=20),
        rule_row("r2", priority=5, adjustment_type=AdjustmentType.FIXED, adjustment_value=15),
    )
    service = QuoteService(SqlRouteRepository(session_factory), SqlRuleRepository(session_factory))

    quote = await service.quote("route-a", "sedan")

    assert quote.final_price == 135.0
    assert [a.rule_id for a in quote.applied_rules] == ["r1", "r2"]


class TestDatabaseCheck:

    @pytest.mark.asyncio
    async def test_reachable_database(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pricing.db'}")
        try:
            assert await check_database(engine) is True
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_unreachable_database(self, tmp_path, caplog):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'pricing.db'}")
        try:
            assert await check_database(engine) is False
        finally:
            await engine.dispose()
        assert "Database connection failed" in caplog.text
