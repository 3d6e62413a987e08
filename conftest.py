import pytest
from datetime import datetime
from zoneinfo import ZoneInfo

from transfer_pricing.core.config import settings
from transfer_pricing.core.enums import RuleType, AdjustmentType
from transfer_pricing.repositories.memory import InMemoryRouteRepository, InMemoryRuleRepository
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.schemas.route import Route, Location, Coordinates
from transfer_pricing.services.quotes import QuoteService


PRICING_ZONE = ZoneInfo(settings.PRICING_TIMEZONE)


class RecordingUsage:
    """Usage port stub that remembers which rules fired"""

    def __init__(self):
        self.rule_ids = []

    def dispatch(self, rule_id: str) -> None:
        self.rule_ids.append(rule_id)


def build_route(route_id="route-a", **kwargs) -> Route:
    data = {
        "id": route_id,
        "name": "Airport - Old Town",
        "origin": Location(
            name="Antalya Airport",
            coordinates=Coordinates(lat=36.8987, lng=30.8005),
            location_type="airport",
        ),
        "destination": Location(
            name="Kaleici Old Town",
            coordinates=Coordinates(lat=36.8841, lng=30.7056),
            location_type="city_center",
        ),
        "distance_km": 14.0,
        "duration_minutes": 25,
        "base_pricing": {"sedan": 100.0, "suv": 140.0},
        "base_price": 80.0,
        "currency": "EUR",
    }
    data.update(kwargs)
    return Route(**data)


def build_rule(rule_id="rule-1", **kwargs) -> PriceRule:
    data = {
        "id": rule_id,
        "name": f"Rule {rule_id}",
        "rule_type": RuleType.CUSTOM,
        "adjustment_type": AdjustmentType.PERCENTAGE,
        "adjustment_value": 10.0,
        "priority": 0,
    }
    data.update(kwargs)
    return PriceRule(**data)


@pytest.fixture
def make_route():
    return build_route


@pytest.fixture
def make_rule():
    return build_rule


@pytest.fixture
def recording_usage():
    return RecordingUsage()


@pytest.fixture
def weekday_morning():
    # Wednesday
    return datetime(2026, 10, 14, 9, 30, tzinfo=PRICING_ZONE)


@pytest.fixture
def quote_service_factory(recording_usage, weekday_morning):
    def _factory(routes=None, rules=(), **kwargs):
        routes = routes if routes is not None else [build_route()]
        kwargs.setdefault("usage", recording_usage)
        kwargs.setdefault("clock", lambda: weekday_morning)
        return QuoteService(
            InMemoryRouteRepository(routes),
            InMemoryRuleRepository(rules),
            **kwargs,
        )

    return _factory


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "usage: marks tests related to rule usage accounting"
    )
