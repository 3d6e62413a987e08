import sys
import asyncio
from transfer_pricing.core.enums import RuleType, AdjustmentType, Currency, VehicleType
from transfer_pricing.db.session import engine, AsyncSessionLocal
from transfer_pricing.models.base import Base
from transfer_pricing.models.route import Route
from transfer_pricing.models.price_rule import PriceRule


def sample_route() -> Route:
    origin = {
        "name": "Antalya Airport",
        "coordinates": {"lat": 36.8987, "lng": 30.8005},
        "location_type": "airport",
    }
    destination = {
        "name": "Kemer",
        "coordinates": {"lat": 36.5978, "lng": 30.5594},
        "location_type": "city_center",
    }
    return Route(
        name="Antalya Airport - Kemer",
        origin=origin,
        destination=destination,
        origin_name=origin["name"],
        destination_name=destination["name"],
        origin_type=origin["location_type"],
        destination_type=destination["location_type"],
        distance_km=55.0,
        duration_minutes=50,
        base_pricing={VehicleType.SEDAN.value: 45.0, VehicleType.VAN.value: 60.0},
        base_price=50.0,
        currency=Currency.EUR,
        is_popular=True,
    )


def sample_rules() -> list:
    return [
        PriceRule(
            name="Night surcharge",
            rule_type=RuleType.TIME_BASED,
            adjustment_type=AdjustmentType.PERCENTAGE,
            adjustment_value=25.0,
            priority=10,
            time_conditions={"days_of_week": [], "hour_ranges": [{"start": 0, "end": 6}], "date_ranges": []},
        ),
        PriceRule(
            name="High season",
            rule_type=RuleType.SEASON_BASED,
            adjustment_type=AdjustmentType.FIXED,
            adjustment_value=10.0,
            priority=5,
            max_price=120.0,
        ),
        PriceRule(
            name="Long distance discount",
            rule_type=RuleType.DISTANCE_BASED,
            adjustment_type=AdjustmentType.PERCENTAGE,
            adjustment_value=-5.0,
            priority=1,
            distance_conditions={"min_distance": 50, "unit": "km"},
        ),
    ]


async def seed(reset: bool = False) -> None:
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        route = sample_route()
        rules = sample_rules()
        db.add(route)
        db.add_all(rules)
        await db.flush()
        route.rule_ids = [rule.id for rule in rules]
        await db.commit()
        print(f"Route '{route.name}' created with id {route.id}")
        for rule in rules:
            print(f"  rule {rule.id}: {rule.name}")

    await engine.dispose()


def main():
    reset = "--reset" in sys.argv[1:]
    try:
        asyncio.run(seed(reset))
    except Exception as e:
        print(f"Error seeding pricing data: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
