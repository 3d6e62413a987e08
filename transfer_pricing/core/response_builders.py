from transfer_pricing.models.route import Route as RouteRow
from transfer_pricing.models.price_rule import PriceRule as PriceRuleRow
from transfer_pricing.schemas.route import Route, RouteOut
from transfer_pricing.schemas.price_rule import PriceRule
from transfer_pricing.services.routes import formatted_name, price_per_km


def build_route(row: RouteRow) -> Route:
    return Route(
        id=row.id,
        name=row.name,
        origin=row.origin,
        destination=row.destination,
        distance_km=row.distance_km,
        duration_minutes=row.duration_minutes,
        base_pricing=row.base_pricing or {},
        base_price=row.base_price,
        currency=row.currency,
        rule_ids=row.rule_ids or [],
        categories=row.categories or [],
        active=row.active,
        is_popular=row.is_popular,
        total_bookings=row.total_bookings or 0,
    )


def build_price_rule(row: PriceRuleRow) -> PriceRule:
    return PriceRule(
        id=row.id,
        name=row.name,
        description=row.description,
        priority=row.priority,
        rule_type=row.rule_type,
        adjustment_type=row.adjustment_type,
        adjustment_value=row.adjustment_value,
        min_price=row.min_price,
        max_price=row.max_price,
        active=row.active,
        time_conditions=row.time_conditions,
        demand_conditions=row.demand_conditions,
        distance_conditions=row.distance_conditions,
        applicable_routes=row.applicable_routes or [],
        applicable_vehicle_types=row.applicable_vehicle_types or [],
        applied_count=row.applied_count or 0,
    )


def build_route_response(route: Route) -> RouteOut:
    return RouteOut(
        **route.model_dump(),
        formatted_name=formatted_name(route),
        price_per_km=price_per_km(route),
    )


def build_route_response_list(routes: list) -> list:
    return [build_route_response(route) for route in routes]
