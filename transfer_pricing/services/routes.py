from transfer_pricing.schemas.route import Route
from transfer_pricing.services.composer import round_price


def formatted_name(route: Route) -> str:
    return f"{route.origin.name} → {route.destination.name}"


def price_per_km(route: Route) -> float:
    if route.distance_km == 0:
        return 0.0
    return round_price(route.base_price / route.distance_km)
