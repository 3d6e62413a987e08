"""Pricing engine error taxonomy"""


class PricingError(Exception):
    """Base exception for pricing engine errors"""
    pass


class RouteNotFound(PricingError):

    def __init__(self, route_id: str):
        self.route_id = route_id
        super().__init__(f"Route with id {route_id} not found")


class InvalidVehicleType(PricingError):

    def __init__(self, vehicle_type):
        self.vehicle_type = vehicle_type
        super().__init__(f"Invalid vehicle type: {vehicle_type!r}")


class RepositoryUnavailable(PricingError):
    """Transient failure reaching the route or rule store. Callers may retry."""

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        message = f"Repository unavailable during {operation}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UsageAccountingFailure(PricingError):
    """Recording a rule's usage counter failed. Never surfaced to quote callers."""

    def __init__(self, rule_id: str, reason: str = ""):
        self.rule_id = rule_id
        self.reason = reason
        super().__init__(f"Failed to record usage for rule {rule_id}: {reason}")
