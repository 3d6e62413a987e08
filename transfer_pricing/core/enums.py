from enum import Enum


class VehicleType(str, Enum):
    ECONOMY = "economy"
    SEDAN = "sedan"
    SUV = "suv"
    VAN = "van"
    MINIBUS = "minibus"
    LUXURY = "luxury"

    def __str__(self):
        return self.value


class Currency(str, Enum):
    EUR = "EUR"
    USD = "USD"
    TRY = "TRY"
    GBP = "GBP"

    def __str__(self):
        return self.value


class RuleType(str, Enum):
    TIME_BASED = "time_based"
    DEMAND_BASED = "demand_based"
    DISTANCE_BASED = "distance_based"
    SEASON_BASED = "season_based"
    CUSTOM = "custom"

    def __str__(self):
        return self.value


class AdjustmentType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

    def __str__(self):
        return self.value


class DistanceUnit(str, Enum):
    KM = "km"
    MI = "mi"

    def __str__(self):
        return self.value


class LocationType(str, Enum):
    AIRPORT = "airport"
    HOTEL = "hotel"
    CITY_CENTER = "city_center"
    ATTRACTION = "attraction"
    PORT = "port"
    STATION = "station"
    CUSTOM = "custom"

    def __str__(self):
        return self.value


class UsageBackend(str, Enum):
    DATABASE = "database"
    REDIS = "redis"
    CELERY = "celery"
    NONE = "none"

    def __str__(self):
        return self.value
