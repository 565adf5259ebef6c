from app.models.driver import DriverProfile, Persona, VehicleType
from app.models.fare import (
    ClassificationResult, CompatibilityResult, FareBreakdown, IncentiveSplit, RideCategory,
)
from app.models.notification import Notification, NotificationStatus
from app.models.ride import Coordinates, DemandLevel, RideRequest, RouteEstimate, TimeOfDay

__all__ = [
    "ClassificationResult",
    "CompatibilityResult",
    "Coordinates",
    "DemandLevel",
    "DriverProfile",
    "FareBreakdown",
    "IncentiveSplit",
    "Notification",
    "NotificationStatus",
    "Persona",
    "RideCategory",
    "RideRequest",
    "RouteEstimate",
    "TimeOfDay",
    "VehicleType",
]
