from dataclasses import dataclass
from enum import Enum


class DemandLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class TimeOfDay(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class RideRequest:
    """A ride offer as it arrives from the rider side."""

    ride_id: str
    pickup: str
    destination: str
    pickup_coordinates: Coordinates
    destination_coordinates: Coordinates
    demand: DemandLevel
    supply: DemandLevel
    time_of_day: TimeOfDay
    # Rough direct distance supplied with the request, display only
    direct_distance_km: float = 0.0
    estimated_wait_minutes: float = 5.0


@dataclass(frozen=True)
class RouteEstimate:
    distance_km: float
    duration_min: float
    source: str  # "routed" | "fallback"
