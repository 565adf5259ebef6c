from dataclasses import dataclass, field
from enum import Enum

from app.models.ride import Coordinates


class VehicleType(str, Enum):
    auto = "auto"
    car = "car"
    premium = "premium"


class Persona(str, Enum):
    peak_hour_pro = "Peak Hour Pro"
    long_haul_specialist = "Long Haul Specialist"
    city_navigator = "City Navigator"
    steady_earner = "Steady Earner"


@dataclass(frozen=True)
class DriverProfile:
    driver_id: str
    name: str
    rating: float  # 0-5
    vehicle_type: VehicleType
    experience_years: float
    coordinates: Coordinates
    persona: Persona = Persona.steady_earner
    location: str = ""
    preferred_areas: tuple[str, ...] = field(default_factory=tuple)
    total_rides: int = 0
    active_hours: tuple[str, ...] = field(default_factory=tuple)
