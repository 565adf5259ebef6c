"""
Read-only lookups for drivers and rides, plus the in-memory demo fixtures.
"""
from typing import Iterable, Protocol

from app.models.driver import DriverProfile, Persona, VehicleType
from app.models.ride import Coordinates, DemandLevel, RideRequest, TimeOfDay


class UnknownDriverError(LookupError):
    pass


class UnknownRideError(LookupError):
    pass


class DriverStore(Protocol):
    def get(self, driver_id: str) -> DriverProfile: ...


class RideStore(Protocol):
    def get(self, ride_id: str) -> RideRequest: ...

    def list(self) -> list[RideRequest]: ...


class InMemoryDriverStore:
    def __init__(self, drivers: Iterable[DriverProfile]):
        self._drivers = {d.driver_id: d for d in drivers}

    def get(self, driver_id: str) -> DriverProfile:
        try:
            return self._drivers[driver_id]
        except KeyError:
            raise UnknownDriverError(f"Driver {driver_id} not found") from None


class InMemoryRideStore:
    def __init__(self, rides: Iterable[RideRequest]):
        self._rides = {r.ride_id: r for r in rides}

    def get(self, ride_id: str) -> RideRequest:
        try:
            return self._rides[ride_id]
        except KeyError:
            raise UnknownRideError(f"Ride {ride_id} not found") from None

    def list(self) -> list[RideRequest]:
        return list(self._rides.values())


# ---------------------------------------------------------------------------
# Demo fixtures (Bengaluru)
# ---------------------------------------------------------------------------

SEED_DRIVERS: tuple[DriverProfile, ...] = (
    DriverProfile(
        driver_id="12345",
        name="John Doe",
        rating=4.8,
        vehicle_type=VehicleType.car,
        experience_years=3,
        coordinates=Coordinates(12.9352, 77.6245),
        persona=Persona.peak_hour_pro,
        location="Koramangala",
        preferred_areas=("Koramangala", "Indiranagar"),
        total_rides=560,
        active_hours=("morning", "evening"),
    ),
    DriverProfile(
        driver_id="67890",
        name="Priya Singh",
        rating=4.9,
        vehicle_type=VehicleType.premium,
        experience_years=5,
        coordinates=Coordinates(12.9784, 77.6408),
        persona=Persona.long_haul_specialist,
        location="Indiranagar",
        preferred_areas=("Indiranagar", "MG Road"),
        total_rides=1200,
        active_hours=("afternoon", "evening", "night"),
    ),
    DriverProfile(
        driver_id="24680",
        name="Raj Kumar",
        rating=4.6,
        vehicle_type=VehicleType.auto,
        experience_years=2,
        coordinates=Coordinates(12.9116, 77.6741),
        persona=Persona.city_navigator,
        location="HSR Layout",
        preferred_areas=("HSR Layout", "Koramangala"),
        total_rides=320,
        active_hours=("morning", "afternoon"),
    ),
)

SEED_RIDES: tuple[RideRequest, ...] = (
    RideRequest(
        ride_id="5678",
        pickup="Koramangala",
        destination="Whitefield",
        pickup_coordinates=Coordinates(12.9352, 77.6245),
        destination_coordinates=Coordinates(12.9698, 77.7500),
        demand=DemandLevel.high,
        supply=DemandLevel.low,
        time_of_day=TimeOfDay.morning,
        direct_distance_km=15,
    ),
    RideRequest(
        ride_id="1234",
        pickup="Indiranagar",
        destination="Electronic City",
        pickup_coordinates=Coordinates(12.9784, 77.6408),
        destination_coordinates=Coordinates(12.8416, 77.6602),
        demand=DemandLevel.medium,
        supply=DemandLevel.medium,
        time_of_day=TimeOfDay.evening,
        direct_distance_km=20,
    ),
    RideRequest(
        ride_id="9876",
        pickup="MG Road",
        destination="Airport",
        pickup_coordinates=Coordinates(12.9767, 77.5713),
        destination_coordinates=Coordinates(13.1989, 77.7068),
        demand=DemandLevel.low,
        supply=DemandLevel.high,
        time_of_day=TimeOfDay.night,
        direct_distance_km=35,
    ),
)
