"""
Fare calculation service.
"""
from math import floor

from app.models.driver import DriverProfile, VehicleType
from app.models.fare import ClassificationResult, FareBreakdown
from app.models.ride import RideRequest
from app.services.incentives import allocate_incentive, round_half_up

# ---------------------------------------------------------------------------
# Vehicle rates (INR)
# ---------------------------------------------------------------------------
BASE_FARE: dict[VehicleType, int] = {VehicleType.auto: 30, VehicleType.car: 50, VehicleType.premium: 100}
RATE_PER_KM: dict[VehicleType, int] = {VehicleType.auto: 12, VehicleType.car: 15, VehicleType.premium: 20}
RATE_PER_WAIT_MINUTE: dict[VehicleType, int] = {VehicleType.auto: 2, VehicleType.car: 3, VehicleType.premium: 4}

# km per litre
MILEAGE_KMPL: dict[VehicleType, float] = {VehicleType.auto: 35, VehicleType.car: 15, VehicleType.premium: 10}

DEFAULT_FUEL_PRICE = 100.0  # INR per litre
# Flat in the current surge-only model; kept so a multiplier can be reintroduced
DEMAND_MULTIPLIER = 1.0


def estimate_fuel_cost(
    distance_km: float,
    vehicle_type: VehicleType,
    fuel_price_per_liter: float = DEFAULT_FUEL_PRICE,
) -> int:
    litres = max(distance_km, 0.0) / MILEAGE_KMPL[vehicle_type]
    return round_half_up(litres * fuel_price_per_liter)


def compute_fare(
    ride: RideRequest,
    driver: DriverProfile,
    classification: ClassificationResult,
    *,
    distance_km: float,
    dead_mileage_km: float = 0.0,
    platform_fee_percent: float = 0.0,
    fuel_price_per_liter: float = DEFAULT_FUEL_PRICE,
) -> FareBreakdown:
    """
    Price a ride for the given driver.

    total = floor(floor((base + distance + wait) * multiplier) + 75% of surge)
    profit = max(0, total - platform fee - fuel for ride + dead mileage)

    Dead mileage only feeds the fuel estimate; it is not paid.
    """
    vehicle = VehicleType(driver.vehicle_type)
    distance_km = max(distance_km, 0.0)
    dead_mileage_km = max(dead_mileage_km, 0.0)
    wait_minutes = max(ride.estimated_wait_minutes, 0.0)

    base_fare = BASE_FARE[vehicle]
    distance_fare = floor(distance_km * RATE_PER_KM[vehicle])
    wait_time_fare = floor(wait_minutes * RATE_PER_WAIT_MINUTE[vehicle])
    pre_surge = floor((base_fare + distance_fare + wait_time_fare) * DEMAND_MULTIPLIER)

    incentive = allocate_incentive(classification.surge)
    total_fare = max(floor(pre_surge + incentive.fare_component), 0)

    fuel_cost = estimate_fuel_cost(distance_km + dead_mileage_km, vehicle, fuel_price_per_liter)
    platform_fee = round_half_up(total_fare * platform_fee_percent / 100)
    estimated_profit = max(0, total_fare - platform_fee - fuel_cost)

    return FareBreakdown(
        base_fare=base_fare,
        distance_fare=distance_fare,
        wait_time_fare=wait_time_fare,
        surge_total=classification.surge,
        fare_incentive_component=incentive.fare_component,
        points_incentive_component=incentive.points_component,
        points_earned=incentive.points_earned,
        demand_multiplier=DEMAND_MULTIPLIER,
        fuel_cost=fuel_cost,
        platform_fee=platform_fee,
        estimated_profit=estimated_profit,
        total_fare=total_fare,
        distance_km=round(distance_km, 3),
        dead_mileage_km=round(dead_mileage_km, 3),
    )
