from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.models.driver import DriverProfile
from app.models.notification import Notification
from app.models.ride import RideRequest
from app.services.incentives import PointsEvent


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NotificationActionEnum(str, Enum):
    accept = "accept"
    reject = "reject"
    start = "start"
    complete = "complete"


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------

class CoordinatesOut(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ClassificationOut(BaseModel):
    category: str
    reason: str
    surge: int
    proximity_bonus: bool

    model_config = {"from_attributes": True}


class FareBreakdownOut(BaseModel):
    base_fare: int
    distance_fare: int
    wait_time_fare: int
    surge_total: int
    fare_incentive_component: int
    points_incentive_component: int
    points_earned: int
    demand_multiplier: float
    fuel_cost: int
    platform_fee: int
    estimated_profit: int
    total_fare: int
    distance_km: float
    dead_mileage_km: float
    currency: str = "INR"

    model_config = {"from_attributes": True}


class CompatibilityOut(BaseModel):
    score: int = Field(..., ge=0, le=100)
    reason: str
    band: str

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Ride schemas
# ---------------------------------------------------------------------------

class RideOut(BaseModel):
    ride_id: str
    pickup: str
    destination: str
    pickup_coordinates: CoordinatesOut
    destination_coordinates: CoordinatesOut
    demand: str
    supply: str
    time_of_day: str
    direct_distance_km: float
    estimated_wait_minutes: float

    @classmethod
    def from_ride(cls, ride: RideRequest) -> "RideOut":
        return cls(
            ride_id=ride.ride_id,
            pickup=ride.pickup,
            destination=ride.destination,
            pickup_coordinates=CoordinatesOut.model_validate(ride.pickup_coordinates, from_attributes=True),
            destination_coordinates=CoordinatesOut.model_validate(
                ride.destination_coordinates, from_attributes=True
            ),
            demand=ride.demand.value,
            supply=ride.supply.value,
            time_of_day=ride.time_of_day.value,
            direct_distance_km=ride.direct_distance_km,
            estimated_wait_minutes=ride.estimated_wait_minutes,
        )


class QuoteRequest(BaseModel):
    driver_id: str = Field(..., min_length=1)


class QuoteResponse(BaseModel):
    ride_id: str
    driver_id: str
    route_distance_km: float
    route_duration_min: float
    route_source: str
    classification: ClassificationOut
    fare: FareBreakdownOut
    compatibility: CompatibilityOut


# ---------------------------------------------------------------------------
# Driver schemas
# ---------------------------------------------------------------------------

class DriverOut(BaseModel):
    driver_id: str
    name: str
    rating: float
    vehicle_type: str
    experience_years: float
    persona: str
    location: str
    coordinates: CoordinatesOut
    preferred_areas: list[str]
    total_rides: int

    @classmethod
    def from_driver(cls, driver: DriverProfile) -> "DriverOut":
        return cls(
            driver_id=driver.driver_id,
            name=driver.name,
            rating=driver.rating,
            vehicle_type=driver.vehicle_type.value,
            experience_years=driver.experience_years,
            persona=driver.persona.value,
            location=driver.location,
            coordinates=CoordinatesOut.model_validate(driver.coordinates, from_attributes=True),
            preferred_areas=list(driver.preferred_areas),
            total_rides=driver.total_rides,
        )


# ---------------------------------------------------------------------------
# Notification schemas
# ---------------------------------------------------------------------------

class NotificationCreateRequest(BaseModel):
    ride_id: str = Field(..., min_length=1)
    driver_id: str = Field(..., min_length=1)


class NotificationResponse(BaseModel):
    id: str
    ride_id: str
    driver_id: str
    pickup: str
    destination: str
    message: str
    status: str
    classification: ClassificationOut
    fare: FareBreakdownOut
    compatibility: CompatibilityOut
    created_at: datetime
    expires_at: datetime
    updated_at: datetime
    seconds_remaining: int
    points_credited: bool

    @classmethod
    def from_notification(cls, notification: Notification, now: datetime) -> "NotificationResponse":
        return cls(
            id=notification.id,
            ride_id=notification.ride_id,
            driver_id=notification.driver_id,
            pickup=notification.pickup,
            destination=notification.destination,
            message=notification.message,
            status=notification.status.value,
            classification=ClassificationOut(
                category=notification.classification.category.value,
                reason=notification.classification.reason,
                surge=notification.classification.surge,
                proximity_bonus=notification.classification.proximity_bonus,
            ),
            fare=FareBreakdownOut.model_validate(notification.fare),
            compatibility=CompatibilityOut.model_validate(notification.compatibility),
            created_at=notification.created_at,
            expires_at=notification.expires_at,
            updated_at=notification.updated_at,
            seconds_remaining=notification.seconds_remaining(now),
            points_credited=notification.points_credited,
        )


# ---------------------------------------------------------------------------
# Points schemas
# ---------------------------------------------------------------------------

class PointsEventOut(BaseModel):
    notification_id: str
    driver_id: str
    points: int
    credited_at: datetime

    model_config = {"from_attributes": True}


class PointsResponse(BaseModel):
    total: int
    reward_threshold: int
    events: list[PointsEventOut]
    last_event: Optional[PointsEventOut] = None

    @classmethod
    def from_ledger(cls, total: int, threshold: int, events: list[PointsEvent]) -> "PointsResponse":
        out = [PointsEventOut.model_validate(e) for e in events]
        return cls(total=total, reward_threshold=threshold, events=out, last_event=out[-1] if out else None)
