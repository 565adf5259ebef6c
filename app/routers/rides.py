"""
Rides router - GET /v1/rides, GET /v1/rides/{id}, POST /v1/rides/{id}/quote
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_notification_service
from app.schemas.schemas import (
    ClassificationOut, CompatibilityOut, FareBreakdownOut, QuoteRequest, QuoteResponse, RideOut,
)
from app.services.notifications import NotificationService
from app.services.stores import UnknownDriverError, UnknownRideError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/rides", tags=["Rides"])


@router.get("", response_model=list[RideOut])
async def list_rides(service: NotificationService = Depends(get_notification_service)):
    return [RideOut.from_ride(r) for r in service.rides.list()]


@router.get("/{ride_id}", response_model=RideOut)
async def get_ride(
    ride_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    try:
        ride = service.rides.get(ride_id)
    except UnknownRideError:
        raise HTTPException(status_code=404, detail="Ride not found")
    return RideOut.from_ride(ride)


@router.post("/{ride_id}/quote", response_model=QuoteResponse)
async def quote_ride(
    ride_id: str,
    payload: QuoteRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Preview fare, classification and compatibility without offering the ride."""
    try:
        quote = await service.quote(ride_id, payload.driver_id)
    except (UnknownRideError, UnknownDriverError) as exc:
        logger.warning("Refused quote ride=%s driver=%s: %s", ride_id, payload.driver_id, exc)
        raise HTTPException(status_code=404, detail=str(exc))

    return QuoteResponse(
        ride_id=quote.ride.ride_id,
        driver_id=quote.driver.driver_id,
        route_distance_km=round(quote.route.distance_km, 3),
        route_duration_min=round(quote.route.duration_min, 1),
        route_source=quote.route.source,
        classification=ClassificationOut(
            category=quote.classification.category.value,
            reason=quote.classification.reason,
            surge=quote.classification.surge,
            proximity_bonus=quote.classification.proximity_bonus,
        ),
        fare=FareBreakdownOut.model_validate(quote.fare),
        compatibility=CompatibilityOut.model_validate(quote.compatibility),
    )
