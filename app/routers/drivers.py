"""
Drivers router - GET /v1/drivers/{id}, GET /v1/points
"""
from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_notification_service
from app.schemas.schemas import DriverOut, PointsResponse
from app.services.incentives import REWARD_THRESHOLD_POINTS
from app.services.notifications import NotificationService
from app.services.stores import UnknownDriverError

router = APIRouter(tags=["Drivers"])


@router.get("/v1/drivers/{driver_id}", response_model=DriverOut)
async def get_driver(
    driver_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    try:
        driver = service.drivers.get(driver_id)
    except UnknownDriverError:
        raise HTTPException(status_code=404, detail="Driver not found")
    return DriverOut.from_driver(driver)


@router.get("/v1/points", response_model=PointsResponse)
async def get_points(service: NotificationService = Depends(get_notification_service)):
    """Running loyalty-points total and the individual credits behind it."""
    return PointsResponse.from_ledger(service.ledger.total, REWARD_THRESHOLD_POINTS, service.ledger.events)
