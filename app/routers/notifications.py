"""
Notifications router - POST /v1/notifications, GET /v1/notifications[/{id}],
                       POST /v1/notifications/{id}/{accept|reject|start|complete}
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_notification_service
from app.schemas.schemas import (
    NotificationActionEnum, NotificationCreateRequest, NotificationResponse,
)
from app.services.lifecycle import InvalidTransitionError, UnknownNotificationError
from app.services.notifications import NotificationService
from app.services.stores import UnknownDriverError, UnknownRideError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/notifications", tags=["Notifications"])


def _respond(service: NotificationService, notification) -> NotificationResponse:
    return NotificationResponse.from_notification(notification, service.lifecycle.clock())


@router.post("", status_code=status.HTTP_201_CREATED, response_model=NotificationResponse)
async def create_notification(
    payload: NotificationCreateRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Classify, price and score a ride for a driver, then offer it."""
    try:
        notification = await service.create_notification(payload.ride_id, payload.driver_id)
    except (UnknownRideError, UnknownDriverError) as exc:
        logger.warning("Refused notification ride=%s driver=%s: %s", payload.ride_id, payload.driver_id, exc)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return _respond(service, notification)


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    service: NotificationService = Depends(get_notification_service),
):
    return [_respond(service, n) for n in service.list()]


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    try:
        notification = service.get(notification_id)
    except UnknownNotificationError:
        raise HTTPException(status_code=404, detail="Notification not found")
    return _respond(service, notification)


@router.post("/{notification_id}/{action}", response_model=NotificationResponse)
async def apply_action(
    notification_id: str,
    action: NotificationActionEnum,
    service: NotificationService = Depends(get_notification_service),
):
    """Driver action on an offer. Only edges of the lifecycle graph are allowed."""
    handlers = {
        NotificationActionEnum.accept: service.accept,
        NotificationActionEnum.reject: service.reject,
        NotificationActionEnum.start: service.start,
        NotificationActionEnum.complete: service.complete,
    }
    try:
        notification = handlers[action](notification_id)
    except UnknownNotificationError:
        raise HTTPException(status_code=404, detail="Notification not found")
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return _respond(service, notification)
