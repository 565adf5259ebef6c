"""
Ride notification lifecycle.

  pending ──► accepted ──► started ──► completed
     │
     └──► rejected          (driver action, or expiry after the TTL)

Every status write goes through LifecycleManager under one lock, so the
expiry clock and driver actions can never apply a stale transition.
"""
import asyncio
import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from app.models.notification import Notification, NotificationStatus
from app.services.incentives import PointsLedger

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[NotificationStatus, set[NotificationStatus]] = {
    NotificationStatus.pending: {NotificationStatus.accepted, NotificationStatus.rejected},
    NotificationStatus.accepted: {NotificationStatus.started},
    NotificationStatus.started: {NotificationStatus.completed},
    NotificationStatus.rejected: set(),
    NotificationStatus.completed: set(),
}

POINTS_ON_CREATE = "on_create"
POINTS_ON_COMPLETE = "on_complete"


class InvalidTransitionError(Exception):
    """Raised when a status change is not an edge of the lifecycle graph."""
    pass


class UnknownNotificationError(LookupError):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_transition(current: NotificationStatus, target: NotificationStatus) -> bool:
    return target in VALID_TRANSITIONS.get(current, set())


class NotificationStore:
    """Holds every notification ever created; nothing is removed."""

    def __init__(self) -> None:
        self._items: dict[str, Notification] = {}

    def add(self, notification: Notification) -> None:
        self._items[notification.id] = notification

    def get(self, notification_id: str) -> Notification:
        try:
            return self._items[notification_id]
        except KeyError:
            raise UnknownNotificationError(f"Notification {notification_id} not found") from None

    def all(self) -> list[Notification]:
        return sorted(self._items.values(), key=lambda n: n.created_at, reverse=True)

    def pending(self) -> list[Notification]:
        return [n for n in self._items.values() if n.status == NotificationStatus.pending]


class LifecycleManager:
    def __init__(
        self,
        store: NotificationStore,
        ledger: PointsLedger,
        points_policy: str = POINTS_ON_COMPLETE,
        clock: Callable[[], datetime] = utcnow,
    ):
        if points_policy not in (POINTS_ON_CREATE, POINTS_ON_COMPLETE):
            raise ValueError(f"Unknown points policy: {points_policy}")
        self.store = store
        self.ledger = ledger
        self.points_policy = points_policy
        self.clock = clock
        self._lock = threading.Lock()

    def open(self, notification: Notification) -> Notification:
        """Register a freshly built notification as pending."""
        if notification.status != NotificationStatus.pending:
            raise InvalidTransitionError(
                f"New notification {notification.id} must start pending, got {notification.status.value}"
            )
        with self._lock:
            self.store.add(notification)
            if self.points_policy == POINTS_ON_CREATE:
                self._credit_points(notification)
        logger.info(
            "Notification %s opened for ride=%s driver=%s (expires %s)",
            notification.id, notification.ride_id, notification.driver_id,
            notification.expires_at.isoformat(),
        )
        return notification

    def transition(self, notification_id: str, target: NotificationStatus) -> Notification:
        """
        Apply a driver action. Raises InvalidTransitionError for any move that
        is not an edge of the graph; the current status is left untouched.
        """
        target = NotificationStatus(target)
        with self._lock:
            notification = self.store.get(notification_id)
            current = notification.status
            now = self.clock()

            if not is_valid_transition(current, target):
                raise InvalidTransitionError(
                    f"Cannot move notification {notification_id} from {current.value} to {target.value}"
                )
            if (
                current == NotificationStatus.pending
                and target == NotificationStatus.accepted
                and now >= notification.expires_at
            ):
                raise InvalidTransitionError(f"Notification {notification_id} has expired")

            notification.status = target
            notification.updated_at = now
            if target == NotificationStatus.completed and self.points_policy == POINTS_ON_COMPLETE:
                self._credit_points(notification)

        logger.info("Notification %s: %s -> %s", notification_id, current.value, target.value)
        return notification

    def expire(self, notification_id: str, now: datetime | None = None) -> bool:
        """Reject a lapsed pending notification. Returns True only when it did."""
        with self._lock:
            notification = self.store.get(notification_id)
            now = now or self.clock()
            if notification.status != NotificationStatus.pending or now < notification.expires_at:
                return False
            notification.status = NotificationStatus.rejected
            notification.updated_at = now

        logger.info("Notification %s expired without action", notification_id)
        return True

    def _credit_points(self, notification: Notification) -> None:
        # Caller holds the lock
        if notification.points_credited:
            return
        notification.points_credited = True
        points = notification.fare.points_earned
        if points:
            self.ledger.credit(notification.id, notification.driver_id, points, at=self.clock())


class ExpiryScheduler:
    """
    One shared clock for all pending notifications. Each notification
    registers its deadline; every tick rejects the lapsed ones.
    """

    def __init__(self, lifecycle: LifecycleManager, interval_seconds: float = 1.0):
        self.lifecycle = lifecycle
        self.interval_seconds = interval_seconds
        self._deadlines: dict[str, datetime] = {}
        self._lock = threading.Lock()
        self._task: asyncio.Task | None = None

    def register(self, notification: Notification) -> None:
        with self._lock:
            self._deadlines[notification.id] = notification.expires_at

    @property
    def registered(self) -> int:
        with self._lock:
            return len(self._deadlines)

    def tick(self, now: datetime | None = None) -> list[str]:
        """Expire every lapsed registration. Safe to call repeatedly."""
        now = now or self.lifecycle.clock()
        with self._lock:
            due = [nid for nid, deadline in self._deadlines.items() if deadline <= now]

        expired: list[str] = []
        for notification_id in due:
            if self.lifecycle.expire(notification_id, now):
                expired.append(notification_id)
            with self._lock:
                self._deadlines.pop(notification_id, None)

        # Drop registrations already settled by a driver action
        with self._lock:
            for notification_id in list(self._deadlines):
                if self.lifecycle.store.get(notification_id).status != NotificationStatus.pending:
                    del self._deadlines[notification_id]
        return expired

    async def run(self) -> None:
        while True:
            try:
                self.tick()
            except Exception as exc:
                logger.error("Expiry tick failed: %s", exc, exc_info=True)
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
            logger.info("Expiry scheduler started (interval=%.1fs)", self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Expiry scheduler stopped")
