"""
Surge incentive split and the loyalty-points ledger.

75% of the surge is paid out with the fare, 25% becomes points at
10 INR = 1 point (rounded half up).
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from math import floor

from app.models.fare import IncentiveSplit

logger = logging.getLogger(__name__)

FARE_SHARE = Decimal("0.75")
POINTS_SHARE = Decimal("0.25")
INR_PER_POINT = 10
# Shown to drivers as a goal; nothing here enforces it
REWARD_THRESHOLD_POINTS = 10


def round_half_up(value: float | Decimal) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def allocate_incentive(surge_total: int) -> IncentiveSplit:
    surge = Decimal(max(int(surge_total), 0))
    fare_component = floor(surge * FARE_SHARE)
    points_component = floor(surge * POINTS_SHARE)
    points_earned = round_half_up(Decimal(points_component) / INR_PER_POINT)
    return IncentiveSplit(
        fare_component=fare_component,
        points_component=points_component,
        points_earned=points_earned,
    )


@dataclass(frozen=True)
class PointsEvent:
    notification_id: str
    driver_id: str
    points: int
    credited_at: datetime


class PointsLedger:
    """Process-wide running points total."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._events: list[PointsEvent] = []

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def events(self) -> list[PointsEvent]:
        with self._lock:
            return list(self._events)

    def credit(
        self,
        notification_id: str,
        driver_id: str,
        points: int,
        at: datetime | None = None,
    ) -> PointsEvent:
        event = PointsEvent(
            notification_id=notification_id,
            driver_id=driver_id,
            points=points,
            credited_at=at or datetime.now(timezone.utc),
        )
        with self._lock:
            self._total += points
            self._events.append(event)
            total = self._total
        logger.info(
            "Credited %d points for notification=%s driver=%s (total=%d)",
            points, notification_id, driver_id, total,
        )
        return event
