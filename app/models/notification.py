from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from app.models.fare import ClassificationResult, CompatibilityResult, FareBreakdown


class NotificationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    started = "started"
    completed = "completed"


@dataclass
class Notification:
    """
    A ride offer shown to one driver.

    Only the lifecycle manager writes `status`, `updated_at` and
    `points_credited`; everything else is fixed at creation.
    """

    id: str
    ride_id: str
    driver_id: str
    pickup: str
    destination: str
    message: str
    classification: ClassificationResult
    fare: FareBreakdown
    compatibility: CompatibilityResult
    created_at: datetime
    expires_at: datetime
    updated_at: datetime
    status: NotificationStatus = NotificationStatus.pending
    points_credited: bool = False

    def seconds_remaining(self, now: datetime) -> int:
        if self.status != NotificationStatus.pending:
            return 0
        return max(0, int((self.expires_at - now).total_seconds()))
