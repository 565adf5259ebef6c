"""
Ride → driver notification pipeline.

Flow:
  1. Look up ride + driver (unknown ids fail before anything is built)
  2. Resolve ride route, dead mileage and demand/supply signals concurrently
  3. Classify → price → score compatibility
  4. Open the notification in the lifecycle manager and arm its expiry
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta

from app.config import Settings
from app.models.driver import DriverProfile
from app.models.fare import ClassificationResult, CompatibilityResult, FareBreakdown
from app.models.notification import Notification, NotificationStatus
from app.models.ride import RideRequest, RouteEstimate
from app.services.classification import classify
from app.services.compatibility import score_compatibility
from app.services.distance import DistanceResolver, build_resolvers, haversine_km
from app.services.incentives import PointsLedger
from app.services.lifecycle import (
    ExpiryScheduler, LifecycleManager, NotificationStore,
)
from app.services.pricing import compute_fare
from app.services.signals import RideSignalProvider, SignalProvider
from app.services.stores import (
    DriverStore, InMemoryDriverStore, InMemoryRideStore, RideStore, SEED_DRIVERS, SEED_RIDES,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RideQuote:
    ride: RideRequest
    driver: DriverProfile
    route: RouteEstimate
    dead_mileage: RouteEstimate
    classification: ClassificationResult
    fare: FareBreakdown
    compatibility: CompatibilityResult


class NotificationService:
    def __init__(
        self,
        rides: RideStore,
        drivers: DriverStore,
        route_resolver: DistanceResolver,
        dead_mileage_resolver: DistanceResolver,
        signals: SignalProvider,
        lifecycle: LifecycleManager,
        scheduler: ExpiryScheduler,
        ttl_seconds: int = 30,
        platform_fee_percent: float = 0.0,
        fuel_price_per_liter: float = 100.0,
    ):
        self.rides = rides
        self.drivers = drivers
        self.route_resolver = route_resolver
        self.dead_mileage_resolver = dead_mileage_resolver
        self.signals = signals
        self.lifecycle = lifecycle
        self.scheduler = scheduler
        self.ttl_seconds = ttl_seconds
        self.platform_fee_percent = platform_fee_percent
        self.fuel_price_per_liter = fuel_price_per_liter

    @property
    def ledger(self) -> PointsLedger:
        return self.lifecycle.ledger

    async def quote(self, ride_id: str, driver_id: str) -> RideQuote:
        """Price and score a ride for a driver without creating a notification."""
        ride = self.rides.get(ride_id)
        driver = self.drivers.get(driver_id)

        route, dead_mileage, (demand, supply) = await asyncio.gather(
            self.route_resolver.resolve(ride.pickup_coordinates, ride.destination_coordinates),
            self.dead_mileage_resolver.resolve(driver.coordinates, ride.pickup_coordinates),
            self.signals.levels(ride),
        )

        classification = classify(
            demand, supply, pickup_distance_km=haversine_km(driver.coordinates, ride.pickup_coordinates)
        )
        fare = compute_fare(
            ride,
            driver,
            classification,
            distance_km=route.distance_km,
            dead_mileage_km=dead_mileage.distance_km,
            platform_fee_percent=self.platform_fee_percent,
            fuel_price_per_liter=self.fuel_price_per_liter,
        )
        compatibility = score_compatibility(driver, classification, dead_mileage.distance_km)

        logger.info(
            "Quoted ride=%s driver=%s category=%s fare=%d score=%d (route via %s)",
            ride_id, driver_id, classification.category.value, fare.total_fare,
            compatibility.score, route.source,
        )
        return RideQuote(
            ride=ride,
            driver=driver,
            route=route,
            dead_mileage=dead_mileage,
            classification=classification,
            fare=fare,
            compatibility=compatibility,
        )

    async def create_notification(self, ride_id: str, driver_id: str) -> Notification:
        quote = await self.quote(ride_id, driver_id)
        now = self.lifecycle.clock()
        category = quote.classification.category.value

        notification = Notification(
            id=str(uuid.uuid4()),
            ride_id=quote.ride.ride_id,
            driver_id=quote.driver.driver_id,
            pickup=quote.ride.pickup,
            destination=quote.ride.destination,
            message=f"New {category} ride request from {quote.ride.pickup} to {quote.ride.destination}",
            classification=quote.classification,
            fare=quote.fare,
            compatibility=quote.compatibility,
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
            updated_at=now,
            status=NotificationStatus.pending,
        )
        self.lifecycle.open(notification)
        self.scheduler.register(notification)
        return notification

    def get(self, notification_id: str) -> Notification:
        return self.lifecycle.store.get(notification_id)

    def list(self) -> list[Notification]:
        return self.lifecycle.store.all()

    def accept(self, notification_id: str) -> Notification:
        return self.lifecycle.transition(notification_id, NotificationStatus.accepted)

    def reject(self, notification_id: str) -> Notification:
        return self.lifecycle.transition(notification_id, NotificationStatus.rejected)

    def start(self, notification_id: str) -> Notification:
        return self.lifecycle.transition(notification_id, NotificationStatus.started)

    def complete(self, notification_id: str) -> Notification:
        return self.lifecycle.transition(notification_id, NotificationStatus.completed)


def build_notification_service(
    settings: Settings,
    signals: SignalProvider | None = None,
) -> NotificationService:
    """Wire the service from settings with the demo fixture stores."""
    route_resolver, dead_mileage_resolver = build_resolvers(settings)
    lifecycle = LifecycleManager(
        NotificationStore(),
        PointsLedger(),
        points_policy=settings.points_credit_policy,
    )
    return NotificationService(
        rides=InMemoryRideStore(SEED_RIDES),
        drivers=InMemoryDriverStore(SEED_DRIVERS),
        route_resolver=route_resolver,
        dead_mileage_resolver=dead_mileage_resolver,
        signals=signals or RideSignalProvider(),
        lifecycle=lifecycle,
        scheduler=ExpiryScheduler(lifecycle, interval_seconds=settings.expiry_tick_seconds),
        ttl_seconds=settings.notification_ttl_seconds,
        platform_fee_percent=settings.platform_fee_percent,
        fuel_price_per_liter=settings.fuel_price_per_liter,
    )
