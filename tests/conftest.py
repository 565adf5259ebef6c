"""Shared fixtures: a controllable clock, a canned routing provider, and service wiring."""
from datetime import datetime, timedelta, timezone

import pytest

from app.models.fare import ClassificationResult, CompatibilityResult, FareBreakdown, RideCategory
from app.models.notification import Notification
from app.models.ride import Coordinates
from app.services.distance import DistanceResolver
from app.services.incentives import PointsLedger
from app.services.lifecycle import ExpiryScheduler, LifecycleManager, NotificationStore
from app.services.notifications import NotificationService
from app.services.signals import RideSignalProvider
from app.services.stores import InMemoryDriverStore, InMemoryRideStore, SEED_DRIVERS, SEED_RIDES


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class StubProvider:
    """Returns `pickup_km` for legs ending at a known pickup, `route_km` otherwise."""

    def __init__(self, route_km: float, pickup_km: float, pickups: set[Coordinates]):
        self.route_km = route_km
        self.pickup_km = pickup_km
        self.pickups = pickups
        self.calls = 0

    async def route(self, origin: Coordinates, destination: Coordinates) -> tuple[float, float | None]:
        self.calls += 1
        if destination in self.pickups:
            return self.pickup_km, None
        return self.route_km, None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_notification(clock):
    counter = {"n": 0}

    def _make(points_earned: int = 1, ttl: int = 30) -> Notification:
        counter["n"] += 1
        now = clock()
        fare = FareBreakdown(
            base_fare=50, distance_fare=225, wait_time_fare=15, surge_total=30,
            fare_incentive_component=22, points_incentive_component=7,
            points_earned=points_earned, demand_multiplier=1.0, fuel_cost=100,
            platform_fee=0, estimated_profit=212, total_fare=312,
            distance_km=15.0, dead_mileage_km=0.0,
        )
        return Notification(
            id=f"notif-{counter['n']}",
            ride_id="5678",
            driver_id="12345",
            pickup="Koramangala",
            destination="Whitefield",
            message="New HD_LS ride request from Koramangala to Whitefield",
            classification=ClassificationResult(RideCategory.HD_LS, "shortage", 30),
            fare=fare,
            compatibility=CompatibilityResult(83, "Suits you", "Excellent"),
            created_at=now,
            expires_at=now + timedelta(seconds=ttl),
            updated_at=now,
        )

    return _make


@pytest.fixture
def make_service(clock):
    def _make(
        provider=None,
        points_policy: str = "on_complete",
        platform_fee_percent: float = 0.0,
        route_correction: float = 1.0,
    ) -> NotificationService:
        lifecycle = LifecycleManager(NotificationStore(), PointsLedger(), points_policy=points_policy, clock=clock)
        return NotificationService(
            rides=InMemoryRideStore(SEED_RIDES),
            drivers=InMemoryDriverStore(SEED_DRIVERS),
            route_resolver=DistanceResolver(provider, route_correction=route_correction, fallback_correction=1.3),
            dead_mileage_resolver=DistanceResolver(provider, route_correction=1.0, fallback_correction=1.3),
            signals=RideSignalProvider(),
            lifecycle=lifecycle,
            scheduler=ExpiryScheduler(lifecycle, interval_seconds=0.01),
            ttl_seconds=30,
            platform_fee_percent=platform_fee_percent,
        )

    return _make


@pytest.fixture
def stub_provider() -> StubProvider:
    pickups = {ride.pickup_coordinates for ride in SEED_RIDES}
    return StubProvider(route_km=15.0, pickup_km=2.0, pickups=pickups)
