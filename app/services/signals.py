"""
Demand/supply signal providers.

The ride payload carries its own levels; a market-state service backed by
Redis can override them per pickup zone.
"""
import asyncio
import logging
from typing import Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.models.ride import DemandLevel, RideRequest
from app.redis_client import zone_demand, zone_demand_score, zone_supply

logger = logging.getLogger(__name__)


def level_from_score(score: float) -> DemandLevel:
    """Bucket a 0-1 demand score."""
    if score >= 0.75:
        return DemandLevel.high
    if score >= 0.45:
        return DemandLevel.medium
    return DemandLevel.low


def level_from_count(count: int, medium_threshold: int, high_threshold: int) -> DemandLevel:
    if count >= high_threshold:
        return DemandLevel.high
    if count >= medium_threshold:
        return DemandLevel.medium
    return DemandLevel.low


class SignalProvider(Protocol):
    async def levels(self, ride: RideRequest) -> tuple[DemandLevel, DemandLevel]: ...


class RideSignalProvider:
    """Uses the levels attached to the ride request."""

    async def levels(self, ride: RideRequest) -> tuple[DemandLevel, DemandLevel]:
        return DemandLevel(ride.demand), DemandLevel(ride.supply)


class RedisSignalProvider:
    """
    Reads zone counters from Redis.

    Keys used:
      demand_score:{zone}  - 0-1 demand prediction, preferred when present
      demand:{zone}        - open ride requests in the pickup zone
      drivers:zone:{zone}  - set of available drivers in the pickup zone

    A zone with neither demand key, a Redis failure or an unreadable value
    falls back to the ride's own levels.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        demand_medium_threshold: int = 5,
        demand_high_threshold: int = 15,
        supply_medium_threshold: int = 3,
        supply_high_threshold: int = 10,
        timeout: float = 1.0,
    ):
        self.redis = redis
        self.timeout = timeout
        self.demand_thresholds = (demand_medium_threshold, demand_high_threshold)
        self.supply_thresholds = (supply_medium_threshold, supply_high_threshold)

    async def levels(self, ride: RideRequest) -> tuple[DemandLevel, DemandLevel]:
        try:
            levels = await asyncio.wait_for(self._zone_levels(ride.pickup), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Market state lookup for zone=%s timed out, using ride levels", ride.pickup)
            return DemandLevel(ride.demand), DemandLevel(ride.supply)
        except (RedisError, ValueError) as exc:
            logger.warning("Market state unavailable for zone=%s (%s), using ride levels", ride.pickup, exc)
            return DemandLevel(ride.demand), DemandLevel(ride.supply)

        if levels is None:
            logger.info("No market state for zone=%s, using ride levels", ride.pickup)
            return DemandLevel(ride.demand), DemandLevel(ride.supply)
        return levels

    async def _zone_levels(self, zone: str) -> tuple[DemandLevel, DemandLevel] | None:
        score = await zone_demand_score(self.redis, zone)
        if score is not None:
            demand_level = level_from_score(score)
        else:
            demand = await zone_demand(self.redis, zone)
            if demand is None:
                return None
            demand_level = level_from_count(demand, *self.demand_thresholds)

        supply = await zone_supply(self.redis, zone)
        return demand_level, level_from_count(supply, *self.supply_thresholds)
