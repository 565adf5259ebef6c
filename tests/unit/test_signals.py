"""
Unit tests for demand/supply signal providers.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.models.ride import DemandLevel
from app.services.signals import (
    RedisSignalProvider, RideSignalProvider, level_from_count, level_from_score,
)
from app.services.stores import SEED_RIDES

RIDE = SEED_RIDES[0]  # Koramangala, high demand / low supply


def mock_redis(values: dict, drivers: int = 0) -> AsyncMock:
    redis = AsyncMock()
    redis.get = AsyncMock(side_effect=lambda key: values.get(key))
    redis.scard = AsyncMock(return_value=drivers)
    return redis


class TestLevelBuckets:
    @pytest.mark.parametrize(
        "score,level",
        [(0.9, DemandLevel.high), (0.75, DemandLevel.high), (0.6, DemandLevel.medium),
         (0.45, DemandLevel.medium), (0.3, DemandLevel.low), (0.0, DemandLevel.low)],
    )
    def test_from_score(self, score, level):
        assert level_from_score(score) == level

    def test_from_count(self):
        assert level_from_count(0, 5, 15) == DemandLevel.low
        assert level_from_count(5, 5, 15) == DemandLevel.medium
        assert level_from_count(15, 5, 15) == DemandLevel.high


@pytest.mark.asyncio
class TestSignalProviders:
    async def test_ride_levels(self):
        assert await RideSignalProvider().levels(RIDE) == (DemandLevel.high, DemandLevel.low)

    async def test_redis_counters(self):
        redis = mock_redis({"demand:Koramangala": "7"}, drivers=1)
        provider = RedisSignalProvider(redis)
        assert await provider.levels(RIDE) == (DemandLevel.medium, DemandLevel.low)
        redis.scard.assert_awaited_once_with("drivers:zone:Koramangala")

    async def test_demand_score_preferred_over_counter(self):
        redis = mock_redis({"demand_score:Koramangala": "0.8", "demand:Koramangala": "1"}, drivers=12)
        provider = RedisSignalProvider(redis)
        assert await provider.levels(RIDE) == (DemandLevel.high, DemandLevel.high)

    async def test_no_market_state_uses_ride_levels(self):
        provider = RedisSignalProvider(mock_redis({}, drivers=50))
        assert await provider.levels(RIDE) == (DemandLevel.high, DemandLevel.low)

    async def test_redis_down_uses_ride_levels(self):
        redis = AsyncMock()
        redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        provider = RedisSignalProvider(redis)
        assert await provider.levels(RIDE) == (DemandLevel.high, DemandLevel.low)

    async def test_unreadable_score_uses_ride_levels(self):
        provider = RedisSignalProvider(mock_redis({"demand_score:Koramangala": "abc"}, drivers=12))
        assert await provider.levels(RIDE) == (DemandLevel.high, DemandLevel.low)

    async def test_hung_redis_uses_ride_levels(self):
        async def hang(key):
            await asyncio.sleep(1)

        redis = AsyncMock()
        redis.get = AsyncMock(side_effect=hang)
        provider = RedisSignalProvider(redis, timeout=0.01)
        assert await provider.levels(RIDE) == (DemandLevel.high, DemandLevel.low)
