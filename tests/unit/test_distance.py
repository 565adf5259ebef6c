"""
Unit tests for distance resolution and the Mapbox client.
"""
import asyncio

import httpx
import pytest

from app.models.ride import Coordinates
from app.services.distance import (
    DistanceProviderError, DistanceResolver, MapboxDirectionsClient, haversine_km,
)

KORAMANGALA = Coordinates(12.9352, 77.6245)
WHITEFIELD = Coordinates(12.9698, 77.7500)


class FailingProvider:
    async def route(self, origin, destination):
        raise DistanceProviderError("boom")


class SlowProvider:
    async def route(self, origin, destination):
        await asyncio.sleep(1)
        return 10.0, None


class FixedProvider:
    def __init__(self, km, minutes=None):
        self.km = km
        self.minutes = minutes

    async def route(self, origin, destination):
        return self.km, self.minutes


def mapbox(handler, token="test-token") -> MapboxDirectionsClient:
    return MapboxDirectionsClient(
        base_url="https://api.mapbox.test",
        access_token=token,
        transport=httpx.MockTransport(handler),
    )


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(KORAMANGALA, KORAMANGALA) == 0.0

    def test_one_degree_of_latitude(self):
        assert haversine_km(Coordinates(0, 0), Coordinates(1, 0)) == pytest.approx(111.195, rel=1e-3)

    def test_symmetric(self):
        assert haversine_km(KORAMANGALA, WHITEFIELD) == pytest.approx(haversine_km(WHITEFIELD, KORAMANGALA))


@pytest.mark.asyncio
class TestDistanceResolver:
    async def test_routed_distance_is_corrected(self):
        resolver = DistanceResolver(FixedProvider(10.0), route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        assert result.source == "routed"
        assert result.distance_km == pytest.approx(12.0)
        # 12 km at 30 km/h
        assert result.duration_min == pytest.approx(24.0)

    async def test_provider_duration_is_kept(self):
        resolver = DistanceResolver(FixedProvider(10.0, 15.0), route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        assert result.duration_min == 15.0

    async def test_provider_failure_falls_back_to_haversine(self):
        resolver = DistanceResolver(FailingProvider(), route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        expected = haversine_km(KORAMANGALA, WHITEFIELD) * 1.3
        assert result.source == "fallback"
        assert result.distance_km == pytest.approx(expected)
        assert result.duration_min == pytest.approx(expected / 30 * 60)

    async def test_timeout_falls_back(self):
        resolver = DistanceResolver(SlowProvider(), route_correction=1.2, fallback_correction=1.3, timeout=0.01)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        assert result.source == "fallback"

    async def test_no_provider_uses_fallback(self):
        resolver = DistanceResolver(None, route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, KORAMANGALA)
        assert result.distance_km == 0.0
        assert result.duration_min == 0.0

    async def test_http_error_from_mapbox_falls_back(self):
        client = mapbox(lambda request: httpx.Response(503))
        resolver = DistanceResolver(client, route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        assert result.source == "fallback"
        assert result.distance_km == pytest.approx(haversine_km(KORAMANGALA, WHITEFIELD) * 1.3)

    async def test_non_finite_provider_distance_falls_back(self):
        resolver = DistanceResolver(FixedProvider(float("nan")), route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        assert result.source == "fallback"
        assert result.distance_km == pytest.approx(haversine_km(KORAMANGALA, WHITEFIELD) * 1.3)

    async def test_nan_from_mapbox_falls_back(self):
        client = mapbox(lambda r: httpx.Response(200, content=b'{"routes": [{"distance": NaN}]}'))
        resolver = DistanceResolver(client, route_correction=1.2, fallback_correction=1.3)
        result = await resolver.resolve(KORAMANGALA, WHITEFIELD)
        assert result.source == "fallback"
        assert result.distance_km == pytest.approx(haversine_km(KORAMANGALA, WHITEFIELD) * 1.3)


@pytest.mark.asyncio
class TestMapboxDirectionsClient:
    async def test_parses_route(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"routes": [{"distance": 12000, "duration": 1200}]})

        km, minutes = await mapbox(handler).route(KORAMANGALA, WHITEFIELD)
        assert km == pytest.approx(12.0)
        assert minutes == pytest.approx(20.0)
        assert "/directions/v5/mapbox/driving-traffic/77.6245,12.9352;77.75,12.9698" in seen["url"]
        assert "access_token=test-token" in seen["url"]

    async def test_missing_token(self):
        with pytest.raises(DistanceProviderError):
            await mapbox(lambda r: httpx.Response(200, json={}), token="").route(KORAMANGALA, WHITEFIELD)

    async def test_http_error(self):
        with pytest.raises(DistanceProviderError, match="401"):
            await mapbox(lambda r: httpx.Response(401)).route(KORAMANGALA, WHITEFIELD)

    async def test_no_routes(self):
        with pytest.raises(DistanceProviderError):
            await mapbox(lambda r: httpx.Response(200, json={"routes": []})).route(KORAMANGALA, WHITEFIELD)

    async def test_malformed_route(self):
        with pytest.raises(DistanceProviderError):
            await mapbox(lambda r: httpx.Response(200, json={"routes": [{}]})).route(KORAMANGALA, WHITEFIELD)

    async def test_non_json_body(self):
        with pytest.raises(DistanceProviderError):
            await mapbox(lambda r: httpx.Response(200, text="<html>")).route(KORAMANGALA, WHITEFIELD)

    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        with pytest.raises(DistanceProviderError, match="timeout"):
            await mapbox(handler).route(KORAMANGALA, WHITEFIELD)

    @pytest.mark.parametrize(
        "body",
        [
            b'{"routes": [{"distance": NaN}]}',
            b'{"routes": [{"distance": Infinity}]}',
            b'{"routes": [{"distance": 12000, "duration": NaN}]}',
            b'{"routes": [{"distance": ' + b"9" * 400 + b"}]}",
        ],
    )
    async def test_non_finite_or_oversized_distance(self, body):
        with pytest.raises(DistanceProviderError):
            await mapbox(lambda r: httpx.Response(200, content=body)).route(KORAMANGALA, WHITEFIELD)
