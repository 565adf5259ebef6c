"""
Distance resolution: routed distance from the Mapbox Directions API with a
great-circle fallback.

Flow:
  1. Ask the routing provider for the road distance (bounded timeout)
  2. Scale it by the routed correction factor
  3. On any provider failure → Haversine distance × fallback correction factor
  4. Fill in duration from the assumed urban speed when the provider gave none
"""
import asyncio
import logging
from math import atan2, cos, isfinite, radians, sin, sqrt
from typing import Protocol

import httpx

from app.config import Settings
from app.models.ride import Coordinates, RouteEstimate

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371


class DistanceProviderError(Exception):
    pass


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Straight-line distance in km between two points."""
    phi1, phi2 = radians(origin.latitude), radians(destination.latitude)
    dphi = radians(destination.latitude - origin.latitude)
    dlambda = radians(destination.longitude - origin.longitude)
    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * atan2(sqrt(a), sqrt(1 - a))


class DistanceProvider(Protocol):
    async def route(self, origin: Coordinates, destination: Coordinates) -> tuple[float, float | None]:
        """Returns (distance_km, duration_min or None)."""
        ...


class MapboxDirectionsClient:
    """Client for the Mapbox Directions API."""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        profile: str = "driving-traffic",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.profile = profile
        self.timeout = timeout
        self._transport = transport

    async def route(self, origin: Coordinates, destination: Coordinates) -> tuple[float, float | None]:
        """
        Raises:
            DistanceProviderError: missing token, timeout, HTTP error or bad payload
        """
        if not self.access_token:
            raise DistanceProviderError("Mapbox access token not configured")

        # Mapbox wants lon,lat pairs
        coordinates = (
            f"{origin.longitude},{origin.latitude};"
            f"{destination.longitude},{destination.latitude}"
        )
        url = f"{self.base_url}/directions/v5/mapbox/{self.profile}/{coordinates}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(
                    url,
                    params={"access_token": self.access_token, "overview": "false"},
                )
                response.raise_for_status()
                data = response.json()

                routes = data.get("routes") or []
                if not routes:
                    raise DistanceProviderError("No routes found")

                route = routes[0]
                distance_km = float(route["distance"]) / 1000
                duration = route.get("duration")
                duration_min = float(duration) / 60 if duration is not None else None
                if not isfinite(distance_km) or (duration_min is not None and not isfinite(duration_min)):
                    raise DistanceProviderError(f"Non-finite route values from Mapbox: {route}")
                return distance_km, duration_min

            except httpx.TimeoutException as e:
                raise DistanceProviderError(f"Mapbox timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise DistanceProviderError(f"Mapbox API error: {e.response.status_code}") from e
            except httpx.HTTPError as e:
                raise DistanceProviderError(f"Mapbox request failed: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError, OverflowError) as e:
                raise DistanceProviderError(f"Invalid route payload from Mapbox: {e}") from e


class DistanceResolver:
    def __init__(
        self,
        provider: DistanceProvider | None,
        route_correction: float,
        fallback_correction: float,
        urban_speed_kmh: float = 30.0,
        timeout: float = 5.0,
    ):
        self.provider = provider
        self.route_correction = route_correction
        self.fallback_correction = fallback_correction
        self.urban_speed_kmh = urban_speed_kmh
        self.timeout = timeout

    def estimate_duration(self, distance_km: float) -> float:
        return distance_km / self.urban_speed_kmh * 60

    def fallback(self, origin: Coordinates, destination: Coordinates) -> RouteEstimate:
        distance_km = haversine_km(origin, destination) * self.fallback_correction
        return RouteEstimate(
            distance_km=distance_km,
            duration_min=self.estimate_duration(distance_km),
            source="fallback",
        )

    async def resolve(self, origin: Coordinates, destination: Coordinates) -> RouteEstimate:
        """Never raises: any provider problem resolves to the geometric estimate."""
        if self.provider is None:
            return self.fallback(origin, destination)

        try:
            raw_km, duration_min = await asyncio.wait_for(
                self.provider.route(origin, destination), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Routing provider timed out after %.1fs, using Haversine fallback", self.timeout)
            return self.fallback(origin, destination)
        except DistanceProviderError as exc:
            logger.warning("Routing provider failed (%s), using Haversine fallback", exc)
            return self.fallback(origin, destination)

        if not isfinite(raw_km) or (duration_min is not None and not isfinite(duration_min)):
            logger.warning("Routing provider returned non-finite values, using Haversine fallback")
            return self.fallback(origin, destination)

        distance_km = max(raw_km, 0.0) * self.route_correction
        if duration_min is None:
            duration_min = self.estimate_duration(distance_km)
        return RouteEstimate(distance_km=distance_km, duration_min=duration_min, source="routed")


def build_resolvers(settings: Settings) -> tuple[DistanceResolver, DistanceResolver]:
    """Returns (ride route resolver, dead mileage resolver) sharing one provider."""
    provider = MapboxDirectionsClient(
        base_url=settings.mapbox_base_url,
        access_token=settings.mapbox_access_token,
        profile=settings.mapbox_profile,
        timeout=settings.distance_timeout_seconds,
    )
    route = DistanceResolver(
        provider,
        route_correction=settings.route_correction_factor,
        fallback_correction=settings.fallback_correction_factor,
        urban_speed_kmh=settings.urban_speed_kmh,
        timeout=settings.distance_timeout_seconds,
    )
    dead_mileage = DistanceResolver(
        provider,
        route_correction=settings.dead_mileage_correction_factor,
        fallback_correction=settings.fallback_correction_factor,
        urban_speed_kmh=settings.urban_speed_kmh,
        timeout=settings.distance_timeout_seconds,
    )
    return route, dead_mileage
