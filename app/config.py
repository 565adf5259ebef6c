from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "Driver Fare & Ride-Classification Engine"
    env: str = "development"

    # Redis (only used when signal_source == "redis")
    redis_url: str = "redis://localhost:6379/0"
    redis_timeout_seconds: float = 1.0

    # New Relic
    new_relic_license_key: str = ""
    new_relic_app_name: str = "Driver-Fare-Engine"

    # Routing provider (Mapbox Directions)
    mapbox_base_url: str = "https://api.mapbox.com"
    mapbox_access_token: str = ""
    mapbox_profile: str = "driving-traffic"
    distance_timeout_seconds: float = 5.0

    # Distance correction factors
    route_correction_factor: float = 1.2
    fallback_correction_factor: float = 1.3
    dead_mileage_correction_factor: float = 1.0
    urban_speed_kmh: float = 30.0

    # Fare
    platform_fee_percent: float = 0.0
    fuel_price_per_liter: float = 100.0

    # Notifications
    notification_ttl_seconds: int = 30
    expiry_tick_seconds: float = 1.0
    points_credit_policy: Literal["on_create", "on_complete"] = "on_complete"

    # Demand / supply signals
    signal_source: Literal["ride", "redis"] = "ride"
    demand_medium_threshold: int = 5
    demand_high_threshold: int = 15
    supply_medium_threshold: int = 3
    supply_high_threshold: int = 10


@lru_cache
def get_settings() -> Settings:
    return Settings()
