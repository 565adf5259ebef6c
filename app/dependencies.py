"""
Process-wide engine instance shared by the routers and the lifespan hooks.
"""
from app.config import get_settings
from app.redis_client import get_redis
from app.services.notifications import NotificationService, build_notification_service
from app.services.signals import RedisSignalProvider

_service: NotificationService | None = None


def get_notification_service() -> NotificationService:
    global _service
    if _service is None:
        _service = build_notification_service(get_settings())
    return _service


async def use_redis_signals(service: NotificationService) -> None:
    """Switch the service to Redis market-state signals."""
    settings = get_settings()
    service.signals = RedisSignalProvider(
        await get_redis(),
        demand_medium_threshold=settings.demand_medium_threshold,
        demand_high_threshold=settings.demand_high_threshold,
        supply_medium_threshold=settings.supply_medium_threshold,
        supply_high_threshold=settings.supply_high_threshold,
        timeout=settings.redis_timeout_seconds,
    )
