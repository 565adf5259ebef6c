import redis.asyncio as aioredis
from app.config import get_settings

settings = get_settings()

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=20,
            socket_timeout=settings.redis_timeout_seconds,
            socket_connect_timeout=settings.redis_timeout_seconds,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None


# ---------------------------------------------------------------------------
# Market-state helpers
# ---------------------------------------------------------------------------

def demand_key(zone: str) -> str:
    return f"demand:{zone}"


def supply_key(zone: str) -> str:
    return f"drivers:zone:{zone}"


def demand_score_key(zone: str) -> str:
    return f"demand_score:{zone}"


async def zone_demand_score(redis: aioredis.Redis, zone: str) -> float | None:
    """Latest 0-1 demand prediction published for a zone."""
    raw = await redis.get(demand_score_key(zone))
    return float(raw) if raw is not None else None


async def zone_demand(redis: aioredis.Redis, zone: str) -> int | None:
    """Open ride requests counted for a zone, or None when nothing is tracked."""
    raw = await redis.get(demand_key(zone))
    return int(raw) if raw is not None else None


async def zone_supply(redis: aioredis.Redis, zone: str) -> int:
    """Available drivers currently registered in a zone."""
    return int(await redis.scard(supply_key(zone)) or 0)
