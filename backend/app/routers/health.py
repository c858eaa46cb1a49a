"""
Liveness and readiness checks.

Readiness covers the console's own MongoDB and Redis. Databases opened by
operators are only counted, never pinged.
"""
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, status

from app.database.connections import get_mongo_client, get_redis_client
from app.services.connection_manager import get_connection_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _ping_mongo():
    client = await get_mongo_client()
    await client.admin.command("ping")


async def _ping_redis():
    redis = await get_redis_client()
    await redis.ping()


DEPENDENCY_PINGS: dict[str, Callable[[], Awaitable[None]]] = {
    "mongodb": _ping_mongo,
    "redis": _ping_redis,
}


async def _check(name: str, ping: Callable[[], Awaitable[None]]) -> str:
    # Any failure, including a missing client, counts as unhealthy
    try:
        await ping()
    except Exception as e:
        logger.warning("Readiness check %s failed: %s", name, e)
        return f"unhealthy: {e}"
    return "healthy"


@router.get("/health", status_code=status.HTTP_200_OK, summary="Liveness check")
async def health_check():
    return {"status": "healthy"}


@router.get("/health/ready", status_code=status.HTTP_200_OK, summary="Readiness check")
async def readiness_check():
    """
    Report each dependency as healthy or unhealthy.

    Always answers 200; status is "degraded" when any check fails.
    """
    checks = {"api": "healthy"}
    for name, ping in DEPENDENCY_PINGS.items():
        checks[name] = await _check(name, ping)

    return {
        "status": "healthy" if all(v == "healthy" for v in checks.values()) else "degraded",
        "checks": checks,
        "open_connections": len(get_connection_manager()),
    }
