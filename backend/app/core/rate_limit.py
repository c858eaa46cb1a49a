"""
Rate limiting and account lockout backed by Redis.

Counters use INCR with EXPIRE, so each window starts at the first hit.
When Redis is unreachable the checks fail open and log a warning: a cache
outage must not lock every operator out of the console.
"""
import logging
from typing import Optional

from redis.exceptions import RedisError

from app.config import get_settings
from app.database.connections import get_redis_client

logger = logging.getLogger(__name__)


async def check_rate_limit(
    ip: str,
    endpoint: str,
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> bool:
    """
    Check if a request should be rate limited.

    Args:
        ip: Client IP address
        endpoint: Endpoint identifier (e.g., "/auth/login")
        limit: Max requests allowed (defaults to config value)
        window_seconds: Time window in seconds (defaults to config value)

    Returns:
        True if request is allowed, False if rate limited
    """
    settings = get_settings()
    limit = limit or settings.login_rate_limit_attempts
    window_seconds = window_seconds or settings.login_rate_limit_window_seconds

    key = f"ratelimit:{endpoint}:{ip}"
    try:
        redis = await get_redis_client()
        current = await redis.incr(key)
        if current == 1:
            await redis.expire(key, window_seconds)
    except RedisError as e:
        logger.warning("Rate limit check skipped for %s: %s", key, e)
        return True

    return current <= limit


async def increment_failed_login(user_id: str) -> int:
    """
    Increment failed login attempts counter for a user.

    Returns:
        Current number of failed attempts
    """
    settings = get_settings()
    key = f"failed_login:{user_id}"
    try:
        redis = await get_redis_client()
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, settings.user_lockout_duration_minutes * 60)
    except RedisError as e:
        logger.warning("Failed login not recorded for %s: %s", user_id, e)
        return 0
    return count


async def check_user_lockout(user_id: str) -> bool:
    """Return True if the user is locked out after too many failed attempts."""
    try:
        redis = await get_redis_client()
        return bool(await redis.exists(f"lockout:{user_id}"))
    except RedisError as e:
        logger.warning("Lockout check skipped for %s: %s", user_id, e)
        return False


async def set_user_lockout(user_id: str, duration_minutes: int) -> None:
    """Lock out a user for a specified duration."""
    try:
        redis = await get_redis_client()
        await redis.setex(f"lockout:{user_id}", duration_minutes * 60, "1")
    except RedisError as e:
        logger.warning("Lockout not stored for %s: %s", user_id, e)
        return
    logger.info("User %s locked out for %d minutes", user_id, duration_minutes)


async def reset_failed_attempts(user_id: str) -> None:
    """Reset failed login attempts counter after successful login."""
    try:
        redis = await get_redis_client()
        await redis.delete(f"failed_login:{user_id}")
    except RedisError as e:
        logger.warning("Failed login counter not reset for %s: %s", user_id, e)
