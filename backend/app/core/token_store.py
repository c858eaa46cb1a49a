"""
Revocation list for signed-out access tokens.

A revoked token id is kept in Redis until the token would have expired anyway.
"""
import logging

from redis.exceptions import RedisError

from app.database.connections import get_redis_client

logger = logging.getLogger(__name__)


async def revoke_token(jti: str, ttl_seconds: int) -> bool:
    """
    Mark a token id as revoked.

    Returns:
        False if the revocation could not be stored
    """
    if ttl_seconds <= 0:
        return True
    try:
        redis = await get_redis_client()
        await redis.setex(f"revoked_token:{jti}", ttl_seconds, "1")
    except RedisError as e:
        logger.error("Could not revoke token %s: %s", jti, e)
        return False
    return True


async def is_token_revoked(jti: str) -> bool:
    try:
        redis = await get_redis_client()
        return bool(await redis.exists(f"revoked_token:{jti}"))
    except RedisError as e:
        logger.warning("Revocation check skipped for %s: %s", jti, e)
        return False
