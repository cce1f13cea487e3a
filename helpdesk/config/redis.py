"""Redis (Celery broker) connectivity check."""

import redis.asyncio as redis

from helpdesk.settings import settings
from helpdesk.utils.logging_config import logger


async def check_redis_connection() -> bool:
    """
    Pings the broker used for notification dispatch.

    Notifications are best-effort, so an unreachable broker is reported
    but does not stop the application.
    """
    try:
        async with redis.from_url(
            str(settings.REDIS_URL), encoding="utf-8", decode_responses=True
        ) as redis_client:
            if await redis_client.ping():
                logger.info("Redis connection successful")
                return True
            logger.warning("Redis connection failed: PING command returned False")
    except Exception as e:
        logger.warning(f"Redis connection error, notifications will not be sent: {e}")
    return False
