# src/common/database/database.py

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.common.config import settings

logger = logging.getLogger(__name__)

def create_redis_client(url: str | None = None) -> Redis:
    """
    Build an asyncio Redis client from settings.

    decode_responses is always on so sorted-set members come back as str.
    """
    return Redis.from_url(
        url or settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
    )

async def connect_to_redis(url: str | None = None) -> Redis:
    """
    Create a client and verify the backing store answers PING.

    Any failure here is fatal to startup and is re-raised after logging.
    """
    client = create_redis_client(url)
    try:
        await client.ping()
    except RedisError as e:
        logger.critical(f"Failed to connect to redis database: {e}")
        await client.aclose()
        raise
    logger.info("Connected to redis database")
    return client

async def close_redis_connection(client: Redis) -> None:
    await client.aclose()
    logger.info("Redis connection closed")
