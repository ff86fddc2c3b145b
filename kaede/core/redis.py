"""Redis connection for the comment listing cache.

Redis is optional: when it is unreachable at startup the API runs uncached.
"""

import redis.asyncio as redis
import structlog

from kaede.config.settings import Settings


logger = structlog.get_logger(__name__)


class RedisConnection:
    """Process-wide async Redis client."""

    _client: redis.Redis | None = None

    @classmethod
    async def connect(cls, settings: Settings) -> redis.Redis:
        """Open the connection pool and check the server answers.

        Raises:
            redis.RedisError: If the server cannot be reached.
        """
        if cls._client is not None:
            return cls._client

        client = redis.from_url(
            settings.redis_url,
            max_connections=settings.redis_max_connections,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_socket_timeout,
            decode_responses=True,
        )
        try:
            await client.ping()
        except redis.RedisError:
            await client.aclose()
            raise

        cls._client = client
        logger.info("redis_connected", url=settings.redis_url)
        return client

    @classmethod
    async def disconnect(cls) -> None:
        """Close the connection pool."""
        if cls._client is None:
            return

        await cls._client.aclose()
        cls._client = None
        logger.info("redis_disconnected")

    @classmethod
    def is_connected(cls) -> bool:
        """Check if a client is open."""
        return cls._client is not None


def comments_first_page_key(post_id: str) -> str:
    """Cache key for the first page of a post's comments."""
    return f"comments:{post_id}:page:1"
