"""
Cache Layer - Redis caching implementations.

Contains async Redis client and cached repository decorators.
"""

from chatline.infrastructure.cache.redis_client import (
    create_redis_client,
    close_redis_client,
)
from chatline.infrastructure.cache.cached_message_repository import (
    CachedMessageRepository,
)

__all__ = [
    "create_redis_client",
    "close_redis_client",
    "CachedMessageRepository",
]
