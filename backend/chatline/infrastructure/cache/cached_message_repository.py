"""
Cached Message Repository - Decorator pattern for Redis caching.

Architecture:
    CachedMessageRepository (decorator)
        ↓ wraps
    PrismaMessageRepository (concrete implementation)
        ↓ implements
    MessageRepository (abstract interface)

Cache Strategy:
- Read-Through: small history reads check the cache first, then the DB
- Invalidate-on-write: create() deletes the pair's key, next read repopulates
- TTL-based expiration as a backstop

Redis Data Structure (LIST):
- Key pattern: "pair:{len(lower_id)}:{lower_id}:{higher_id}:msgs" (same key
  for both directions)
- Each element: JSON string for ONE message, media included
- Order: Position 0 = newest, Position N = oldest
- Always populated with the latest Config.REDIS_CACHE_LIMIT messages, so a
  hit can serve any limit up to that size

Error Handling:
- Cache failures never fail the operation; log a warning and use the DB
"""

import json
import logging
from datetime import datetime
from redis.asyncio import Redis
from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.ports.repositories.message_repository import MessageRepository
from chatline.domain.value_objects.media_payload import MediaKind, MediaPayload
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId
from chatline.config.settings import Config

logger = logging.getLogger(__name__)


class CachedMessageRepository(MessageRepository):
    """
    Decorator: adds Redis caching to MessageRepository.

    Implements the same interface, so callers don't know caching exists.
    """

    def __init__(
        self,
        repo: MessageRepository,
        redis: Redis,
        cache_limit: int = Config.REDIS_CACHE_LIMIT,
        ttl: int = Config.REDIS_CACHE_TTL,
    ):
        """
        Args:
            repo: Underlying MessageRepository implementation (e.g., PrismaMessageRepository)
            redis: Async Redis client for caching
        """
        self._repo = repo
        self._redis = redis
        self._cache_limit = cache_limit
        self._ttl = ttl

    def _cache_key(self, user_a: UserId, user_b: UserId) -> str:
        low, high = sorted((user_a.value, user_b.value))
        # Ids may contain ":"; the length prefix keeps distinct pairs apart
        return f"pair:{len(low)}:{low}:{high}:msgs"

    def _serialize_message(self, message: Message) -> str:
        msg_dict = {
            "id": message.id.value,
            "sender_id": message.sender_id.value,
            "recipient_id": message.recipient_id.value,
            "text": message.text,
            "media_kind": message.media.kind.value if message.media else None,
            "media_data": message.media.data if message.media else None,
            "created_at": message.created_at.isoformat(),
        }
        return json.dumps(msg_dict)

    def _deserialize_message(self, json_str: str) -> Message:
        d = json.loads(json_str)
        media = None
        if d.get("media_kind"):
            media = MediaPayload(kind=MediaKind(d["media_kind"]), data=d["media_data"])
        return Message(
            id=MessageId(d["id"]),
            sender_id=UserId(d["sender_id"]),
            recipient_id=UserId(d["recipient_id"]),
            created_at=datetime.fromisoformat(d["created_at"]),
            text=d.get("text"),
            media=media,
        )

    async def create(self, draft: MessageDraft) -> Message:
        # 1. Write to DB first (source of truth)
        message = await self._repo.create(draft)

        # 2. Invalidate the pair's cached history (best effort)
        cache_key = self._cache_key(draft.sender_id, draft.recipient_id)
        try:
            await self._redis.delete(cache_key)
            logger.debug(f"Cache INVALIDATED for {cache_key}")
        except Exception as e:
            logger.warning(f"Redis cache invalidation error for {cache_key}: {str(e)}")
        return message

    async def get_between(
        self, user_a: UserId, user_b: UserId, limit: int
    ) -> list[Message]:
        """
        Returns:
            List of Message entities (oldest first, chronological order)
        """
        if limit > self._cache_limit:
            logger.debug(
                f"Limit {limit} > cache limit {self._cache_limit}, bypassing cache"
            )
            return await self._repo.get_between(user_a, user_b, limit)

        cache_key = self._cache_key(user_a, user_b)

        # 1. Try cache first (fast path)
        try:
            cached_json_list = await self._redis.lrange(cache_key, 0, limit - 1)
            if cached_json_list:
                logger.debug(f"Cache HIT for {cache_key}")
                messages = [
                    self._deserialize_message(json_str) for json_str in cached_json_list
                ]
                # lrange returns [newest, ..., oldest]
                messages.reverse()
                return messages
        except Exception as e:
            logger.warning(f"Redis cache read error for {cache_key}: {str(e)}")

        # 2. Cache miss - fetch a full cache window from DB
        logger.debug(f"Cache MISS for {cache_key}")
        messages = await self._repo.get_between(user_a, user_b, self._cache_limit)

        # 3. Populate cache (best effort), newest at position 0
        try:
            if messages:
                await self._redis.delete(cache_key)
                json_strings = [
                    self._serialize_message(msg) for msg in reversed(messages)
                ]
                await self._redis.rpush(cache_key, *json_strings)
                await self._redis.expire(cache_key, self._ttl)
                logger.debug(f"Cache POPULATED for {cache_key}")
        except Exception as e:
            logger.warning(f"Redis cache write error for {cache_key}: {str(e)}")

        return messages[-limit:] if limit > 0 else []
