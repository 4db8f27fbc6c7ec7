"""
Prisma (PostgreSQL) store providers.

The Prisma client is APP-scoped: connected once at startup and disconnected
when the container closes. Repositories are REQUEST-scoped wrappers around it.
Exactly one of the two message providers is registered.
"""

from typing import AsyncIterable

from dishka import Provider, Scope, provide
from prisma import Prisma
from redis.asyncio import Redis

from chatline.domain.ports.repositories import MessageRepository, UserRepository
from chatline.infrastructure.cache import (
    CachedMessageRepository,
    close_redis_client,
    create_redis_client,
)
from chatline.infrastructure.persistence.prisma_message_repository import (
    PrismaMessageRepository,
)
from chatline.infrastructure.persistence.prisma_user_repository import (
    PrismaUserRepository,
)


class PrismaProvider(Provider):
    # ==================== DATABASE ====================

    @provide(scope=Scope.APP)
    async def get_prisma(self) -> AsyncIterable[Prisma]:
        prisma = Prisma()
        await prisma.connect()
        yield prisma
        await prisma.disconnect()

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, prisma: Prisma) -> UserRepository:
        return PrismaUserRepository(prisma)


class PrismaMessageProvider(Provider):
    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, prisma: Prisma) -> MessageRepository:
        return PrismaMessageRepository(prisma)


class CachedPrismaMessageProvider(Provider):
    """Pair history read through Redis."""

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterable[Redis]:
        client = await create_redis_client()
        yield client
        await close_redis_client(client)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, prisma: Prisma, redis: Redis) -> MessageRepository:
        return CachedMessageRepository(PrismaMessageRepository(prisma), redis)


def prisma_store_providers(cache_enabled: bool) -> list[Provider]:
    messages = CachedPrismaMessageProvider() if cache_enabled else PrismaMessageProvider()
    return [PrismaProvider(), messages]
