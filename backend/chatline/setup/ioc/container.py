"""
Dishka DI Container Setup.

- AppProvider: realtime core (APP scope, one per process) and handlers
  (REQUEST scope)
- store providers, chosen by Config.STORE_BACKEND:
    memory → MemoryStoreProvider (single process, dev/tests)
    prisma → PrismaProvider + PrismaMessageProvider
             (CachedPrismaMessageProvider when REDIS_ENABLED)

Dishka concepts:
- Provider: Class that defines how to create dependencies
- @provide: Decorator to mark factory methods
- Scope: Lifecycle of dependency (APP = singleton, REQUEST = per-request)

Flow:
  Container → provides → ConnectionRegistry → to → MessageRouter → to → SendMessageHandler
                                ↑
                      PresenceBroadcaster (change listener)
"""

import logging
from typing import Iterable, Optional

from dishka import Provider, Scope, make_async_container, provide, AsyncContainer
from chatline.application.commands.messages import SendMessageHandler
from chatline.application.queries.messages import GetMessageHistoryHandler
from chatline.application.queries.users import ListRosterHandler
from chatline.application.realtime import (
    ConnectionRegistry,
    MessageRouter,
    PresenceBroadcaster,
    SenderSequencer,
)
from chatline.domain.entities.user import User
from chatline.domain.ports.repositories import MessageRepository, UserRepository
from chatline.infrastructure.persistence import (
    InMemoryMessageRepository,
    InMemoryUserRepository,
    load_seed_users,
)
from chatline.config.settings import Config

logger = logging.getLogger(__name__)


class AppProvider(Provider):
    """
    Application dependency provider.

    Registers the realtime core and the use-case handlers.
    """

    # ==================== REALTIME ====================

    @provide(scope=Scope.APP)
    def get_presence_broadcaster(self) -> PresenceBroadcaster:
        return PresenceBroadcaster()

    @provide(scope=Scope.APP)
    def get_connection_registry(
        self, broadcaster: PresenceBroadcaster
    ) -> ConnectionRegistry:
        """
        Provide the process-wide ConnectionRegistry.

        - Scope.APP = created ONCE, shared by every request and socket
        - Every register/unregister announces presence through the broadcaster
        """
        return ConnectionRegistry(on_change=broadcaster.announce)

    @provide(scope=Scope.APP)
    def get_message_router(self, registry: ConnectionRegistry) -> MessageRouter:
        return MessageRouter(registry)

    @provide(scope=Scope.APP)
    def get_sender_sequencer(self) -> SenderSequencer:
        return SenderSequencer()

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        message_repository: MessageRepository,
        user_repository: UserRepository,
        router: MessageRouter,
        sequencer: SenderSequencer,
    ) -> SendMessageHandler:
        return SendMessageHandler(
            message_repository=message_repository,
            user_repository=user_repository,
            router=router,
            sequencer=sequencer,
        )

    @provide(scope=Scope.REQUEST)
    def get_message_history_handler(
        self, message_repository: MessageRepository
    ) -> GetMessageHistoryHandler:
        return GetMessageHistoryHandler(message_repository)

    @provide(scope=Scope.REQUEST)
    def get_list_roster_handler(
        self, user_repository: UserRepository, registry: ConnectionRegistry
    ) -> ListRosterHandler:
        return ListRosterHandler(user_repository, registry)


class MemoryStoreProvider(Provider):
    """
    In-process store. Repositories are APP-scoped because they hold the data.

    Users come from ``users`` if given, else from Config.USER_SEED_FILE.
    """

    def __init__(self, users: Optional[Iterable[User]] = None):
        super().__init__()
        self._users = users

    @provide(scope=Scope.APP)
    def get_message_repository(self) -> MessageRepository:
        return InMemoryMessageRepository()

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        users = self._users
        if users is None:
            users = load_seed_users(Config.USER_SEED_FILE) if Config.USER_SEED_FILE else []
        return InMemoryUserRepository(users)


def build_store_providers(backend: str = Config.STORE_BACKEND) -> list[Provider]:
    if backend == "memory":
        return [MemoryStoreProvider()]
    if backend == "prisma":
        # Imported here: the Prisma client only exists after `prisma generate`
        from chatline.setup.ioc.prisma_store import prisma_store_providers

        return prisma_store_providers(cache_enabled=Config.REDIS_ENABLED)
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def create_container(*store: Provider) -> AsyncContainer:
    """
    Create and configure the DI container.

    - Call this ONCE at app startup
    - Tests pass their own store provider (e.g. MemoryStoreProvider(users=...))
    """
    providers = list(store) or build_store_providers()
    logger.info(
        f"[Container] Store: {', '.join(type(p).__name__ for p in providers)}"
    )
    return make_async_container(AppProvider(), *providers)
