"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class GetMessageHistoryQuery(Query[list[Message]]):
        user_id: UserId
        peer_id: UserId

    class GetMessageHistoryHandler(QueryHandler[list[Message]]):
        def __init__(self, message_repository: MessageRepository):
            self._message_repository = message_repository

        async def execute(self, query: GetMessageHistoryQuery) -> list[Message]:
            return await self._message_repository.get_between(...)
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")


class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass


class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...


class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass


class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
