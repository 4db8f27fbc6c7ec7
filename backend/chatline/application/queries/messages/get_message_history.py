"""
GetMessageHistory Query - Messages exchanged between the caller and one peer.

This is what the conversation view loads when a peer is selected, and what
clients re-fetch after a reconnect or a send timeout.
"""

from dataclasses import dataclass

from chatline.application.common.interfaces import Query, QueryHandler
from chatline.config.settings import Config
from chatline.domain.entities.message import Message
from chatline.domain.ports.repositories import MessageRepository
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetMessageHistoryQuery(Query[list[Message]]):
    user_id: UserId
    peer_id: UserId
    limit: int = Config.MESSAGE_HISTORY_LIMIT


class GetMessageHistoryHandler(QueryHandler[list[Message]]):
    def __init__(self, message_repository: MessageRepository):
        self._message_repository = message_repository

    async def execute(self, query: GetMessageHistoryQuery) -> list[Message]:
        """
        Returns:
            Latest ``limit`` messages of the pair in persistence order (oldest first)
        """
        return await self._message_repository.get_between(
            query.user_id, query.peer_id, limit=query.limit
        )
