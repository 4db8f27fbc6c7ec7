"""
ListRoster Query - Every other user, with online status from the registry.
"""

from dataclasses import dataclass

from chatline.application.common.interfaces import Query, QueryHandler
from chatline.application.dto.user import RosterEntryDTO
from chatline.application.realtime.registry import ConnectionRegistry
from chatline.domain.ports.repositories import UserRepository
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListRosterQuery(Query[list[RosterEntryDTO]]):
    user_id: UserId


class ListRosterHandler(QueryHandler[list[RosterEntryDTO]]):
    def __init__(self, user_repository: UserRepository, registry: ConnectionRegistry):
        self._user_repository = user_repository
        self._registry = registry

    async def execute(self, query: ListRosterQuery) -> list[RosterEntryDTO]:
        users = await self._user_repository.list_except(query.user_id)
        return [
            RosterEntryDTO(
                id=user.id.value,
                display_name=user.display_name,
                avatar_url=user.avatar_url,
                online=self._registry.is_online(user.id),
            )
            for user in users
        ]
