"""
Prisma User Repository Implementation.

Reads the user directory written by the auth service.
"""

from typing import Optional
from prisma import Prisma
from prisma.errors import PrismaError
from prisma.models import User as PrismaUser
from chatline.domain.entities.user import User
from chatline.domain.exceptions import StoreUnavailableError
from chatline.domain.ports.repositories.user_repository import UserRepository
from chatline.domain.value_objects.user_id import UserId


class PrismaUserRepository(UserRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaUser) -> User:
        return User(
            id=UserId(record.id),
            display_name=record.display_name,
            avatar_url=record.avatar_url,
            email=record.email,
            created_at=record.created_at,
        )

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        try:
            record = await self._prisma.user.find_unique(where={"id": user_id.value})
        except PrismaError as e:
            raise StoreUnavailableError() from e
        return self._to_entity(record) if record else None

    async def list_except(self, user_id: UserId) -> list[User]:
        try:
            records = await self._prisma.user.find_many(
                where={"NOT": {"id": user_id.value}},
                order={"display_name": "asc"},
            )
        except PrismaError as e:
            raise StoreUnavailableError() from e
        return [self._to_entity(record) for record in records]
