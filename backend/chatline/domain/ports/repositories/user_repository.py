"""
User Repository Port - Read access to the user directory.
Users are created by the auth service; this core only reads them.
"""

from abc import ABC, abstractmethod
from typing import Optional
from chatline.domain.entities.user import User
from chatline.domain.value_objects.user_id import UserId


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]: ...

    @abstractmethod
    async def list_except(self, user_id: UserId) -> list[User]: ...
