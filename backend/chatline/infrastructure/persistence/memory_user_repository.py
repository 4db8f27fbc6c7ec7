"""
In-memory User Repository.

Users normally come from the auth service's database. For development and
tests the directory is seeded from a list of users or a JSON file:

    [{"id": "alice", "display_name": "Alice", "avatar_url": null}, ...]
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from chatline.domain.entities.user import User
from chatline.domain.ports.repositories.user_repository import UserRepository
from chatline.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


def load_seed_users(path: str) -> list[User]:
    records = json.loads(Path(path).read_text(encoding="utf-8"))
    users = [
        User(
            id=UserId(record["id"]),
            display_name=record.get("display_name") or record["id"],
            avatar_url=record.get("avatar_url"),
            email=record.get("email"),
        )
        for record in records
    ]
    logger.info(f"[Users] Loaded {len(users)} seed users from {path}")
    return users


class InMemoryUserRepository(UserRepository):
    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[str, User] = {user.id.value: user for user in users}

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        return self._users.get(user_id.value)

    async def list_except(self, user_id: UserId) -> list[User]:
        return [
            user
            for key, user in sorted(self._users.items())
            if key != user_id.value
        ]

    def add(self, user: User) -> None:
        self._users[user.id.value] = user
