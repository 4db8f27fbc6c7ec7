"""
Persistence Layer - Repository implementations.

The in-memory repositories are exported here. The Prisma repositories are
imported from their own modules only when the Prisma store is configured,
since the Prisma client must be generated before it can be imported.
"""

from chatline.infrastructure.persistence.memory_message_repository import (
    InMemoryMessageRepository,
)
from chatline.infrastructure.persistence.memory_user_repository import (
    InMemoryUserRepository,
    load_seed_users,
)

__all__ = [
    "InMemoryMessageRepository",
    "InMemoryUserRepository",
    "load_seed_users",
]
