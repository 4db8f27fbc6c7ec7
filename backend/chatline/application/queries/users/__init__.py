"""User queries."""

from chatline.application.queries.users.list_roster import (
    ListRosterQuery,
    ListRosterHandler,
)

__all__ = [
    "ListRosterQuery",
    "ListRosterHandler",
]
