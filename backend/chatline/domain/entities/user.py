"""
User Entity - A chat participant. Online status is derived, never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from chatline.domain.value_objects.user_id import UserId


@dataclass
class User:
    id: UserId
    display_name: str
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.display_name or not self.display_name.strip():
            raise ValueError("Display name cannot be empty")
