"""Roster DTO for the user sidebar."""

from pydantic import BaseModel
from typing import Optional


class RosterEntryDTO(BaseModel):
    id: str
    display_name: str
    avatar_url: Optional[str] = None
    online: bool = False
