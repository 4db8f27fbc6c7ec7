"""
DTOs - Data Transfer Objects

DTOs for transferring data between layers and over the wire:
- message.py → MessageDTO
- user.py    → RosterEntryDTO

Note: These are different from domain entities.
DTOs are for API and WebSocket output, entities are for business logic.
"""

from chatline.application.dto.message import MessageDTO
from chatline.application.dto.user import RosterEntryDTO

__all__ = [
    "MessageDTO",
    "RosterEntryDTO",
]
