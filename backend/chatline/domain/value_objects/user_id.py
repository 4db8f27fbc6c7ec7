"""
UserId Value Object - Opaque, stable user identity issued at signup.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserId:
    value: str  # user_id

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("UserId cannot be empty")
        if any(ch.isspace() for ch in self.value):
            raise ValueError(f"Invalid user ID: {self.value!r}")

    def __str__(self) -> str:
        return self.value
