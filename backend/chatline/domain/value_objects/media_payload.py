"""
MediaPayload Value Object - One inline image or video attached to a message.

The payload is kept exactly as the client encoded it (a ``data:`` URL), so a
message read back from history is byte-identical to what was sent.
"""

import re
from dataclasses import dataclass
from enum import Enum

from chatline.domain.exceptions.validation_error import UnsupportedMediaError

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,")


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaPayload:
    kind: MediaKind
    data: str

    def __post_init__(self):
        match = _DATA_URL_PATTERN.match(self.data or "")
        if not match:
            raise UnsupportedMediaError(
                f"{self.kind.value.capitalize()} must be a base64 data URL."
            )
        if not match.group("mime").startswith(f"{self.kind.value}/"):
            raise UnsupportedMediaError(
                f"Expected an {self.kind.value} payload, got {match.group('mime')}."
                if self.kind is MediaKind.IMAGE
                else f"Expected a {self.kind.value} payload, got {match.group('mime')}."
            )

    @property
    def mime_type(self) -> str:
        return _DATA_URL_PATTERN.match(self.data).group("mime")

    @property
    def encoded_size(self) -> int:
        return len(self.data.encode("utf-8"))
