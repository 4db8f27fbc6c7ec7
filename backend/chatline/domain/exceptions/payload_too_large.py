"""
PayloadTooLargeError - Raised when encoded media exceeds its size ceiling.
Maps to: HTTP 413 Payload Too Large
"""


class PayloadTooLargeError(Exception):
    def __init__(self, kind: str, size_bytes: int, limit_bytes: int):
        super().__init__(
            f"{kind.capitalize()} is too large: {size_bytes} bytes encoded, "
            f"limit is {limit_bytes} bytes."
        )
        self.kind = kind
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
