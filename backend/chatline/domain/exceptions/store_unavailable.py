"""
StoreUnavailableError - Raised when the message/user store cannot be reached.
Maps to: HTTP 503 Service Unavailable
"""


class StoreUnavailableError(Exception):
    def __init__(self, message: str = "Message store is unavailable."):
        super().__init__(message)
