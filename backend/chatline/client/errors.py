"""
Client-side errors.

Each failure mode of a send has its own type so the UI can say something
different for each. A timeout in particular means "unknown outcome": the
server may have persisted the message, so re-fetch history before resending.
"""

from typing import Optional


class ChatClientError(Exception):
    """Base class for client errors."""


class ConnectionLostError(ChatClientError):
    """The realtime connection could not be opened or was closed."""


class RequestTimeoutError(ChatClientError):
    """No response within the timeout."""


class NetworkError(ChatClientError):
    """The request did not reach the server or the response was lost."""


class RequestRejectedError(ChatClientError):
    """The server answered with an error status."""

    def __init__(self, status_code: int, detail: Optional[str] = None):
        super().__init__(f"Request rejected ({status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail


class SendTimeoutError(RequestTimeoutError):
    pass


class SendNetworkError(NetworkError):
    pass


class SendRejectedError(RequestRejectedError):
    pass


class MediaTooLargeError(SendRejectedError):
    """413: encoded media above the server's ceiling."""


class MediaFormatRejectedError(SendRejectedError):
    """415: media is not an image/video data URL the server accepts."""


def describe_send_error(exc: Exception) -> str:
    """User-visible text for a failed send."""
    if isinstance(exc, SendTimeoutError):
        return (
            "Sending timed out. The message may still have been delivered; "
            "refresh the conversation before trying again."
        )
    if isinstance(exc, SendNetworkError):
        return "Network error. Check your connection and try again."
    if isinstance(exc, MediaTooLargeError):
        return "File is too large to send."
    if isinstance(exc, MediaFormatRejectedError):
        return "This file format is not supported."
    if isinstance(exc, SendRejectedError):
        return f"Message was rejected: {exc.detail or 'unknown error'}"
    return "Failed to send message."
