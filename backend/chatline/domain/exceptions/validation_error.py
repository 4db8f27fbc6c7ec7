"""
DomainValidationError - Raised when a business rule is violated.
Maps to: HTTP 400 Bad Request (415 for UnsupportedMediaError)
"""


class DomainValidationError(Exception):
    """Exception raised for domain validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedMediaError(DomainValidationError):
    """Media payload is not an inline data URL of the declared kind."""
