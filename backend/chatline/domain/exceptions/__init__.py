"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and caught by
the presentation layer, which maps them to HTTP status codes.
"""

from chatline.domain.exceptions.entity_not_found import EntityNotFoundError
from chatline.domain.exceptions.validation_error import (
    DomainValidationError,
    UnsupportedMediaError,
)
from chatline.domain.exceptions.payload_too_large import PayloadTooLargeError
from chatline.domain.exceptions.store_unavailable import StoreUnavailableError

__all__ = [
    "EntityNotFoundError",
    "DomainValidationError",
    "UnsupportedMediaError",
    "PayloadTooLargeError",
    "StoreUnavailableError",
]
