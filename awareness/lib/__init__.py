"""
Lib package for the Awareness Engine.

Contains shared utilities:
- exceptions.py: Exception hierarchy
- errors.py: Error codes and error response builder
- logging.py: structlog configuration
"""

from awareness.lib.errors import (
    INTERNAL_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    build_error_response,
    get_error_message,
)
from awareness.lib.exceptions import (
    AwarenessException,
    ConfigurationError,
    ExternalServiceError,
    RecordValidationError,
    SerializationError,
    ServiceError,
    ValidationError,
)

__all__ = [
    # Errors
    "NOT_FOUND",
    "VALIDATION_ERROR",
    "INTERNAL_ERROR",
    "get_error_message",
    "build_error_response",
    # Exceptions
    "AwarenessException",
    "ConfigurationError",
    "ValidationError",
    "RecordValidationError",
    "SerializationError",
    "ServiceError",
    "ExternalServiceError",
]
