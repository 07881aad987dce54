"""
Custom exception hierarchy for the Awareness Engine.

All exceptions inherit from AwarenessException, enabling
catch-all for engine-specific errors while keeping the
ability to catch specific error types.
"""

from __future__ import annotations

from datetime import date


class AwarenessException(Exception):
    """Base exception for all Awareness Engine errors."""


class ConfigurationError(AwarenessException):
    """Missing environment variables or invalid config values."""


class ValidationError(AwarenessException):
    """Input validation, parsing, or type conversion failures."""


class RecordValidationError(ValidationError):
    """A record sequence is not strictly chronological (out of order or duplicate date)."""

    def __init__(self, index: int, previous: date, current: date) -> None:
        self.index = index
        self.previous = previous
        self.current = current
        kind = "duplicate" if previous == current else "out-of-order"
        super().__init__(
            f"Records must be strictly chronological: {kind} date "
            f"{current.isoformat()} at index {index} (previous {previous.isoformat()})"
        )


class SerializationError(AwarenessException):
    """JSON encode/decode, data serialization/deserialization failures."""


class ServiceError(AwarenessException):
    """Service failures (unexpected responses, unavailable collaborators)."""


class ExternalServiceError(ServiceError):
    """External API call failures (generation service, etc.)."""
