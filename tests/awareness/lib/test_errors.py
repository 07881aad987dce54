"""
Tests for the error response builder and exception hierarchy.
"""

from __future__ import annotations

from datetime import date

from awareness.lib.errors import (
    INTERNAL_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    build_error_response,
    get_error_message,
)
from awareness.lib.exceptions import (
    AwarenessException,
    ExternalServiceError,
    RecordValidationError,
    ServiceError,
    ValidationError,
)


class TestErrorMessages:

    def test_english_message(self):
        assert get_error_message(NOT_FOUND) == "The requested resource was not found."

    def test_german_message(self):
        assert get_error_message(INTERNAL_ERROR, "de").startswith("Ein interner Fehler")

    def test_unknown_language_falls_back_to_english(self):
        assert get_error_message(VALIDATION_ERROR, "fr") == get_error_message(VALIDATION_ERROR)

    def test_unknown_code_gets_generic_message(self):
        assert get_error_message("NOPE") == "An error occurred."


class TestBuildErrorResponse:

    def test_registry_message_without_details(self):
        assert build_error_response(NOT_FOUND) == {
            "code": NOT_FOUND,
            "message": "The requested resource was not found.",
        }

    def test_explicit_message_and_details(self):
        error = build_error_response(
            VALIDATION_ERROR, message="bad date", details={"index": 3},
        )
        assert error == {"code": VALIDATION_ERROR, "message": "bad date", "details": {"index": 3}}


class TestExceptionHierarchy:

    def test_record_validation_error_is_validation_error(self):
        exc = RecordValidationError(2, date(2026, 1, 5), date(2026, 1, 4))

        assert isinstance(exc, ValidationError)
        assert isinstance(exc, AwarenessException)
        assert "out-of-order date 2026-01-04 at index 2" in str(exc)

    def test_duplicate_date_message(self):
        exc = RecordValidationError(1, date(2026, 1, 5), date(2026, 1, 5))
        assert "duplicate date" in str(exc)

    def test_external_service_error_is_service_error(self):
        assert issubclass(ExternalServiceError, ServiceError)
