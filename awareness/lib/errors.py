"""
Centralized Error Response Builder for the Awareness Engine.

Provides consistent error codes and messages for the API layer.
The builder returns structured error dicts compatible with the API
response envelope (see awareness.api.schemas).
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Error Code Constants
# =============================================================================

NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"

# =============================================================================
# Message Registry
#
# Maps (error_code, language) -> message string. Falls back to "en" if a
# translation is missing for the requested language.
# =============================================================================

_ERROR_MESSAGES: dict[str, dict[str, str]] = {
    NOT_FOUND: {
        "en": "The requested resource was not found.",
        "de": "Die angeforderte Ressource wurde nicht gefunden.",
    },
    VALIDATION_ERROR: {
        "en": "Invalid input. Please check your request.",
        "de": "Ungueltige Eingabe. Bitte ueberpruefen Sie Ihre Anfrage.",
    },
    INTERNAL_ERROR: {
        "en": "An internal error occurred. Please try again.",
        "de": "Ein interner Fehler ist aufgetreten. Bitte erneut versuchen.",
    },
}

_DEFAULT_LANG = "en"


def get_error_message(code: str, lang: str = "en") -> str:
    """
    Get a message for a given error code.

    Falls back to English if the requested language is not available,
    and to a generic message if the error code is unknown.

    Args:
        code: Error code constant (e.g. VALIDATION_ERROR)
        lang: ISO 639-1 language code

    Returns:
        Message string
    """
    messages = _ERROR_MESSAGES.get(code, {})
    return messages.get(lang, messages.get(_DEFAULT_LANG, "An error occurred."))


def build_error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
    lang: str = "en",
) -> dict[str, Any]:
    """
    Build a structured error dict: {"code": str, "message": str, "details": dict}.

    ``details`` is only present when provided. Without an explicit message
    the registry message for the code and language is used.
    """
    resolved_message = message if message is not None else get_error_message(code, lang)
    error: dict[str, Any] = {
        "code": code,
        "message": resolved_message,
    }
    if details is not None:
        error["details"] = details
    return error


__all__ = [
    "NOT_FOUND",
    "VALIDATION_ERROR",
    "INTERNAL_ERROR",
    "get_error_message",
    "build_error_response",
]
