"""Error taxonomy for the analysis pipeline."""

from __future__ import annotations

from typing import Optional


class CritiqueError(Exception):
    """Base class for every failure surfaced at the submission boundary."""

    error_type = "critique"
    retryable = False


class ConfigurationError(CritiqueError):
    """Missing or invalid configuration, e.g. no API key."""

    error_type = "configuration"


class DocumentReadError(CritiqueError):
    """The uploaded document could not be read or decoded."""

    error_type = "document_read"


class ServiceError(CritiqueError):
    """Network or service-level failure talking to the AI service."""

    error_type = "service"
    retryable = True

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ResponseFormatError(CritiqueError):
    """The service answered, but not with the expected structure."""

    error_type = "response_format"
    retryable = True


def user_message(error: BaseException) -> str:
    """Human-readable message for an error shown to the user."""
    return str(error) or "An unknown error occurred"
