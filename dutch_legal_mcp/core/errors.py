"""Error taxonomy for the retrieval layer.

Every failure the transport, decoder or mapper can produce is a subclass of
:class:`CaseLawError` and carries a stable ``code`` so callers can branch on
the kind of failure without string matching.
"""

from __future__ import annotations

from typing import Any


class CaseLawError(Exception):
    """Base class for all retrieval errors"""

    code = "case_law_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def retryable(self) -> bool:
        return False


class InvalidTarget(CaseLawError):
    """Base address or path could not be turned into a request URL"""

    code = "invalid_target"


class NetworkError(CaseLawError):
    """Connection, DNS or timeout failure"""

    code = "network_error"

    @property
    def retryable(self) -> bool:
        return True


class HttpError(CaseLawError):
    """Non-2xx response from the provider"""

    code = "http_error"

    def __init__(self, message: str, status: int, **details: Any):
        super().__init__(message, status=status, **details)
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.status == 429 or 500 <= self.status <= 599


class ResponseError(CaseLawError):
    """Provider answered, but the response could not be consumed"""

    code = "response_error"


class ParseError(CaseLawError):
    """Payload is not well-formed markup"""

    code = "parse_error"


class MappingError(CaseLawError):
    """Payload is well-formed but the expected envelope is missing"""

    code = "mapping_error"


class ValidationError(CaseLawError):
    """Tool or API input failed validation"""

    code = "validation_error"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, field=field)
        self.field = field


def error_to_message(error: BaseException) -> str:
    """Render an error as a user-facing message"""
    if isinstance(error, ValidationError):
        return f"Validation error: {error.message}"
    if isinstance(error, HttpError):
        return f"API error (HTTP {error.status}): {error.message}"
    if isinstance(error, CaseLawError):
        return f"API error: {error.message}"
    return f"An unexpected error occurred: {error}"
