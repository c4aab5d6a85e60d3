"""
Error types raised by the Tidal client.

``ClientError`` and its subclasses are the recoverable failures of a single
request. ``SessionRequiredError`` and ``ValidationError`` signal programmer
mistakes and are not meant to be caught around API calls.
"""

from typing import Any


class TidalError(Exception):
    """Base error class for all tidal_cli errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class SessionRequiredError(TidalError):
    """A client was built from credentials that carry no session."""


class ValidationError(TidalError):
    """Validation error for local input/data issues (not API errors)."""


# =============================================================================
# Request failures
# =============================================================================


class ClientError(TidalError):
    """A request did not produce the expected result."""

    status: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


class UnauthorizedError(ClientError):
    """HTTP 401. The session is invalid or expired; log in again."""

    status = 401

    def __init__(self, details: dict | None = None):
        super().__init__("request unauthorized", details)


class APIError(ClientError):
    """A structured ``{status, message}`` error body (sent with 403/404)."""

    def __init__(self, status: int, message: str, details: dict | None = None):
        super().__init__(message, details)
        self.status = status

    def __str__(self) -> str:
        return f"{self.status}: {self.message}"


class StatusCodeError(ClientError):
    """Any other non-2xx response, or a 403/404 without a usable body."""

    def __init__(self, status: int, details: dict | None = None):
        super().__init__(f"status code: {status}", details)
        self.status = status


class ParseJSONError(ClientError):
    """The response body did not match the expected shape."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(f"json parse error: {message}", details)


class ParseEtagError(ClientError):
    """The ``etag`` header was missing or not valid header text."""

    def __init__(self, url: str):
        super().__init__("etag header parse error", {"url": url})
        self.url = url


class RequestError(ClientError):
    """The HTTP exchange itself failed (DNS, TLS, connection, timeout)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(f"request error: {message}", details)
