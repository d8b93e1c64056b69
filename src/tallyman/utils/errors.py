"""
Tallyman Error Types

Typed failures surfaced by the API clients and commands. Every client call
either returns a decoded value or raises exactly one of these.
"""

from typing import Any, Dict, Optional


class TallymanError(Exception):
    """Base exception for all Tallyman errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class RequestFailedError(TallymanError):
    """Raised when the transport fails for a reason other than connectivity."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "REQUEST_FAILED", details)
        self.cause = cause


class ServiceUnavailableError(TallymanError):
    """Raised when the remote service cannot be reached or answers 503."""

    def __init__(
        self,
        message: str,
        base_url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "SERVICE_UNAVAILABLE", details)
        self.base_url = base_url


class HTTPError(TallymanError):
    """Raised for a non-2xx response carrying a decodable error body."""

    def __init__(
        self,
        message: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "HTTP_ERROR", details)
        self.status_code = status_code


class UserValidationFailedError(TallymanError):
    """Raised when the service rejects the caller's identity or credentials."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "USER_VALIDATION_FAILED", details)


class MalformedResponseError(TallymanError):
    """Raised when a response body cannot be decoded."""

    def __init__(
        self,
        message: str,
        body: str = "",
        status: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "MALFORMED_RESPONSE", details)
        self.body = body
        self.status = status


class ValidationError(TallymanError):
    """Raised when local arguments are invalid; no request has been sent."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field
