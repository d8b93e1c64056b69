"""
Tallyman Utilities Package

Configuration records, error types and logging helpers.
"""

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_TERMS_URL,
    ClientConfig,
    TallymanConfig,
)
from .errors import (
    HTTPError,
    MalformedResponseError,
    RequestFailedError,
    ServiceUnavailableError,
    TallymanError,
    UserValidationFailedError,
    ValidationError,
)

__all__ = [
    "TallymanError",
    "RequestFailedError",
    "ServiceUnavailableError",
    "HTTPError",
    "UserValidationFailedError",
    "MalformedResponseError",
    "ValidationError",
    "ClientConfig",
    "TallymanConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_TERMS_URL",
]
