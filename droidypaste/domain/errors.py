"""
Structured error types for the paste service client.

Each PasteClientError carries a category (for programmatic handling), a
human-readable message (for UI display) and, when the server answered,
the HTTP status code.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    NETWORK = "network"
    SERVER = "server"
    FEATURE_DISABLED = "feature_disabled"
    MISSING_DELETE_TOKEN = "missing_delete_token"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


class PasteClientError(Exception):
    """Base exception for every failure surfaced by the client."""

    category: ErrorCategory = ErrorCategory.UNKNOWN
    default_message: str = "Unknown network error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code!r})"


class ConfigurationError(PasteClientError):
    category = ErrorCategory.CONFIGURATION
    default_message = "Server URL must be configured"


class RequestTimeout(PasteClientError):
    category = ErrorCategory.TIMEOUT
    default_message = "Request timed out after 10 seconds"


class NetworkUnavailable(PasteClientError):
    category = ErrorCategory.NETWORK
    default_message = "Unable to connect to server. Please check your internet connection."


class ServerError(PasteClientError):
    category = ErrorCategory.SERVER

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message, status_code)


class FeatureDisabledError(PasteClientError):
    category = ErrorCategory.FEATURE_DISABLED
    default_message = "Server must expose the list feature (set expose_list = true in the server config)"


class MissingDeleteTokenError(PasteClientError):
    category = ErrorCategory.MISSING_DELETE_TOKEN
    default_message = "Server has no delete token configured (set delete_tokens in the server config)"


class InvalidResponse(PasteClientError):
    category = ErrorCategory.INVALID_RESPONSE
    default_message = "Invalid JSON response from server"


class UnknownError(PasteClientError):
    category = ErrorCategory.UNKNOWN
