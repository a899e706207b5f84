"""
Error types shared by the proxy routes, connectors and the Streamlit UI.

Errors in this system are HTTP-status driven. A single exception class,
RecipeAPIError, carries a short machine-readable code next to the human
message so the UI can decide what to show:

- RATE_LIMITED (HTTP 429): shown with a retry countdown
- VALIDATION_ERROR (HTTP 400/422): shown as a validation message
- NETWORK_ERROR: backend unreachable, generic retry prompt
- API_ERROR (HTTP 5xx): backend failed, generic retry prompt

There is no recovery logic beyond "show a message and let the user retry".
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Error codes used for UI display."""
    RATE_LIMITED = "RATE_LIMITED"
    NOT_FOUND = "NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    API_ERROR = "API_ERROR"
    UNKNOWN = "UNKNOWN"


def code_for_status(status_code: Optional[int]) -> ErrorCode:
    """
    Map an HTTP status code to an ErrorCode.

    Examples:
        >>> code_for_status(429)
        <ErrorCode.RATE_LIMITED: 'RATE_LIMITED'>
        >>> code_for_status(None)
        <ErrorCode.NETWORK_ERROR: 'NETWORK_ERROR'>
    """
    if status_code is None:
        return ErrorCode.NETWORK_ERROR
    if status_code == 429:
        return ErrorCode.RATE_LIMITED
    if status_code in (400, 422):
        return ErrorCode.VALIDATION_ERROR
    if status_code == 404:
        return ErrorCode.NOT_FOUND
    if status_code in (401, 403):
        return ErrorCode.UNAUTHORIZED
    if status_code >= 500:
        return ErrorCode.API_ERROR
    return ErrorCode.UNKNOWN


class RecipeAPIError(Exception):
    """
    Error raised by connectors and the API client.

    Attributes:
        code: ErrorCode describing the failure category
        message: Human-readable message (also the exception's str())
        details: Optional payload, e.g. the backend's JSON error body
        status_code: HTTP status returned by the remote side, if any
        retry_after: Seconds to wait before retrying (from Retry-After), if known
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Any = None,
        status_code: Optional[int] = None,
        retry_after: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message
        self.details = details
        self.status_code = status_code
        self.retry_after = retry_after

    @classmethod
    def from_status(
        cls,
        status_code: Optional[int],
        message: str,
        details: Any = None,
        retry_after: Optional[str] = None,
    ) -> "RecipeAPIError":
        """Build an error whose code is derived from the HTTP status."""
        return cls(
            code_for_status(status_code),
            message,
            details=details,
            status_code=status_code,
            retry_after=retry_after,
        )

    @property
    def is_rate_limited(self) -> bool:
        return self.code is ErrorCode.RATE_LIMITED

    def to_dict(self) -> dict:
        body = {"code": self.code.value, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r}, status_code={self.status_code!r})"


class NonJSONResponseError(RecipeAPIError):
    """A remote service answered with a body that is not JSON."""
