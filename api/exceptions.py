"""
API Exceptions
Errors raised by the DirectDigital client
"""

from typing import Any, Optional


class ApiError(Exception):
    """
    Raised when a request completes but the API reports failure

    A response is a failure when its HTTP status is outside [200, 300) or
    its body carries a truthy 'code' field, which the partner API uses for
    application-level errors even on HTTP 200.

    Args:
        message: '<status> - <url> failed'
        status_code: HTTP status of the response
        body_meta: Raw parsed response body, kept for diagnostics
    """

    def __init__(self, message: str, status_code: int, body_meta: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body_meta = body_meta

    def __repr__(self):
        return f"ApiError(status={self.status_code}, message={self.message!r})"
