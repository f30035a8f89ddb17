"""
One Call Failure Types

Every failure a lookup can produce is an instance of one of these types.
Callers decide whether to retry, log, or abort; nothing here is retried.
"""

from __future__ import annotations


class OneCallError(Exception):
    """Base class for all client failures."""

    failure_category: str = "unknown"

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class MissingApiKey(OneCallError):
    """
    No API key was configured when the lookup was made.

    Raised before any URL is built, so the transport is never touched.
    """

    failure_category = "missing_api_key"

    def __init__(self, message: str = "no API key present") -> None:
        super().__init__(message)


class TransportError(OneCallError):
    """
    The request did not produce a usable body.

    Covers connection failures, timeouts, and non-2xx answers. When the
    upstream did answer, status_code holds its HTTP status.
    """

    failure_category = "transport_failure"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code


class DecodeError(OneCallError):
    """
    The body was not valid JSON or did not match the response shape.

    No partially decoded response is ever returned alongside this error.
    """

    failure_category = "decode_failure"
