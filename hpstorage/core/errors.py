"""
Exception hierarchy for the storage client.

Everything the library raises on its own derives from StorageError, so
callers can catch one type. Transport failures from httpx are the
exception: they pass through untouched (see the dispatcher).
"""

from typing import Optional


class StorageError(Exception):
    """Base class for errors raised by this library."""
    pass


class ConfigurationError(StorageError):
    """Raised when a required setting is missing or invalid."""
    pass


class AuthenticationError(StorageError):
    """Raised when the identity service call fails."""
    pass


class InvalidArgument(StorageError, ValueError):
    """Raised for a malformed permission code or signing method."""
    pass


class NotFound(StorageError):
    """
    Raised when a container or object does not exist.

    When translated from a 404 response, the original httpx error is kept
    on `error` along with its request and response so callers can still
    inspect the payload.
    """

    def __init__(
        self,
        message: str,
        error: Optional[Exception] = None,
        request=None,
        response=None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.request = request
        self.response = response

    @classmethod
    def from_http_error(cls, error) -> "NotFound":
        """Build a NotFound carrying an httpx.HTTPStatusError's payload."""
        return cls(
            str(error),
            error=error,
            request=getattr(error, "request", None),
            response=getattr(error, "response", None),
        )
