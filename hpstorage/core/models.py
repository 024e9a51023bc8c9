"""
Value objects shared across the client.

These have no dependency on httpx or pydantic. They describe what the
identity service gave us and how we talk to the storage endpoint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlparse

from .errors import ConfigurationError


DEFAULT_PORTS = {"http": 80, "https": 443}


class AuthVersion(str, Enum):
    """Identity flows the client knows how to use."""
    V1 = "v1"  # legacy, endpoints come from settings
    V2 = "v2"  # service catalog


@dataclass(frozen=True)
class Credentials:
    """
    The outcome of authentication.

    Produced once per client and never refreshed. Re-authenticating means
    building a new client.
    """
    endpoint_url: str
    auth_token: str
    cdn_endpoint_url: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """Connection coordinates derived from the storage endpoint URL."""
    host: str
    port: int
    path: str
    scheme: str
    persistent: bool = False
    connection_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_endpoint(
        cls,
        endpoint_url: str,
        persistent: bool = False,
        connection_options: Optional[dict[str, Any]] = None,
    ) -> "Session":
        """
        Split an endpoint URL into a session.

        A URL without an explicit port gets the scheme's default port, so
        URLs built from the session always carry one.
        """
        parsed = urlparse(endpoint_url)
        if not parsed.scheme or not parsed.hostname:
            raise ConfigurationError(f"Invalid storage endpoint: {endpoint_url!r}")

        port = parsed.port or DEFAULT_PORTS.get(parsed.scheme)
        if port is None:
            raise ConfigurationError(
                f"No port in storage endpoint and no default for scheme {parsed.scheme!r}"
            )

        return cls(
            host=parsed.hostname,
            port=port,
            path=parsed.path,
            scheme=parsed.scheme,
            persistent=persistent,
            connection_options=dict(connection_options or {}),
        )

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"


@dataclass
class StorageResponse:
    """
    Response handed back by every storage operation.

    `body` is the decoded JSON value for JSON responses and the raw bytes
    otherwise.
    """
    status_code: int
    headers: Any
    body: Any = b""
