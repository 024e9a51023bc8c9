"""
Object storage client for containers and objects.

The real client authenticates once at construction, derives a session from
the storage endpoint and sends every operation through the request
dispatcher. Operations themselves are thin: each one is a verb, a path and
the statuses it expects.

A mock client with the same interface lives in `mock.py`; use
`create_storage_client` to pick one.
"""

import logging
import time
from typing import Any, Callable, Optional, Protocol, Sequence

from ...config.settings import Settings, get_settings
from ...core.acl import AclHeaderPair
from ...core.models import Credentials, Session, StorageResponse
from ...core.urls import escape
from ..http.dispatcher import RequestDispatcher
from ..identity.resolver import CredentialResolver
from .base import BaseStorageClient, CDNFactory, guess_content_type
from .mock import MockStorageClient, MockStore

logger = logging.getLogger(__name__)


class StorageClient(Protocol):
    """
    Protocol for storage operations.

    Both HPStorageClient and MockStorageClient satisfy it, so code written
    against it runs unchanged in tests.
    """

    def head_containers(self) -> StorageResponse:
        ...

    def get_containers(self, options: Optional[dict[str, Any]] = None) -> StorageResponse:
        ...

    def get_container(self, container: str, options: Optional[dict[str, Any]] = None) -> StorageResponse:
        ...

    def head_container(self, container: str) -> StorageResponse:
        ...

    def put_container(self, container: str, headers: Optional[dict[str, str]] = None) -> StorageResponse:
        ...

    def delete_container(self, container: str) -> StorageResponse:
        ...

    def get_object(self, container: str, obj: str) -> StorageResponse:
        ...

    def head_object(self, container: str, obj: str) -> StorageResponse:
        ...

    def put_object(
        self,
        container: str,
        obj: str,
        data: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> StorageResponse:
        ...

    def delete_object(self, container: str, obj: str) -> StorageResponse:
        ...

    def get_object_temp_url(
        self,
        container: str,
        obj: str,
        expires_secs: int,
        method: str = "GET",
    ) -> Optional[str]:
        ...

    def set_container_acl(
        self,
        container: str,
        perm: str,
        users: Optional[Sequence[str]] = None,
    ) -> StorageResponse:
        ...

    def get_container_acl(self, container: str) -> AclHeaderPair:
        ...


class HPStorageClient(BaseStorageClient):
    """
    Storage client backed by a real endpoint.

    Credentials are resolved exactly once, here. There is no background
    refresh: when the token expires, build a new client.
    """

    def __init__(
        self,
        settings: Settings,
        resolver: Optional[CredentialResolver] = None,
        cdn_factory: Optional[CDNFactory] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        resolver = resolver or CredentialResolver()
        credentials = resolver.resolve(settings.hp_auth_version, settings)

        super().__init__(
            settings,
            storage_uri=credentials.endpoint_url,
            cdn_uri=credentials.cdn_endpoint_url,
            cdn_factory=cdn_factory,
            clock=clock,
        )
        self._credentials = credentials
        self._session = Session.from_endpoint(
            credentials.endpoint_url,
            persistent=settings.persistent,
            connection_options=settings.connection_options,
        )
        self._dispatcher = RequestDispatcher(
            self._session,
            credentials.auth_token,
            user_agent=settings.user_agent,
        )

        logger.info(
            "Initialized storage client",
            extra={
                "endpoint": self._session.url,
                "persistent": self._session.persistent,
            }
        )

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def session(self) -> Session:
        return self._session

    def reload(self) -> None:
        """Recreate the underlying connection."""
        self._dispatcher.reload()

    def close(self) -> None:
        self._dispatcher.close()

    def request(self, params: dict[str, Any], parse_json: bool = True) -> StorageResponse:
        return self._dispatcher.request(params, parse_json)

    # -----------------------------------------------------------------------
    # Account
    # -----------------------------------------------------------------------

    def head_containers(self) -> StorageResponse:
        """Account metadata: container count and bytes used, in headers."""
        return self.request({
            "method": "HEAD",
            "path": "",
            "expects": [204],
        })

    def get_containers(self, options: Optional[dict[str, Any]] = None) -> StorageResponse:
        """
        List containers.

        options are passed as query parameters (limit, marker, ...).
        """
        return self.request({
            "method": "GET",
            "path": "",
            "query": {"format": "json", **(options or {})},
            "expects": [200, 204],
        })

    # -----------------------------------------------------------------------
    # Containers
    # -----------------------------------------------------------------------

    def get_container(self, container: str, options: Optional[dict[str, Any]] = None) -> StorageResponse:
        """List objects in a container."""
        return self.request({
            "method": "GET",
            "path": escape(container),
            "query": {"format": "json", **(options or {})},
            "expects": [200, 204],
        })

    def head_container(self, container: str) -> StorageResponse:
        return self.request({
            "method": "HEAD",
            "path": escape(container),
            "expects": [204],
        })

    def put_container(self, container: str, headers: Optional[dict[str, str]] = None) -> StorageResponse:
        """Create a container, or update its headers if it exists."""
        return self.request({
            "method": "PUT",
            "path": escape(container),
            "headers": headers or {},
            "expects": [201, 202],
        })

    def delete_container(self, container: str) -> StorageResponse:
        return self.request({
            "method": "DELETE",
            "path": escape(container),
            "expects": [204],
        })

    # -----------------------------------------------------------------------
    # Objects
    # -----------------------------------------------------------------------

    def get_object(self, container: str, obj: str) -> StorageResponse:
        """Fetch an object. The body is always returned as raw bytes."""
        return self.request({
            "method": "GET",
            "path": f"{escape(container)}/{escape(obj)}",
            "expects": [200],
        }, parse_json=False)

    def head_object(self, container: str, obj: str) -> StorageResponse:
        return self.request({
            "method": "HEAD",
            "path": f"{escape(container)}/{escape(obj)}",
            "expects": [200],
        }, parse_json=False)

    def put_object(
        self,
        container: str,
        obj: str,
        data: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> StorageResponse:
        """
        Upload an object.

        Content-Type is guessed from the object name unless given.
        """
        request_headers = {"Content-Type": guess_content_type(obj)}
        request_headers.update(headers or {})
        return self.request({
            "method": "PUT",
            "path": f"{escape(container)}/{escape(obj)}",
            "headers": request_headers,
            "body": data,
            "expects": [201],
        })

    def delete_object(self, container: str, obj: str) -> StorageResponse:
        return self.request({
            "method": "DELETE",
            "path": f"{escape(container)}/{escape(obj)}",
            "expects": [204],
        })


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    settings: Optional[Settings] = None,
    mock_mode: Optional[bool] = None,
    store: Optional[MockStore] = None,
    resolver: Optional[CredentialResolver] = None,
    cdn_factory: Optional[CDNFactory] = None,
) -> StorageClient:
    """
    Create a storage client based on configuration.

    Args:
        settings: Client settings (loaded from the environment if omitted)
        mock_mode: Force mock or real; defaults to settings.hp_mock_mode
        store: Store for the mock client; a fresh one is created if omitted
        resolver: Credential resolver for the real client
        cdn_factory: Builds the optional CDN handle

    Returns:
        StorageClient implementation (real or mock)
    """
    settings = settings or get_settings()
    if mock_mode is None:
        mock_mode = settings.hp_mock_mode

    if mock_mode:
        return MockStorageClient(settings, store or MockStore(), cdn_factory=cdn_factory)

    return HPStorageClient(settings, resolver=resolver, cdn_factory=cdn_factory)
