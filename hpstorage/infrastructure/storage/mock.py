"""
In-memory storage for tests and local development.

MockStore holds the state, keyed by account id. It is an ordinary object:
create one per test (or fixture), hand it to MockStorageClient, and reset
or discard it when done. Nothing is kept at module level, so two stores
never see each other's containers.

MockStorageClient uses the same ACL translation and temp URL signing as
the real client. Responses mimic the real service closely enough for ACL
round trips and NotFound handling to behave identically.
"""

import hashlib
import logging
import time
from email.utils import formatdate
from typing import Any, Callable, Optional

import httpx

from ...config.settings import Settings
from ...core import acl
from ...core.errors import NotFound
from ...core.models import StorageResponse
from ...core.urls import escape
from .base import BaseStorageClient, CDNFactory, guess_content_type

logger = logging.getLogger(__name__)


MOCK_STORAGE_URI = "https://objects.mock.hpcloudsvc.com:443/v1/{tenant_id}"


def _empty_account() -> dict[str, Any]:
    return {
        # Object ACLs are never set; the key keeps the account layout complete.
        "acls": {
            "container": {},
            "object": {},
        },
        "containers": {},
    }


class MockStore:
    """
    Account id -> {acls: {container, object}, containers}.

    Not thread-safe; meant for single-threaded tests.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def data(self, account_id: str) -> dict[str, Any]:
        """State for an account, created empty on first access."""
        if account_id not in self._data:
            self._data[account_id] = _empty_account()
        return self._data[account_id]

    def reset_account(self, account_id: str) -> None:
        self._data.pop(account_id, None)

    def reset(self) -> None:
        self._data.clear()

    def __contains__(self, account_id: str) -> bool:
        return account_id in self._data


class MockStorageClient(BaseStorageClient):
    """Storage client backed by a MockStore."""

    def __init__(
        self,
        settings: Settings,
        store: MockStore,
        cdn_factory: Optional[CDNFactory] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(
            settings,
            storage_uri=MOCK_STORAGE_URI.format(tenant_id=settings.hp_tenant_id),
            cdn_uri=settings.hp_cdn_uri,
            cdn_factory=cdn_factory,
            clock=clock,
        )
        self._store = store
        self._account_id = settings.hp_account_id
        logger.info("Initialized mock storage client (in-memory)")

    @property
    def data(self) -> dict[str, Any]:
        return self._store.data(self._account_id)

    def reset_data(self) -> None:
        """Forget everything stored for this client's account."""
        self._store.reset_account(self._account_id)

    # -----------------------------------------------------------------------
    # Account
    # -----------------------------------------------------------------------

    def head_containers(self) -> StorageResponse:
        containers = self.data["containers"]
        return StorageResponse(204, httpx.Headers({
            "X-Account-Container-Count": str(len(containers)),
            "X-Account-Bytes-Used": str(sum(_bytes_used(c) for c in containers.values())),
        }))

    def get_containers(self, options: Optional[dict[str, Any]] = None) -> StorageResponse:
        listing = [
            {
                "name": name,
                "count": len(container["objects"]),
                "bytes": _bytes_used(container),
            }
            for name, container in sorted(self.data["containers"].items())
        ]
        listing = _apply_listing_options(listing, options)
        return StorageResponse(200 if listing else 204, httpx.Headers(), listing)

    # -----------------------------------------------------------------------
    # Containers
    # -----------------------------------------------------------------------

    def get_container(self, container: str, options: Optional[dict[str, Any]] = None) -> StorageResponse:
        stored = self._container(container)
        listing = [
            {
                "name": name,
                "hash": obj["etag"],
                "bytes": len(obj["body"]),
                "content_type": obj["content_type"],
                "last_modified": obj["last_modified"],
            }
            for name, obj in sorted(stored["objects"].items())
        ]
        listing = _apply_listing_options(listing, options)
        return StorageResponse(
            200 if listing else 204,
            self._container_headers(container),
            listing,
        )

    def head_container(self, container: str) -> StorageResponse:
        self._container(container)
        return StorageResponse(204, self._container_headers(container))

    def put_container(self, container: str, headers: Optional[dict[str, str]] = None) -> StorageResponse:
        containers = self.data["containers"]
        status = 202 if container in containers else 201
        stored = containers.setdefault(container, {"objects": {}, "headers": {}})

        request_headers = httpx.Headers(headers or {})
        read_header = request_headers.get(acl.READ_ACL_HEADER)
        write_header = request_headers.get(acl.WRITE_ACL_HEADER)
        read_acl, write_acl = acl.header_to_perm_acl(read_header, write_header)

        acls = self.data["acls"]["container"].setdefault(container, {"read": [], "write": []})
        if read_acl is not None:
            acls["read"] = read_acl
        if write_acl is not None:
            acls["write"] = write_acl

        for key, value in request_headers.items():
            if key.lower().startswith("x-container-meta-"):
                stored["headers"][key] = value

        logger.debug(
            "Stored container in mock storage",
            extra={"container": container, "status": status}
        )
        return StorageResponse(status, httpx.Headers())

    def delete_container(self, container: str) -> StorageResponse:
        stored = self._container(container)
        if stored["objects"]:
            request = httpx.Request("DELETE", f"{self.url}/{escape(container)}")
            response = httpx.Response(409, request=request)
            raise httpx.HTTPStatusError(
                f"Container {container} is not empty", request=request, response=response
            )

        del self.data["containers"][container]
        self.data["acls"]["container"].pop(container, None)
        return StorageResponse(204, httpx.Headers())

    # -----------------------------------------------------------------------
    # Objects
    # -----------------------------------------------------------------------

    def get_object(self, container: str, obj: str) -> StorageResponse:
        stored = self._object(container, obj)
        return StorageResponse(200, _object_headers(stored), stored["body"])

    def head_object(self, container: str, obj: str) -> StorageResponse:
        stored = self._object(container, obj)
        return StorageResponse(200, _object_headers(stored))

    def put_object(
        self,
        container: str,
        obj: str,
        data: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> StorageResponse:
        objects = self._container(container)["objects"]
        if data is None:
            body = b""
        elif isinstance(data, str):
            body = data.encode("utf-8")
        else:
            body = bytes(data)

        request_headers = httpx.Headers(headers or {})
        etag = hashlib.md5(body).hexdigest()
        objects[obj] = {
            "body": body,
            "etag": etag,
            "content_type": request_headers.get("Content-Type", guess_content_type(obj)),
            "last_modified": formatdate(self._clock(), usegmt=True),
        }

        logger.debug(
            "Stored object in mock storage",
            extra={"container": container, "object": obj, "size_bytes": len(body)}
        )
        return StorageResponse(201, httpx.Headers({"ETag": etag}))

    def delete_object(self, container: str, obj: str) -> StorageResponse:
        self._object(container, obj)
        del self.data["containers"][container]["objects"][obj]
        return StorageResponse(204, httpx.Headers())

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def _container(self, container: str) -> dict[str, Any]:
        try:
            return self.data["containers"][container]
        except KeyError:
            raise NotFound(f"Container not found: {container}") from None

    def _object(self, container: str, obj: str) -> dict[str, Any]:
        try:
            return self._container(container)["objects"][obj]
        except KeyError:
            raise NotFound(f"Object not found: {container}/{obj}") from None

    def _container_headers(self, container: str) -> httpx.Headers:
        stored = self.data["containers"][container]
        headers = httpx.Headers({
            "X-Container-Object-Count": str(len(stored["objects"])),
            "X-Container-Bytes-Used": str(_bytes_used(stored)),
        })
        headers.update(stored["headers"])

        # the service omits ACL headers that were never set
        acls = self.data["acls"]["container"].get(container, {})
        if acls.get("read"):
            headers[acl.READ_ACL_HEADER] = ",".join(acls["read"])
        if acls.get("write"):
            headers[acl.WRITE_ACL_HEADER] = ",".join(acls["write"])
        return headers


def _bytes_used(container: dict[str, Any]) -> int:
    return sum(len(obj["body"]) for obj in container["objects"].values())


def _object_headers(stored: dict[str, Any]) -> httpx.Headers:
    return httpx.Headers({
        "Content-Type": stored["content_type"],
        "Content-Length": str(len(stored["body"])),
        "ETag": stored["etag"],
        "Last-Modified": stored["last_modified"],
    })


def _apply_listing_options(
    listing: list[dict[str, Any]],
    options: Optional[dict[str, Any]],
) -> list[dict[str, Any]]:
    options = options or {}
    if "prefix" in options:
        listing = [item for item in listing if item["name"].startswith(options["prefix"])]
    if "marker" in options:
        listing = [item for item in listing if item["name"] > options["marker"]]
    if "limit" in options:
        listing = listing[:int(options["limit"])]
    return listing
