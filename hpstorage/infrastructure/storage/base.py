"""
Behavior shared by the real and mock storage clients.

Both clients translate ACLs and sign temp URLs through the same code, so
tests against the mock exercise the exact logic the real client uses.
"""

import logging
import mimetypes
import time
from typing import Any, Callable, Optional, Protocol, Sequence

from ...config.settings import Settings
from ...core import acl
from ...core.models import Session
from ...core.temp_url import TempUrlSigner
from ...core.urls import public_url

logger = logging.getLogger(__name__)


class CDNService(Protocol):
    """What the storage client needs from a CDN client."""

    def enabled(self) -> bool:
        ...


CDNFactory = Callable[..., CDNService]


def guess_content_type(name: str) -> str:
    content_type, _ = mimetypes.guess_type(name)
    return content_type or "application/octet-stream"


class BaseStorageClient:
    """
    Utility methods on top of a resolved storage endpoint.

    Subclasses supply put_container and head_container (see StorageClient).
    """

    def __init__(
        self,
        settings: Settings,
        storage_uri: str,
        cdn_uri: Optional[str] = None,
        cdn_factory: Optional[CDNFactory] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._storage_uri = storage_uri
        self._cdn_uri = cdn_uri
        self._cdn_factory = cdn_factory
        self._cdn: Optional[CDNService] = None
        self._clock = clock

    @property
    def url(self) -> str:
        return Session.from_endpoint(self._storage_uri).url

    @property
    def hp_cdn_ssl(self) -> bool:
        return self._settings.hp_cdn_ssl

    def public_url(self, container: Optional[str] = None, obj: Optional[str] = None) -> Optional[str]:
        return public_url(self.url, container, obj)

    def perm_to_acl(self, perm: str, users: Optional[Sequence[str]] = None) -> acl.AclHeaderPair:
        return acl.perm_to_acl(perm, users)

    def perm_acl_to_header(self, read_acl, write_acl) -> dict[str, str]:
        return acl.perm_acl_to_header(read_acl, write_acl)

    def header_to_perm_acl(self, read_header=None, write_header=None) -> acl.AclHeaderPair:
        return acl.header_to_perm_acl(read_header, write_header)

    def generate_object_temp_url(
        self,
        container: Optional[str],
        obj: Optional[str],
        expires_secs: Optional[int],
        method: Optional[str],
    ) -> Optional[str]:
        signer = TempUrlSigner(
            self._storage_uri,
            self._settings.hp_secret_key,
            self._settings.hp_tenant_id,
            self._settings.hp_account_id,
            clock=self._clock,
        )
        return signer.generate(container, obj, expires_secs, method)

    def get_object_temp_url(
        self,
        container: str,
        obj: str,
        expires_secs: int,
        method: str = "GET",
    ) -> Optional[str]:
        return self.generate_object_temp_url(container, obj, expires_secs, method)

    @property
    def cdn(self) -> Optional[CDNService]:
        """
        The CDN client, if one is configured and enabled.

        Built lazily and cached. Returns None when there is no CDN URI, no
        factory, or the CDN reports itself disabled.
        """
        if self._cdn_uri is None or self._cdn_factory is None:
            return None

        if self._cdn is None:
            self._cdn = self._cdn_factory(
                hp_account_id=self._settings.hp_account_id,
                hp_secret_key=self._settings.hp_secret_key,
                hp_auth_uri=self._settings.hp_auth_uri,
                hp_cdn_uri=self._cdn_uri,
                hp_tenant_id=self._settings.hp_tenant_id,
                hp_avl_zone=self._settings.hp_avl_zone,
                connection_options=self._settings.connection_options,
            )
            logger.info("Initialized CDN client", extra={"cdn_uri": self._cdn_uri})

        if self._cdn.enabled():
            return self._cdn
        return None

    # -----------------------------------------------------------------------
    # ACL helpers built on the container operations
    # -----------------------------------------------------------------------

    def set_container_acl(
        self,
        container: str,
        perm: str,
        users: Optional[Sequence[str]] = None,
    ) -> Any:
        """Apply a permission code to a container."""
        read_acl, write_acl = self.perm_to_acl(perm, users)
        headers = self.perm_acl_to_header(read_acl, write_acl)
        return self.put_container(container, headers=headers)

    def get_container_acl(self, container: str) -> acl.AclHeaderPair:
        """Read a container's ACL lists; a missing header gives None."""
        response = self.head_container(container)
        return self.header_to_perm_acl(
            response.headers.get(acl.READ_ACL_HEADER),
            response.headers.get(acl.WRITE_ACL_HEADER),
        )
