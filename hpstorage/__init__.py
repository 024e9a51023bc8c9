"""
hpstorage - a client for HP Cloud Object Storage.

This package contains:
- core: ACL translation, temp URL signing, value objects and errors
- infrastructure: identity, HTTP dispatch and the storage clients
- config: client settings
"""

from .config import Settings, get_settings, load_settings
from .core import (
    AuthenticationError,
    AuthVersion,
    ConfigurationError,
    Credentials,
    InvalidArgument,
    NotFound,
    PermissionDescriptor,
    StorageError,
    StorageResponse,
    TempUrlSigner,
    header_to_perm_acl,
    perm_acl_to_header,
    perm_to_acl,
)
from .infrastructure.http import TransportError
from .infrastructure.storage import (
    HPStorageClient,
    MockStorageClient,
    MockStore,
    create_storage_client,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "AuthenticationError",
    "AuthVersion",
    "ConfigurationError",
    "Credentials",
    "InvalidArgument",
    "NotFound",
    "PermissionDescriptor",
    "StorageError",
    "StorageResponse",
    "TempUrlSigner",
    "TransportError",
    "header_to_perm_acl",
    "perm_acl_to_header",
    "perm_to_acl",
    "HPStorageClient",
    "MockStorageClient",
    "MockStore",
    "create_storage_client",
]
