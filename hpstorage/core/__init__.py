"""
Core logic for the storage client.

Nothing in here imports httpx or pydantic. ACL translation and temp URL
signing are pure functions, so they are shared verbatim by the real client
and the in-memory mock.
"""

from .acl import (
    ACL_TENANT_WILDCARD,
    AclHeaderPair,
    PermissionDescriptor,
    header_to_perm_acl,
    perm_acl_to_header,
    perm_to_acl,
)
from .errors import (
    AuthenticationError,
    ConfigurationError,
    InvalidArgument,
    NotFound,
    StorageError,
)
from .models import AuthVersion, Credentials, Session, StorageResponse
from .temp_url import SignedUrlRequest, TempUrlSigner, generate_temp_url

__all__ = [
    "ACL_TENANT_WILDCARD",
    "AclHeaderPair",
    "PermissionDescriptor",
    "header_to_perm_acl",
    "perm_acl_to_header",
    "perm_to_acl",
    "AuthenticationError",
    "ConfigurationError",
    "InvalidArgument",
    "NotFound",
    "StorageError",
    "AuthVersion",
    "Credentials",
    "Session",
    "StorageResponse",
    "SignedUrlRequest",
    "TempUrlSigner",
    "generate_temp_url",
]
