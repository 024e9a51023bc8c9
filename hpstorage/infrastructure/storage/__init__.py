"""
Object storage clients.

HPStorageClient talks to a real endpoint; MockStorageClient keeps
everything in a MockStore. Both share ACL translation and temp URL
signing through BaseStorageClient.
"""

from .base import BaseStorageClient, CDNService
from .client import HPStorageClient, StorageClient, create_storage_client
from .mock import MockStorageClient, MockStore

__all__ = [
    "BaseStorageClient",
    "CDNService",
    "HPStorageClient",
    "StorageClient",
    "create_storage_client",
    "MockStorageClient",
    "MockStore",
]
