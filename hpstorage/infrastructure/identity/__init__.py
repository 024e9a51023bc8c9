"""
Identity service integration.

Authenticates with either the legacy v1 or the catalog v2 flow and
normalizes the result into Credentials.
"""

from .client import IdentityResponse, authenticate_v1, authenticate_v2
from .resolver import CatalogAuth, CredentialResolver, LegacyAuth

__all__ = [
    "IdentityResponse",
    "authenticate_v1",
    "authenticate_v2",
    "CatalogAuth",
    "CredentialResolver",
    "LegacyAuth",
]
