"""
Turns an auth version into Credentials.

Each identity flow is its own class. The resolver picks one by
AuthVersion, runs it once, and hands back Credentials in the same shape
regardless of the flow. Nothing downstream needs to know which flow ran.
"""

import logging
from typing import Callable, Optional

from ...config.settings import Settings
from ...core.errors import AuthenticationError, ConfigurationError
from ...core.models import AuthVersion, Credentials
from . import client as identity
from .client import IdentityResponse

logger = logging.getLogger(__name__)


Authenticator = Callable[..., IdentityResponse]


class CatalogAuth:
    """v2: storage and CDN endpoints come from the service catalog."""

    version = AuthVersion.V2

    def __init__(self, authenticate: Optional[Authenticator] = None) -> None:
        self._authenticate = authenticate or identity.authenticate_v2

    def resolve(self, settings: Settings) -> Credentials:
        response = self._authenticate(settings, settings.connection_options)
        if not response.endpoint_url:
            raise AuthenticationError("Service catalog returned no storage endpoint")
        return Credentials(
            endpoint_url=response.endpoint_url,
            auth_token=_require_token(response),
            cdn_endpoint_url=response.cdn_endpoint_url,
        )


class LegacyAuth:
    """
    v1: only the token comes from the identity service.

    The storage endpoint is the configured auth URI and the CDN endpoint is
    the configured CDN URI, whatever the response says.
    """

    version = AuthVersion.V1

    def __init__(self, authenticate: Optional[Authenticator] = None) -> None:
        self._authenticate = authenticate or identity.authenticate_v1

    def resolve(self, settings: Settings) -> Credentials:
        if not settings.hp_auth_uri:
            raise ConfigurationError("hp_auth_uri is required for v1 authentication")
        response = self._authenticate(settings, settings.connection_options)
        return Credentials(
            endpoint_url=settings.hp_auth_uri,
            auth_token=_require_token(response),
            cdn_endpoint_url=settings.hp_cdn_uri,
        )


class CredentialResolver:
    """
    Resolves credentials for the configured auth version.

    Failures are fatal and not retried. Identity collaborators can be
    swapped out, which is how the tests avoid the network.
    """

    def __init__(
        self,
        authenticate_v1: Optional[Authenticator] = None,
        authenticate_v2: Optional[Authenticator] = None,
    ) -> None:
        self._flows = {
            AuthVersion.V1: LegacyAuth(authenticate_v1),
            AuthVersion.V2: CatalogAuth(authenticate_v2),
        }

    def resolve(self, auth_version, settings: Settings) -> Credentials:
        try:
            flow = self._flows[AuthVersion(auth_version)]
        except ValueError as e:
            raise ConfigurationError(f"Unknown auth version: {auth_version!r}") from e

        credentials = flow.resolve(settings)

        logger.info(
            "Authenticated",
            extra={
                "auth_version": flow.version.value,
                "tenant_id": settings.hp_tenant_id,
                "endpoint": credentials.endpoint_url,
                "cdn_endpoint": credentials.cdn_endpoint_url,
            }
        )
        return credentials


def _require_token(response: IdentityResponse) -> str:
    if not response.auth_token:
        raise AuthenticationError("Identity service returned no auth token")
    return response.auth_token
