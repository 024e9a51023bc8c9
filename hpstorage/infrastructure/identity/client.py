"""
Identity service calls.

Two flows are supported:

- v1 (legacy): a GET with X-Auth-User / X-Auth-Key headers. The token
  comes back in a response header.
- v2 (service catalog): a POST of JSON credentials to `<auth_uri>/tokens`.
  The response carries a token plus a catalog of service endpoints per
  availability zone.

Both return an IdentityResponse. Picking which endpoint to actually use is
the resolver's job, not ours.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse, urlunparse

import httpx

from ...config.settings import Settings
from ...core.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_AUTH_URI = "https://region-a.geo-1.identity.hpcloudsvc.com:35357/v2.0/"
OBJECT_STORAGE_SERVICE = "Object Storage"
CDN_SERVICE = "CDN"


@dataclass(frozen=True)
class IdentityResponse:
    """Raw result of an identity call, before normalization."""
    auth_token: Optional[str]
    endpoint_url: Optional[str] = None
    cdn_endpoint_url: Optional[str] = None


def authenticate_v1(
    settings: Settings,
    connection_options: Optional[dict[str, Any]] = None,
) -> IdentityResponse:
    """Authenticate against a legacy v1.0/v1.1 endpoint."""
    if not settings.hp_auth_uri:
        raise ConfigurationError("hp_auth_uri is required for v1 authentication")

    headers = {
        "X-Auth-User": settings.hp_account_id,
        "X-Auth-Key": settings.hp_secret_key,
    }
    if settings.user_agent:
        headers["User-Agent"] = settings.user_agent

    try:
        with httpx.Client(**(connection_options or {})) as client:
            response = client.get(settings.hp_auth_uri, headers=headers)
            if response.status_code not in (200, 204):
                raise httpx.HTTPStatusError(
                    f"Unexpected status {response.status_code} from {settings.hp_auth_uri}",
                    request=response.request,
                    response=response,
                )
    except httpx.HTTPError as e:
        logger.error(
            "v1 authentication failed",
            extra={"auth_uri": settings.hp_auth_uri, "error": str(e)}
        )
        raise AuthenticationError(f"v1 authentication failed: {e}") from e

    endpoint_url = response.headers.get("X-Storage-Url")
    if endpoint_url and settings.hp_servicenet:
        endpoint_url = servicenet_url(endpoint_url)

    return IdentityResponse(
        auth_token=response.headers.get(
            "X-Auth-Token", response.headers.get("X-Storage-Token")
        ),
        endpoint_url=endpoint_url,
        cdn_endpoint_url=response.headers.get("X-CDN-Management-Url"),
    )


def authenticate_v2(
    settings: Settings,
    connection_options: Optional[dict[str, Any]] = None,
    service_type: str = OBJECT_STORAGE_SERVICE,
) -> IdentityResponse:
    """
    Authenticate against the service catalog.

    The storage endpoint is the publicURL of the `service_type` entry in
    the configured availability zone. The CDN endpoint is looked up the
    same way but is optional.
    """
    auth_uri = settings.hp_auth_uri or DEFAULT_AUTH_URI
    tokens_url = f"{auth_uri.rstrip('/')}/tokens"

    if settings.hp_use_upass_auth_style:
        credentials = {
            "passwordCredentials": {
                "username": settings.hp_account_id,
                "password": settings.hp_secret_key,
            }
        }
    else:
        credentials = {
            "apiAccessKeyCredentials": {
                "accessKey": settings.hp_account_id,
                "secretKey": settings.hp_secret_key,
            }
        }
    payload = {"auth": {**credentials, "tenantId": settings.hp_tenant_id}}

    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if settings.user_agent:
        headers["User-Agent"] = settings.user_agent

    try:
        with httpx.Client(**(connection_options or {})) as client:
            response = client.post(tokens_url, json=payload, headers=headers)
            response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(
            "v2 authentication failed",
            extra={"auth_uri": auth_uri, "error": str(e)}
        )
        raise AuthenticationError(f"v2 authentication failed: {e}") from e

    access = body.get("access") or {}
    catalog = access.get("serviceCatalog") or []

    endpoint_url = endpoint_from_catalog(catalog, service_type, settings.hp_avl_zone)
    if endpoint_url is None:
        raise AuthenticationError(
            f"Unable to retrieve endpoint service url for availability zone "
            f"'{settings.hp_avl_zone}' from service catalog."
        )
    if settings.hp_servicenet:
        endpoint_url = servicenet_url(endpoint_url)

    return IdentityResponse(
        auth_token=(access.get("token") or {}).get("id"),
        endpoint_url=endpoint_url,
        cdn_endpoint_url=endpoint_from_catalog(catalog, CDN_SERVICE, settings.hp_avl_zone),
    )


def endpoint_from_catalog(
    catalog: list[dict[str, Any]],
    service_name: str,
    avl_zone: str,
) -> Optional[str]:
    """publicURL of the named service in the given zone, if any."""
    for service in catalog:
        if service.get("name") != service_name:
            continue
        for endpoint in service.get("endpoints") or []:
            if endpoint.get("region") == avl_zone:
                return endpoint.get("publicURL")
    return None


def servicenet_url(url: str) -> str:
    """Rewrite a storage URL to go over the internal service network."""
    parsed = list(urlparse(url))
    parsed[1] = "snet-" + parsed[1]
    return urlunparse(parsed)
