"""
Unit tests for the identity service calls.

HTTP is served by httpx.MockTransport, handed in through
connection_options the same way a real timeout or verify flag would be.
"""

import json

import httpx
import pytest

from hpstorage.core.errors import AuthenticationError, ConfigurationError
from hpstorage.infrastructure.identity.client import (
    DEFAULT_AUTH_URI,
    authenticate_v1,
    authenticate_v2,
    endpoint_from_catalog,
    servicenet_url,
)


CATALOG = [
    {
        "name": "Object Storage",
        "type": "object-store",
        "endpoints": [
            {"region": "region-b.geo-1", "publicURL": "https://b.objects.example.com/v1/12345"},
            {"region": "region-a.geo-1", "publicURL": "https://a.objects.example.com/v1/12345"},
        ],
    },
    {
        "name": "CDN",
        "type": "hpext:cdn",
        "endpoints": [
            {"region": "region-a.geo-1", "publicURL": "https://cdn.example.com/v1/12345"},
        ],
    },
]


def catalog_handler(captured: list, catalog=CATALOG, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(status, json={
            "access": {
                "token": {"id": "token-123"},
                "serviceCatalog": catalog,
            }
        })
    return handler


# ---------------------------------------------------------------------------
# v2
# ---------------------------------------------------------------------------

class TestAuthenticateV2:

    def test_posts_access_key_credentials(self, settings):
        captured = []
        transport = httpx.MockTransport(catalog_handler(captured))

        authenticate_v2(settings, {"transport": transport})

        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == DEFAULT_AUTH_URI.rstrip("/") + "/tokens"
        assert json.loads(request.content) == {
            "auth": {
                "apiAccessKeyCredentials": {"accessKey": "acct", "secretKey": "s3cr3t"},
                "tenantId": "12345",
            }
        }

    def test_upass_style_sends_password_credentials(self, make_settings):
        settings = make_settings(
            hp_use_upass_auth_style=True,
            hp_auth_uri="https://identity.example.com/v2.0/",
        )
        captured = []
        transport = httpx.MockTransport(catalog_handler(captured))

        authenticate_v2(settings, {"transport": transport})

        body = json.loads(captured[0].content)
        assert str(captured[0].url) == "https://identity.example.com/v2.0/tokens"
        assert body["auth"]["passwordCredentials"] == {"username": "acct", "password": "s3cr3t"}

    def test_picks_endpoints_for_availability_zone(self, settings):
        transport = httpx.MockTransport(catalog_handler([]))

        response = authenticate_v2(settings, {"transport": transport})

        assert response.auth_token == "token-123"
        assert response.endpoint_url == "https://a.objects.example.com/v1/12345"
        assert response.cdn_endpoint_url == "https://cdn.example.com/v1/12345"

    def test_missing_storage_endpoint(self, make_settings):
        settings = make_settings(hp_avl_zone="region-z")
        transport = httpx.MockTransport(catalog_handler([]))

        with pytest.raises(AuthenticationError, match="availability zone 'region-z'"):
            authenticate_v2(settings, {"transport": transport})

    def test_servicenet_rewrites_storage_host(self, make_settings):
        settings = make_settings(hp_servicenet=True)
        transport = httpx.MockTransport(catalog_handler([]))

        response = authenticate_v2(settings, {"transport": transport})

        assert response.endpoint_url == "https://snet-a.objects.example.com/v1/12345"

    def test_rejected_credentials(self, settings):
        transport = httpx.MockTransport(catalog_handler([], status=401))

        with pytest.raises(AuthenticationError) as exc:
            authenticate_v2(settings, {"transport": transport})

        assert isinstance(exc.value.__cause__, httpx.HTTPStatusError)

    def test_transport_failure(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AuthenticationError, match="connection refused"):
            authenticate_v2(settings, {"transport": httpx.MockTransport(handler)})


# ---------------------------------------------------------------------------
# v1
# ---------------------------------------------------------------------------

class TestAuthenticateV1:

    def test_sends_key_headers_and_reads_token(self, make_settings):
        settings = make_settings(hp_auth_uri="https://legacy.example.com/auth/v1.0/")
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(204, headers={
                "X-Auth-Token": "legacy-token",
                "X-Storage-Url": "https://objects.example.com/v1/12345",
                "X-CDN-Management-Url": "https://cdn.example.com/v1/12345",
            })

        response = authenticate_v1(settings, {"transport": httpx.MockTransport(handler)})

        assert captured[0].method == "GET"
        assert captured[0].headers["X-Auth-User"] == "acct"
        assert captured[0].headers["X-Auth-Key"] == "s3cr3t"
        assert response.auth_token == "legacy-token"
        assert response.endpoint_url == "https://objects.example.com/v1/12345"
        assert response.cdn_endpoint_url == "https://cdn.example.com/v1/12345"

    def test_falls_back_to_storage_token(self, make_settings):
        settings = make_settings(hp_auth_uri="https://legacy.example.com/auth/v1.0/")

        def handler(request):
            return httpx.Response(200, headers={"X-Storage-Token": "storage-token"})

        response = authenticate_v1(settings, {"transport": httpx.MockTransport(handler)})

        assert response.auth_token == "storage-token"

    @pytest.mark.parametrize("status", [202, 401, 500])
    def test_unexpected_status(self, make_settings, status):
        settings = make_settings(hp_auth_uri="https://legacy.example.com/auth/v1.0/")
        transport = httpx.MockTransport(lambda request: httpx.Response(status))

        with pytest.raises(AuthenticationError):
            authenticate_v1(settings, {"transport": transport})

    def test_requires_auth_uri(self, settings):
        with pytest.raises(ConfigurationError):
            authenticate_v1(settings, {})

    def test_user_agent_sent(self, make_settings):
        settings = make_settings(
            hp_auth_uri="https://legacy.example.com/auth/v1.0/",
            user_agent="hpstorage-tests/1.0",
        )
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(204, headers={"X-Auth-Token": "t"})

        authenticate_v1(settings, {"transport": httpx.MockTransport(handler)})

        assert captured[0].headers["User-Agent"] == "hpstorage-tests/1.0"


class TestCatalogHelpers:

    def test_endpoint_from_catalog_unknown_service(self):
        assert endpoint_from_catalog(CATALOG, "Compute", "region-a.geo-1") is None

    def test_servicenet_url(self):
        assert servicenet_url("https://objects.example.com:443/v1/1") == (
            "https://snet-objects.example.com:443/v1/1"
        )
