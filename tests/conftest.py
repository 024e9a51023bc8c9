"""
Shared fixtures.

Settings are always built from explicit values so a developer's HP_*
environment variables or .env file can't leak into tests.
"""

import pytest

from hpstorage.config.settings import Settings


BASE_SETTINGS = {
    "hp_secret_key": "s3cr3t",
    "hp_account_id": "acct",
    "hp_tenant_id": "12345",
    "hp_avl_zone": "region-a.geo-1",
}


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Run every test in an empty directory with no HP_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in [
        "HP_SECRET_KEY", "HP_ACCOUNT_ID", "HP_TENANT_ID", "HP_AVL_ZONE",
        "HP_AUTH_URI", "HP_AUTH_VERSION", "HP_CDN_URI", "HP_MOCK_MODE",
    ]:
        monkeypatch.delenv(name, raising=False)


def _make_settings(**overrides) -> Settings:
    return Settings(**{**BASE_SETTINGS, **overrides})


@pytest.fixture
def make_settings():
    """Factory for settings with per-test overrides."""
    return _make_settings


@pytest.fixture
def settings() -> Settings:
    return _make_settings()
