"""Unit tests for settings loading."""

import pytest

from hpstorage.config.settings import get_settings, load_settings
from hpstorage.core.errors import ConfigurationError
from hpstorage.core.models import AuthVersion


REQUIRED = {
    "hp_secret_key": "s3cr3t",
    "hp_account_id": "acct",
    "hp_tenant_id": "12345",
    "hp_avl_zone": "region-a.geo-1",
}


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings(**REQUIRED)

        assert settings.hp_auth_version == AuthVersion.V2
        assert settings.hp_auth_uri is None
        assert settings.persistent is False
        assert settings.connection_options == {}
        assert settings.hp_mock_mode is False

    def test_missing_required_fields(self):
        with pytest.raises(ConfigurationError) as exc:
            load_settings(hp_secret_key="s3cr3t")

        message = str(exc.value)
        for field in ["HP_ACCOUNT_ID", "HP_TENANT_ID", "HP_AVL_ZONE"]:
            assert field in message
        assert "HP_SECRET_KEY" not in message

    def test_invalid_auth_version(self):
        with pytest.raises(ConfigurationError, match="HP_AUTH_VERSION"):
            load_settings(**REQUIRED, hp_auth_version="v3")

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("HP_SECRET_KEY", "from-env")
        monkeypatch.setenv("HP_ACCOUNT_ID", "acct")
        monkeypatch.setenv("HP_TENANT_ID", "12345")
        monkeypatch.setenv("HP_AVL_ZONE", "region-a.geo-1")
        monkeypatch.setenv("HP_AUTH_VERSION", "v1")

        settings = load_settings()

        assert settings.hp_secret_key == "from-env"
        assert settings.hp_auth_version == AuthVersion.V1

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "HP_SECRET_KEY=dotenv\nHP_ACCOUNT_ID=a\nHP_TENANT_ID=t\nHP_AVL_ZONE=z\n"
        )

        assert load_settings().hp_secret_key == "dotenv"

    def test_v1_requires_auth_uri(self):
        settings = load_settings(**REQUIRED, hp_auth_version="v1")

        assert settings.validate_required_fields() == ["HP_AUTH_URI"]

    def test_v2_has_no_extra_requirements(self):
        assert load_settings(**REQUIRED).validate_required_fields() == []


class TestGetSettings:

    def test_cached(self, monkeypatch):
        for name, value in REQUIRED.items():
            monkeypatch.setenv(name.upper(), value)
        get_settings.cache_clear()

        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
