"""
Client configuration using Pydantic settings.

Settings are loaded from environment variables (and a `.env` file when
present), and can be overridden with keyword arguments. Names mirror the
option names the storage service documents, e.g. HP_ACCOUNT_ID.

Using Pydantic's BaseSettings means a missing account id or secret fails
at construction time instead of on the first request.
"""

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.errors import ConfigurationError
from ..core.models import AuthVersion


class Settings(BaseSettings):
    """
    Storage client settings.

    The four credentials are required. Everything else has a default.
    """

    # Required credentials
    hp_secret_key: str = Field(description="Secret key (or password with upass auth style)")
    hp_account_id: str = Field(description="Access key id (or username with upass auth style)")
    hp_tenant_id: str = Field(description="Tenant the containers belong to")
    hp_avl_zone: str = Field(description="Availability zone used to pick catalog endpoints")

    # Identity
    hp_auth_uri: Optional[str] = Field(
        default=None,
        description="Identity endpoint. With v1 auth this is also the storage endpoint."
    )
    hp_auth_version: AuthVersion = Field(
        default=AuthVersion.V2,
        description="Identity flow: v1 (legacy) or v2 (service catalog)"
    )
    hp_use_upass_auth_style: bool = Field(
        default=False,
        description="Send username/password credentials instead of access keys (v2 only)"
    )
    hp_servicenet: bool = Field(
        default=False,
        description="Route storage traffic over the internal service network"
    )

    # CDN
    hp_cdn_uri: Optional[str] = Field(
        default=None,
        description="CDN management endpoint. Required for the CDN handle with v1 auth."
    )
    hp_cdn_ssl: bool = Field(
        default=False,
        description="Prefer SSL CDN URLs"
    )

    # Connection
    persistent: bool = Field(
        default=False,
        description="Keep connections alive between requests"
    )
    connection_options: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra keyword arguments for httpx.Client (timeout, verify, ...)"
    )
    user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent header sent with every request"
    )

    # Development
    hp_mock_mode: bool = Field(
        default=False,
        description="Use the in-memory mock instead of a real endpoint"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_required_fields(self) -> list[str]:
        """
        Return settings that are required by the chosen auth flow but unset.

        This is separate from Pydantic validation because what's required
        depends on the auth version.
        """
        missing = []
        if self.hp_auth_version == AuthVersion.V1 and not self.hp_auth_uri:
            missing.append("HP_AUTH_URI")
        return missing


def load_settings(**overrides: Any) -> Settings:
    """
    Build settings from the environment plus explicit overrides.

    Pydantic validation errors become ConfigurationError, naming every
    offending field.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = sorted({
            ".".join(str(part) for part in err["loc"]).upper()
            for err in e.errors()
        })
        raise ConfigurationError(
            f"Invalid or missing settings: {', '.join(fields)}"
        ) from e


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means settings are only loaded once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return load_settings()
