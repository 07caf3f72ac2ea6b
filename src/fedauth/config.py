"""Runtime settings for identity federation.

Loaded once at startup from environment variables (prefix ``FEDAUTH_``)
or a ``.env`` file. List values are given as JSON arrays, e.g.
``FEDAUTH_ALLOWED_EMAIL_SUFFIXES='[".example.com"]'``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fedauth.models.settings import ProviderSettings
from fedauth.providers.google import (
    GOOGLE_AUTHORIZE_ENDPOINT,
    GOOGLE_DEFAULT_SCOPES,
    GOOGLE_TOKEN_ENDPOINT,
    GOOGLE_USER_INFO_ENDPOINT,
)


class FederationSettings(BaseSettings):
    """Startup configuration for one identity provider and the local policy."""

    # Provider
    provider: Literal["google", "oauth2"] = "google"
    provider_name: str | None = Field(
        default=None, description="Name reported as the authentication method"
    )
    client_id: str = ""
    client_secret: str = ""
    scopes: list[str] = Field(default_factory=list)
    authorize_endpoint: str | None = None
    token_endpoint: str | None = None
    user_info_endpoint: str | None = None
    domain_restriction: str | None = Field(
        default=None, description="Hosted-domain hint sent as the hd parameter"
    )

    # Local policy
    allowed_email_suffixes: list[str] = Field(default_factory=list)

    # Flow
    http_timeout: float = Field(default=30.0, gt=0)
    state_max_age: float = Field(
        default=600.0, gt=0, description="Seconds a redirect attempt stays valid"
    )
    default_redirect: str = "/"
    account_redirect: str = "/account/#identityProviders"

    model_config = SettingsConfigDict(
        env_prefix="FEDAUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("scopes", "allowed_email_suffixes", mode="before")
    @classmethod
    def split_comma_separated(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    def to_provider_settings(self) -> ProviderSettings:
        """Build the immutable provider settings.

        Google endpoints and scopes fill in whatever is not configured.
        Missing values for a generic provider surface later as a
        ConfigurationError when the provider is constructed.
        """
        if self.provider == "google":
            return ProviderSettings(
                client_id=self.client_id,
                client_secret=self.client_secret,
                authorize_endpoint=self.authorize_endpoint or GOOGLE_AUTHORIZE_ENDPOINT,
                token_endpoint=self.token_endpoint or GOOGLE_TOKEN_ENDPOINT,
                user_info_endpoint=self.user_info_endpoint or GOOGLE_USER_INFO_ENDPOINT,
                scopes=frozenset(self.scopes) or GOOGLE_DEFAULT_SCOPES,
                domain_restriction=self.domain_restriction,
            )

        return ProviderSettings(
            client_id=self.client_id,
            client_secret=self.client_secret,
            authorize_endpoint=self.authorize_endpoint or "",
            token_endpoint=self.token_endpoint or "",
            user_info_endpoint=self.user_info_endpoint or "",
            scopes=frozenset(self.scopes),
            domain_restriction=self.domain_restriction,
        )


@lru_cache
def get_settings() -> FederationSettings:
    """Return the cached settings instance."""
    return FederationSettings()
