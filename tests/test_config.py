import pytest

from fedauth.config import FederationSettings
from fedauth.providers.google import (
    GOOGLE_AUTHORIZE_ENDPOINT,
    GOOGLE_DEFAULT_SCOPES,
    GOOGLE_TOKEN_ENDPOINT,
    GOOGLE_USER_INFO_ENDPOINT,
)


class TestFederationSettings:
    def test_reads_environment(self, monkeypatch) -> None:
        # Arrange
        monkeypatch.setenv("FEDAUTH_CLIENT_ID", "client-123")
        monkeypatch.setenv("FEDAUTH_CLIENT_SECRET", "secret-456")
        monkeypatch.setenv("FEDAUTH_DOMAIN_RESTRICTION", "example.com")
        monkeypatch.setenv("FEDAUTH_ALLOWED_EMAIL_SUFFIXES", '[".example.com"]')
        monkeypatch.setenv("FEDAUTH_HTTP_TIMEOUT", "5")

        # Act
        settings = FederationSettings(_env_file=None)

        # Assert
        assert settings.client_id == "client-123"
        assert settings.allowed_email_suffixes == [".example.com"]
        assert settings.http_timeout == 5.0
        assert settings.domain_restriction == "example.com"

    def test_google_defaults_fill_missing_endpoints(self) -> None:
        settings = FederationSettings(
            _env_file=None, client_id="client-123", client_secret="secret-456"
        )

        provider_settings = settings.to_provider_settings()

        assert provider_settings.authorize_endpoint == GOOGLE_AUTHORIZE_ENDPOINT
        assert provider_settings.token_endpoint == GOOGLE_TOKEN_ENDPOINT
        assert provider_settings.user_info_endpoint == GOOGLE_USER_INFO_ENDPOINT
        assert provider_settings.scopes == GOOGLE_DEFAULT_SCOPES

    def test_generic_provider_keeps_configured_endpoints(self) -> None:
        # Arrange
        settings = FederationSettings(
            _env_file=None,
            provider="oauth2",
            client_id="client-123",
            client_secret="secret-456",
            scopes="openid, email",
            authorize_endpoint="https://idp.example.com/authorize",
            token_endpoint="https://idp.example.com/token",
            user_info_endpoint="https://idp.example.com/userinfo",
        )

        # Act
        provider_settings = settings.to_provider_settings()

        # Assert
        assert provider_settings.scopes == frozenset({"openid", "email"})
        assert provider_settings.token_endpoint == "https://idp.example.com/token"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            FederationSettings(_env_file=None, http_timeout=0)
