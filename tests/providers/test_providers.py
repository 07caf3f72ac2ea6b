"""Tests for provider variants and the provider registry."""

from dataclasses import replace
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import pytest

from fedauth.config import FederationSettings
from fedauth.models.errors import ConfigurationError
from fedauth.models.user import Gender, UserInfoResponse
from fedauth.providers.google import (
    GOOGLE_AUTHORIZE_ENDPOINT,
    create_google_provider,
    google_settings,
    map_google_profile,
)
from fedauth.providers.oauth2 import OAuth2Provider
from fedauth.providers.registry import build_provider
from tests.conftest import make_response, token_body


class TestOAuth2Provider:
    def test_incomplete_settings_abort_construction(self, provider_settings) -> None:
        settings = replace(provider_settings, client_secret="")

        with pytest.raises(ConfigurationError) as exc_info:
            OAuth2Provider("custom", settings, http_client=AsyncMock())

        assert "client_secret" in str(exc_info.value)

    def test_name_is_lower_cased(self, provider_settings) -> None:
        provider = OAuth2Provider("GitLab", provider_settings, http_client=AsyncMock())

        assert provider.name == "gitlab"

    async def test_exchange_then_fetch_share_one_client(
        self, provider_settings
    ) -> None:
        # Arrange
        http_client = AsyncMock()
        http_client.post.return_value = make_response(200, token_body())
        http_client.get.return_value = make_response(200, {"sub": "u1"})
        provider = OAuth2Provider("custom", provider_settings, http_client=http_client)

        # Act
        token = await provider.exchange_token("code", "https://chat.example.com/cb")
        info = await provider.fetch_user_info(token)

        # Assert
        assert info.external_id == "u1"
        http_client.post.assert_awaited_once()
        http_client.get.assert_awaited_once()

    async def test_close_leaves_shared_client_open(self, provider_settings) -> None:
        http_client = AsyncMock()
        provider = OAuth2Provider("custom", provider_settings, http_client=http_client)

        await provider.close()

        http_client.aclose.assert_not_called()


class TestGoogleProvider:
    def test_redirect_carries_hosted_domain(self) -> None:
        # Arrange
        provider = create_google_provider(
            google_settings(
                "client-123", "secret-456", domain_restriction="example.com"
            ),
            http_client=AsyncMock(),
        )

        # Act
        url, state = provider.build_authorize_url("https://chat.example.com/cb")

        # Assert
        assert url.startswith(GOOGLE_AUTHORIZE_ENDPOINT + "?")
        query = parse_qs(urlparse(url).query)
        assert query["hd"] == ["example.com"]
        assert query["state"] == [state.nonce]
        assert "https://www.googleapis.com/auth/userinfo.email" in query["scope"][0]
        assert provider.name == "google"

    def test_profile_mapping(self) -> None:
        # Arrange
        profile = UserInfoResponse.model_validate(
            {
                "id": "1098",
                "email": "ada@example.com",
                "name": "Ada Lovelace",
                "given_name": "Ada",
                "gender": "female",
                "locale": "en",
            }
        )

        # Act
        info = map_google_profile(profile)

        # Assert
        assert info.external_id == "1098"
        assert info.user_name == "Ada"
        assert info.display_name == "Ada Lovelace"
        assert info.gender is Gender.FEMALE

    def test_profile_without_id_is_invalid(self) -> None:
        with pytest.raises(ValueError):
            map_google_profile(UserInfoResponse(sub="u1"))


class TestRegistry:
    def test_builds_google_by_default(self) -> None:
        settings = FederationSettings(
            _env_file=None, client_id="client-123", client_secret="secret-456"
        )

        provider = build_provider(settings, http_client=AsyncMock())

        assert provider.name == "google"

    def test_builds_generic_provider(self) -> None:
        settings = FederationSettings(
            _env_file=None,
            provider="oauth2",
            provider_name="Keycloak",
            client_id="client-123",
            client_secret="secret-456",
            authorize_endpoint="https://idp.example.com/authorize",
            token_endpoint="https://idp.example.com/token",
            user_info_endpoint="https://idp.example.com/userinfo",
        )

        provider = build_provider(settings, http_client=AsyncMock())

        assert provider.name == "keycloak"
        assert provider.settings.token_endpoint == "https://idp.example.com/token"

    def test_generic_provider_without_endpoints_fails(self) -> None:
        settings = FederationSettings(
            _env_file=None,
            provider="oauth2",
            client_id="client-123",
            client_secret="secret-456",
        )

        with pytest.raises(ConfigurationError):
            build_provider(settings, http_client=AsyncMock())


class TestEndpointValidation:
    @pytest.mark.parametrize(
        "endpoint",
        ["https://exa mple.com:xx/token", "/o/oauth2/token", "ftp://idp.example.com"],
    )
    def test_malformed_endpoint_aborts_construction(
        self, provider_settings, endpoint
    ) -> None:
        settings = replace(provider_settings, token_endpoint=endpoint)

        with pytest.raises(ConfigurationError) as exc_info:
            OAuth2Provider("custom", settings, http_client=AsyncMock())

        assert "token_endpoint" in str(exc_info.value)
