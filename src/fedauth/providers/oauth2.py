"""Generic OAuth2 authorization-code provider."""

from __future__ import annotations

import logging

import httpx

from fedauth.models.flow import AuthorizationState
from fedauth.models.settings import ProviderSettings, ensure_provider_settings
from fedauth.models.tokens import AccessToken
from fedauth.models.user import UserInformation
from fedauth.services.authorization import build_redirect
from fedauth.services.tokens import AccessTokenExchanger
from fedauth.services.userinfo import (
    ProfileMapper,
    UserInfoFetcher,
    map_standard_profile,
)

logger = logging.getLogger(__name__)


class OAuth2Provider:
    """Provider built from settings, a profile mapper and one HTTP client.

    Both network steps share the same client. Settings are checked at
    construction, so a misconfigured provider never starts a flow.
    """

    def __init__(
        self,
        name: str,
        settings: ProviderSettings,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        mapper: ProfileMapper = map_standard_profile,
    ):
        """Initialize the provider.

        Args:
            name: Provider name reported as the authentication method
            settings: Provider settings
            timeout: HTTP request timeout in seconds
            http_client: Optional shared client; one is created otherwise
            mapper: Mapping from user-info response to UserInformation

        Raises:
            ConfigurationError: If required settings are missing
        """
        self.name = name.lower()
        self.settings = ensure_provider_settings(settings)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self.exchanger = AccessTokenExchanger(timeout, http_client=self._http_client)
        self.fetcher = UserInfoFetcher(
            timeout, http_client=self._http_client, mapper=mapper
        )

        logger.debug(f"Configured identity provider {self.name}")

    def build_authorize_url(self, callback_uri: str) -> tuple[str, AuthorizationState]:
        return build_redirect(self.settings, callback_uri)

    async def exchange_token(self, code: str, redirect_uri: str) -> AccessToken:
        return await self.exchanger.exchange(self.settings, code, redirect_uri)

    async def fetch_user_info(self, token: AccessToken) -> UserInformation:
        return await self.fetcher.fetch(self.settings, token)

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._http_client.aclose()
