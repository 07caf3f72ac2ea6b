"""Builds the configured identity provider."""

from __future__ import annotations

import httpx

from fedauth.config import FederationSettings
from fedauth.providers.base import IdentityProvider
from fedauth.providers.google import create_google_provider
from fedauth.providers.oauth2 import OAuth2Provider


def build_provider(
    settings: FederationSettings, http_client: httpx.AsyncClient | None = None
) -> IdentityProvider:
    """Create the provider named by ``settings.provider``.

    Raises:
        ConfigurationError: If the provider settings are incomplete
    """
    provider_settings = settings.to_provider_settings()

    if settings.provider == "google":
        return create_google_provider(
            provider_settings, timeout=settings.http_timeout, http_client=http_client
        )

    return OAuth2Provider(
        settings.provider_name or "oauth2",
        provider_settings,
        timeout=settings.http_timeout,
        http_client=http_client,
    )
