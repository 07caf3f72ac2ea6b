"""Immutable configuration for one identity provider."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from fedauth.models.errors import ConfigurationError


@dataclass(frozen=True)
class ProviderSettings:
    """Configuration for a single OAuth2 identity provider.

    Created once at startup and shared read-only by every login flow.
    """

    client_id: str
    client_secret: str
    authorize_endpoint: str
    token_endpoint: str
    user_info_endpoint: str
    scopes: frozenset[str] = field(default_factory=frozenset)
    domain_restriction: str | None = None  # Hosted-domain hint ("hd")


def ensure_provider_settings(settings: ProviderSettings) -> ProviderSettings:
    """Check that every setting a flow depends on is present.

    Args:
        settings: Provider settings loaded from configuration

    Returns:
        The same settings, for chaining

    Raises:
        ConfigurationError: If a required value is missing or an endpoint
            is not an absolute http(s) URL
    """
    required = {
        "client_id": settings.client_id,
        "client_secret": settings.client_secret,
        "authorize_endpoint": settings.authorize_endpoint,
        "token_endpoint": settings.token_endpoint,
        "user_info_endpoint": settings.user_info_endpoint,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Provider settings missing required values: {', '.join(missing)}"
        )

    for name in ("authorize_endpoint", "token_endpoint", "user_info_endpoint"):
        value = getattr(settings, name)
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid {name} {value!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"{name} must be an absolute http(s) URL")

    return settings
