"""Capability interface implemented by every identity provider variant."""

from __future__ import annotations

from typing import Protocol

from fedauth.models.flow import AuthorizationState
from fedauth.models.settings import ProviderSettings
from fedauth.models.tokens import AccessToken
from fedauth.models.user import UserInformation


class IdentityProvider(Protocol):
    """Protocol for one OAuth2 identity provider.

    Variants differ in endpoints, scopes and profile mapping, but the
    callback processor drives all of them through these three calls.
    """

    name: str
    settings: ProviderSettings

    def build_authorize_url(self, callback_uri: str) -> tuple[str, AuthorizationState]:
        """Build the redirect URL and the state to persist for this attempt."""
        ...

    async def exchange_token(self, code: str, redirect_uri: str) -> AccessToken:
        """Exchange an authorization code for an access token."""
        ...

    async def fetch_user_info(self, token: AccessToken) -> UserInformation:
        """Fetch the authenticated user's profile."""
        ...

    async def close(self) -> None:
        ...
