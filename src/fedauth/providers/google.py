"""Google identity provider variant.

REFERENCE: https://developers.google.com/identity/protocols/oauth2/web-server
"""

from __future__ import annotations

import httpx

from fedauth.models.settings import ProviderSettings
from fedauth.models.user import Gender, UserInfoResponse, UserInformation
from fedauth.providers.oauth2 import OAuth2Provider

GOOGLE_AUTHORIZE_ENDPOINT = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_ENDPOINT = "https://accounts.google.com/o/oauth2/token"
GOOGLE_USER_INFO_ENDPOINT = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_DEFAULT_SCOPES = frozenset(
    {
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
    }
)


def map_google_profile(profile: UserInfoResponse) -> UserInformation:
    """Map Google's v2 userinfo payload. The given name is the user name."""
    return UserInformation(
        external_id=profile.id or "",
        email=profile.email,
        user_name=profile.given_name,
        display_name=profile.name,
        locale=profile.locale,
        picture_url=profile.picture,
        gender=Gender.from_provider(profile.gender),
    )


def google_settings(
    client_id: str,
    client_secret: str,
    domain_restriction: str | None = None,
    scopes: frozenset[str] | None = None,
) -> ProviderSettings:
    return ProviderSettings(
        client_id=client_id,
        client_secret=client_secret,
        authorize_endpoint=GOOGLE_AUTHORIZE_ENDPOINT,
        token_endpoint=GOOGLE_TOKEN_ENDPOINT,
        user_info_endpoint=GOOGLE_USER_INFO_ENDPOINT,
        scopes=scopes or GOOGLE_DEFAULT_SCOPES,
        domain_restriction=domain_restriction,
    )


def create_google_provider(
    settings: ProviderSettings,
    timeout: float = 30.0,
    http_client: httpx.AsyncClient | None = None,
) -> OAuth2Provider:
    """Create a provider speaking Google's OAuth2 dialect."""
    return OAuth2Provider(
        "Google",
        settings,
        timeout=timeout,
        http_client=http_client,
        mapper=map_google_profile,
    )
