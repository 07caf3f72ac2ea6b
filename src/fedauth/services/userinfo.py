"""User profile retrieval service.

Fetches the authenticated user's profile from the provider's user-info
endpoint and maps it into a normalized UserInformation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from fedauth.models.errors import InputError, NetworkError, ProviderResponseError
from fedauth.models.settings import ProviderSettings
from fedauth.models.tokens import AccessToken
from fedauth.models.user import Gender, UserInfoResponse, UserInformation
from fedauth.primitives.responses import describe_error_response, parse_json_object

logger = logging.getLogger(__name__)

ProfileMapper = Callable[[UserInfoResponse], UserInformation]


def map_standard_profile(profile: UserInfoResponse) -> UserInformation:
    """Map an OpenID Connect style profile (``sub``, ``preferred_username``)."""
    return UserInformation(
        external_id=profile.id or profile.sub or "",
        email=profile.email,
        user_name=profile.preferred_username or profile.login or profile.given_name,
        display_name=profile.name,
        locale=profile.locale,
        picture_url=profile.picture,
        gender=Gender.from_provider(profile.gender),
    )


class UserInfoFetcher:
    """Retrieves the user profile with an access token.

    Performs exactly one GET per call, passing the token as the
    ``access_token`` query parameter. The external identifier is the only
    mandatory field of the response.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        mapper: ProfileMapper = map_standard_profile,
    ):
        """Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds
            http_client: Optional shared client; one is created otherwise
            mapper: Provider-specific mapping from response to profile
        """
        self.timeout = timeout
        self.mapper = mapper
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def fetch(
        self, settings: ProviderSettings, token: AccessToken | str
    ) -> UserInformation:
        """Fetch the authenticated user's profile.

        Args:
            settings: Provider settings holding the user-info endpoint
            token: Access token from the exchange step

        Returns:
            UserInformation: Normalized profile

        Raises:
            InputError: If the token is empty
            NetworkError: If the user-info endpoint cannot be reached
            ProviderResponseError: If the response is unusable or has no id
        """
        raw_token = token.token if isinstance(token, AccessToken) else token
        if not raw_token:
            raise InputError("An access token is required")

        logger.debug(f"Fetching user information from {settings.user_info_endpoint}")

        try:
            response = await self._http_client.get(
                settings.user_info_endpoint,
                params={"access_token": raw_token},
                headers={"Accept": "application/json"},
            )
        except httpx.InvalidURL as e:
            raise NetworkError(f"Invalid user info endpoint URL: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"HTTP error during user info fetch: {e}") from e

        return self._parse_user_info_response(response)

    def _parse_user_info_response(self, response: httpx.Response) -> UserInformation:
        if response.status_code != 200:
            description = describe_error_response(response)
            logger.error(f"User info fetch failed. {description}")
            raise ProviderResponseError(
                f"Failed to obtain user information. {description}",
                status_code=response.status_code,
            )

        body = parse_json_object(response, "User info")

        try:
            profile = UserInfoResponse.model_validate(body)
        except ValidationError as e:
            raise ProviderResponseError(
                f"Invalid user info response format: {e}",
                status_code=response.status_code,
            ) from e

        try:
            user_information = self.mapper(profile)
        except ValueError as e:
            logger.error("User info response has no user id")
            raise ProviderResponseError(
                "Unable to retrieve the user id from the provider, "
                "the user may have denied the authorization.",
                status_code=response.status_code,
                missing_fields=("id",),
            ) from e

        logger.info(f"Fetched user information for {user_information.external_id}")
        return user_information

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._http_client.aclose()
