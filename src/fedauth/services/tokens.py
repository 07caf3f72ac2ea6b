"""Authorization code to access token exchange service.

Implements the RFC 6749 Section 4.1.3 token request for a confidential
client, with strict validation of the token endpoint response.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from fedauth.models.errors import InputError, NetworkError, ProviderResponseError
from fedauth.models.settings import ProviderSettings
from fedauth.models.tokens import AccessToken, AccessTokenResponse
from fedauth.primitives.responses import describe_error_response, parse_json_object

logger = logging.getLogger(__name__)


class AccessTokenExchanger:
    """Exchanges an authorization code for an access token.

    Performs exactly one POST per call. There are no retries: a failed
    exchange ends the login attempt and the user starts a fresh flow.

    Uses application/x-www-form-urlencoded encoding as required by RFC 6749.
    """

    def __init__(
        self, timeout: float = 30.0, http_client: httpx.AsyncClient | None = None
    ):
        """Initialize the exchanger.

        Args:
            timeout: HTTP request timeout in seconds
            http_client: Optional shared client; one is created otherwise
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def exchange(
        self, settings: ProviderSettings, code: str, redirect_uri: str
    ) -> AccessToken:
        """Exchange an authorization code for an access token.

        Args:
            settings: Provider settings holding the client credentials
            code: Authorization code from the provider callback
            redirect_uri: The callback URI used in the authorization request

        Returns:
            AccessToken: Validated access token

        Raises:
            InputError: If code or redirect_uri is empty
            NetworkError: If the token endpoint cannot be reached
            ProviderResponseError: If the response is not a usable token
        """
        if not code:
            raise InputError("An authorization code is required")
        if not redirect_uri:
            raise InputError("A redirect URI is required")

        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        form_data = {
            "client_id": settings.client_id,
            "client_secret": settings.client_secret,
            "redirect_uri": redirect_uri,
            "code": code,
            "grant_type": "authorization_code",
        }

        # Never log the secret or the code
        logger.debug(
            f"Exchanging authorization code at {settings.token_endpoint} "
            f"for client {settings.client_id}"
        )

        try:
            response = await self._http_client.post(
                settings.token_endpoint,
                data=form_data,
                headers=headers,
            )
        except httpx.InvalidURL as e:
            raise NetworkError(f"Invalid token endpoint URL: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"HTTP error during token exchange: {e}") from e

        return self._parse_token_response(response)

    def _parse_token_response(self, response: httpx.Response) -> AccessToken:
        """Validate a token endpoint response and build the AccessToken.

        A 200 status alone does not guarantee a usable token: access_token,
        token_type and a positive expires_in must all be present.
        """
        if response.status_code != 200:
            description = describe_error_response(response)
            logger.error(f"Token exchange failed. {description}")
            raise ProviderResponseError(
                f"Failed to obtain an access token. {description}",
                status_code=response.status_code,
            )

        body = parse_json_object(response, "Token")

        try:
            token_response = AccessTokenResponse.model_validate(body)
        except ValidationError as e:
            raise ProviderResponseError(
                f"Invalid token response format: {e}",
                status_code=response.status_code,
            ) from e

        missing = token_response.missing_fields()
        if missing:
            logger.error(f"Token response missing fields: {', '.join(missing)}")
            raise ProviderResponseError(
                "Retrieved an access token response but it doesn't contain "
                f"one or more of: {', '.join(missing)}",
                status_code=response.status_code,
                missing_fields=missing,
            )

        logger.info("Token exchange successful")
        return token_response.to_access_token()

    async def close(self) -> None:
        """Close the HTTP client if this exchanger created it."""
        if self._owns_client:
            await self._http_client.aclose()
