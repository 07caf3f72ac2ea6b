"""Authorization redirect construction.

Builds the provider redirect URL together with a fresh anti-forgery state
for one login attempt.
"""

from __future__ import annotations

import logging
import time

from fedauth.models.errors import ConfigurationError
from fedauth.models.flow import AuthorizationRequest, AuthorizationState
from fedauth.models.settings import ProviderSettings
from fedauth.primitives.security import generate_state

logger = logging.getLogger(__name__)


def build_redirect(
    settings: ProviderSettings,
    callback_uri: str | None,
    now: float | None = None,
) -> tuple[str, AuthorizationState]:
    """Build the provider redirect URL for a new login attempt.

    The caller must persist the returned state (keyed by session or flow)
    until the callback arrives, and discard it after one use.

    Args:
        settings: Provider settings
        callback_uri: Absolute URI the provider redirects back to
        now: Optional creation timestamp, defaults to the current time

    Returns:
        Tuple of (redirect_url, authorization_state)

    Raises:
        ConfigurationError: If the callback URI or client id is missing
    """
    if not callback_uri:
        raise ConfigurationError("A callback URI is required to build a redirect")
    if not settings.client_id:
        raise ConfigurationError("Provider settings have no client_id")
    if not settings.authorize_endpoint:
        raise ConfigurationError("Provider settings have no authorize_endpoint")

    state = AuthorizationState(
        nonce=generate_state(),
        callback_uri=callback_uri,
        created_at=time.time() if now is None else now,
    )

    request = AuthorizationRequest(
        authorize_endpoint=settings.authorize_endpoint,
        client_id=settings.client_id,
        redirect_uri=callback_uri,
        state=state.nonce,
        scopes=tuple(sorted(settings.scopes)),
        hosted_domain=settings.domain_restriction,
    )
    redirect_url = request.build_authorization_url()

    logger.debug(
        f"Built authorization redirect for client {settings.client_id} "
        f"to {settings.authorize_endpoint}"
    )
    return redirect_url, state
