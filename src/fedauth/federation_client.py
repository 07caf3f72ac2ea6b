"""Identity federation client orchestration.

Ties one configured provider, the state store and the callback processor
together behind the two calls a web handler needs: start a login and
complete it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fedauth.config import FederationSettings, get_settings
from fedauth.host import AlertSink, SessionSink
from fedauth.models.flow import CallbackParameters
from fedauth.models.outcome import CallbackOutcome
from fedauth.providers.base import IdentityProvider
from fedauth.providers.registry import build_provider
from fedauth.services.callback import CallbackProcessor
from fedauth.services.state_store import InMemoryStateStore, StateStore
from fedauth.services.validation import EmailDomainValidator

logger = logging.getLogger(__name__)


class FederationClient:
    """Authorization-code login against one identity provider.

    Shared across requests: it holds only the provider (with its immutable
    settings) and the state store. Host collaborators are passed per call.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        state_store: StateStore | None = None,
        allowed_email_suffixes: tuple[str, ...] = (),
        default_target: str = "/",
        account_target: str = "/account/#identityProviders",
        state_max_age: float = 600.0,
    ):
        self.provider = provider
        self.state_store = state_store or InMemoryStateStore()
        self.validator = EmailDomainValidator(allowed_email_suffixes)
        self.default_target = default_target
        self.account_target = account_target
        self.state_max_age = state_max_age

    @classmethod
    def from_settings(
        cls,
        settings: FederationSettings | None = None,
        state_store: StateStore | None = None,
    ) -> FederationClient:
        """Build a client from startup configuration.

        Raises:
            ConfigurationError: If the provider settings are incomplete
        """
        settings = settings or get_settings()
        return cls(
            build_provider(settings),
            state_store=state_store,
            allowed_email_suffixes=tuple(settings.allowed_email_suffixes),
            default_target=settings.default_redirect,
            account_target=settings.account_redirect,
            state_max_age=settings.state_max_age,
        )

    async def begin(self, flow_key: str, callback_uri: str) -> str:
        """Start a login attempt.

        Args:
            flow_key: Unique key for this attempt, e.g. session id plus nonce
            callback_uri: Absolute URI the provider redirects back to

        Returns:
            URL to redirect the user's browser to

        Raises:
            ConfigurationError: If the callback URI is missing
        """
        redirect_url, state = self.provider.build_authorize_url(callback_uri)
        await self.state_store.save(flow_key, state)

        logger.info(f"Starting {self.provider.name} login for flow {flow_key}")
        return redirect_url

    async def complete(
        self,
        flow_key: str,
        callback_params: CallbackParameters | Mapping[str, str | list[str]],
        session: SessionSink,
        alerts: AlertSink | None = None,
        return_url: str | None = None,
    ) -> CallbackOutcome:
        """Complete a login attempt from the provider callback.

        The stored state is removed before processing, so a replayed
        callback for the same flow is rejected.
        """
        stored_state = await self.state_store.pop(flow_key)
        if stored_state is None:
            logger.warning(f"No authorization state stored for flow {flow_key}")

        processor = CallbackProcessor(
            self.provider,
            session,
            alerts=alerts,
            validator=self.validator,
            default_target=self.default_target,
            account_target=self.account_target,
            state_max_age=self.state_max_age,
        )
        return await processor.process(callback_params, stored_state, return_url)

    async def close(self) -> None:
        """Close the provider's HTTP connections."""
        await self.provider.close()
