"""Provider callback processing.

Drives one authorization callback through code exchange, profile fetch and
policy validation, and decides whether the user is signed in, rejected or
shown an error. No per-request error escapes this module as an exception.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from fedauth.host import AlertSink, SessionSink
from fedauth.models.errors import (
    AuthorizationDenied,
    FederationError,
    PolicyRejected,
    ProtocolError,
    SecurityError,
)
from fedauth.models.flow import AuthorizationState, CallbackParameters, FlowState
from fedauth.models.outcome import CallbackOutcome, OutcomeStatus
from fedauth.models.user import AuthenticatedClient
from fedauth.primitives.security import (
    is_local_redirect,
    sanitize_provider_message,
    validate_state,
)
from fedauth.providers.base import IdentityProvider
from fedauth.services.claims import ClaimsIssuer
from fedauth.services.validation import EmailDomainValidator

logger = logging.getLogger(__name__)

SECURITY_ALERT = "We could not verify your sign-in attempt. Please try again."
POLICY_ALERT = "Your email address is not allowed to sign in to this application."


class CallbackProcessor:
    """Processes the provider's redirect callback for one login attempt.

    State machine:
        AWAITING_CALLBACK -> CODE_RECEIVED -> TOKEN_EXCHANGED -> PROFILE_FETCHED
        -> AUTHENTICATED | REJECTED, with FAILED reachable from every step.

    Security and policy failures force a sign-out of any existing session.
    Nothing is retried; the user starts a new flow with a fresh nonce.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        session: SessionSink,
        alerts: AlertSink | None = None,
        validator: EmailDomainValidator | None = None,
        claims_issuer: ClaimsIssuer | None = None,
        default_target: str = "/",
        account_target: str = "/account/#identityProviders",
        state_max_age: float = 600.0,
    ):
        """Initialize the processor.

        Args:
            provider: Identity provider to exchange and fetch with
            session: Host identity sink for sign-in and sign-out
            alerts: Optional sink for user-visible messages
            validator: Email-domain policy; unrestricted when omitted
            claims_issuer: Claim mapping for validated profiles
            default_target: Landing target for first sign-in and failures
            account_target: Target when linking a provider to a signed-in account
            state_max_age: Seconds an authorization state stays valid
        """
        self.provider = provider
        self.session = session
        self.alerts = alerts
        self.validator = validator or EmailDomainValidator()
        self.claims_issuer = claims_issuer or ClaimsIssuer()
        self.default_target = default_target
        self.account_target = account_target
        self.state_max_age = state_max_age

    async def process(
        self,
        callback_params: CallbackParameters | Mapping[str, str | list[str]],
        stored_state: AuthorizationState | None,
        return_url: str | None = None,
    ) -> CallbackOutcome:
        """Process a provider callback.

        Args:
            callback_params: Parsed callback or its raw query parameters
            stored_state: State persisted when the redirect was built
            return_url: Optional local URL to land on after sign-in

        Returns:
            CallbackOutcome describing redirect, claims and alert
        """
        if isinstance(callback_params, CallbackParameters):
            params = callback_params
        else:
            params = CallbackParameters.from_query(callback_params)

        # Decided before sign-in changes the session
        success_target = self._success_target(return_url or params.return_url)
        state = FlowState.AWAITING_CALLBACK

        try:
            if params.has_error():
                detail = ""
                if params.error_description:
                    detail = f" ({sanitize_provider_message(params.error_description)})"
                raise AuthorizationDenied(
                    f"Failed to retrieve an authorization code from "
                    f"{self.provider.name}. The error provided is: "
                    f"{sanitize_provider_message(params.error)}{detail}",
                    provider_error=params.error,
                )

            if not params.has_code():
                raise ProtocolError(
                    "No code parameter provided in the response query string from "
                    f"{self.provider.name}"
                )

            self._check_state(params, stored_state)
            state = FlowState.CODE_RECEIVED

            token = await self.provider.exchange_token(
                params.code, stored_state.callback_uri
            )
            state = FlowState.TOKEN_EXCHANGED

            user_information = await self.provider.fetch_user_info(token)
            state = FlowState.PROFILE_FETCHED

            client = AuthenticatedClient(self.provider.name, token, user_information)

            if not self.validator.validate(client.user_information):
                raise PolicyRejected(
                    f"User {user_information.external_id} rejected by email policy"
                )

        except (SecurityError, PolicyRejected) as e:
            return self._reject(state, e)
        except FederationError as e:
            return self._fail(state, e)
        except asyncio.CancelledError:
            logger.warning(f"Callback processing cancelled in state {state.value}")
            raise

        claims = self.claims_issuer.issue(
            client.provider_name, client.user_information
        )
        self.session.sign_in(claims)

        logger.info(
            f"Authenticated {client.user_information.external_id} "
            f"via {client.provider_name}"
        )
        return CallbackOutcome(
            status=OutcomeStatus.AUTHENTICATED,
            final_state=FlowState.AUTHENTICATED,
            redirect_target=success_target,
            claims=claims,
        )

    def _check_state(
        self, params: CallbackParameters, stored_state: AuthorizationState | None
    ) -> None:
        validate_state(stored_state.nonce if stored_state else None, params.state)
        if stored_state.is_expired(self.state_max_age):
            raise SecurityError("Authorization state has expired")

    def _success_target(self, return_url: str | None) -> str:
        if return_url:
            if is_local_redirect(return_url):
                return return_url
            logger.warning(f"Ignoring non-local return URL {return_url!r}")

        if self.session.is_authenticated():
            return self.account_target
        return self.default_target

    def _reject(self, state: FlowState, error: FederationError) -> CallbackOutcome:
        """Sign out and reject: a half-authenticated state must not linger."""
        logger.warning(f"Callback rejected in state {state.value}: {error}")
        self.session.sign_out()

        message = SECURITY_ALERT if isinstance(error, SecurityError) else POLICY_ALERT
        self._alert(message)
        return CallbackOutcome(
            status=OutcomeStatus.REJECTED,
            final_state=FlowState.REJECTED,
            redirect_target=self.default_target,
            alert_message=message,
            signed_out=True,
            error=error,
        )

    def _fail(self, state: FlowState, error: FederationError) -> CallbackOutcome:
        if isinstance(error, AuthorizationDenied):
            logger.warning(
                f"Provider {self.provider.name} returned error: {error.provider_error}"
            )
        else:
            logger.error(f"Callback failed in state {state.value}: {error}")

        message = sanitize_provider_message(str(error))
        self._alert(message)
        return CallbackOutcome(
            status=OutcomeStatus.FAILED,
            final_state=FlowState.FAILED,
            redirect_target=self.default_target,
            alert_message=message,
            error=error,
        )

    def _alert(self, message: str) -> None:
        if self.alerts is not None:
            self.alerts.add_alert("error", message)
