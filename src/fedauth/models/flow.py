"""Authorization flow models.

Contains the per-attempt authorization state, the redirect request and
the parsed provider callback.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from urllib.parse import parse_qs, quote, urlencode, urlparse


@dataclass(frozen=True)
class AuthorizationState:
    """State for one redirect attempt.

    The nonce is round-tripped unmodified through the provider and must be
    matched exactly once on callback.
    """

    nonce: str
    callback_uri: str
    created_at: float  # Unix timestamp

    def is_expired(self, max_age: float, now: float | None = None) -> bool:
        """Check whether this attempt is older than ``max_age`` seconds."""
        current = time.time() if now is None else now
        return current - self.created_at > max_age


@dataclass(frozen=True)
class AuthorizationRequest:
    """Authorization redirect parameters for one attempt."""

    authorize_endpoint: str
    client_id: str
    redirect_uri: str
    state: str | None = None
    scopes: tuple[str, ...] = ()
    hosted_domain: str | None = None  # Google "hd" hint

    def build_authorization_url(self) -> str:
        """Build the complete authorization URL."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
        }

        if self.scopes:
            params["scope"] = " ".join(self.scopes)
        if self.state:
            params["state"] = self.state
        if self.hosted_domain and self.hosted_domain.strip():
            params["hd"] = self.hosted_domain.strip()

        separator = "&" if "?" in self.authorize_endpoint else "?"
        query = urlencode(params, quote_via=quote)
        return f"{self.authorize_endpoint}{separator}{query}"


def _single(value: str | list[str] | tuple[str, ...] | None) -> str | None:
    # Query parsers hand back either scalars or lists of values
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


@dataclass(frozen=True)
class CallbackParameters:
    """Query parameters the provider sends back to the callback URI."""

    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    return_url: str | None = None

    @classmethod
    def from_query(
        cls, params: Mapping[str, str | list[str] | tuple[str, ...]]
    ) -> CallbackParameters:
        return cls(
            code=_single(params.get("code")),
            state=_single(params.get("state")),
            error=_single(params.get("error")),
            error_description=_single(params.get("error_description")),
            return_url=_single(params.get("returnUrl")),
        )

    @classmethod
    def from_url(cls, callback_url: str) -> CallbackParameters:
        """Parse a full callback URL received from the provider."""
        return cls.from_query(parse_qs(urlparse(callback_url).query))

    def has_error(self) -> bool:
        return bool(self.error)

    def has_code(self) -> bool:
        return bool(self.code)


class FlowState(str, Enum):
    """Steps of one callback processing run."""

    INITIATED = "initiated"
    AWAITING_CALLBACK = "awaiting_callback"
    CODE_RECEIVED = "code_received"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    FAILED = "failed"
