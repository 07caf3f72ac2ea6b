import time
from collections.abc import Set
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from fedauth.models.claims import Claim
from fedauth.models.flow import AuthorizationState
from fedauth.models.settings import ProviderSettings

CALLBACK_URI = "https://chat.example.com/authentication/callback"


class FakeSession:
    """In-memory stand-in for the host's identity layer."""

    def __init__(self, authenticated: bool = False):
        self.authenticated = authenticated
        self.claims: Set[Claim] | None = None
        self.sign_in_calls = 0
        self.sign_out_calls = 0

    def is_authenticated(self) -> bool:
        return self.authenticated

    def sign_in(self, claims: Set[Claim]) -> None:
        self.sign_in_calls += 1
        self.claims = claims
        self.authenticated = True

    def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.claims = None
        self.authenticated = False


class FakeAlerts:
    def __init__(self):
        self.alerts: list[tuple[str, str]] = []

    def add_alert(self, kind: str, message: str) -> None:
        self.alerts.append((kind, message))


def make_response(status_code: int = 200, body: Any = None) -> MagicMock:
    """Build a mock httpx response returning ``body`` from json()."""
    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = "OK" if status_code == 200 else "Error"
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def token_body(**overrides: Any) -> dict[str, Any]:
    body = {
        "access_token": "ya29.access-token",
        "expires_in": 3600,
        "token_type": "Bearer",
    }
    body.update(overrides)
    return body


@pytest.fixture
def provider_settings() -> ProviderSettings:
    return ProviderSettings(
        client_id="client-123",
        client_secret="secret-456",
        authorize_endpoint="https://auth.example.com/o/oauth2/auth",
        token_endpoint="https://auth.example.com/o/oauth2/token",
        user_info_endpoint="https://api.example.com/oauth2/v2/userinfo",
        scopes=frozenset({"profile", "email"}),
    )


@pytest.fixture
def stored_state() -> AuthorizationState:
    return AuthorizationState(
        nonce="nonce-abc123", callback_uri=CALLBACK_URI, created_at=time.time()
    )


@pytest.fixture
def http_client() -> AsyncMock:
    return AsyncMock()
