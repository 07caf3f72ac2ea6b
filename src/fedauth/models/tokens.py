"""Access token models.

Contains the provider's token endpoint payload and the validated access
token handed to the user-info step.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class AccessToken:
    """Validated access token for calling the provider's profile API.

    All three fields must be non-empty/positive; anything else is rejected
    before a token object is ever built.
    """

    token: str
    token_type: str
    expires_at: float  # Unix timestamp

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token must not be empty")
        if not self.token_type:
            raise ValueError("token_type must not be empty")
        if self.expires_at <= 0:
            raise ValueError("expires_at must be positive")

    def is_expired(self, now: float | None = None) -> bool:
        current = time.time() if now is None else now
        return current >= self.expires_at

    def __repr__(self) -> str:
        return (
            f"AccessToken(token='***', token_type={self.token_type!r}, "
            f"expires_at={self.expires_at!r})"
        )


class AccessTokenResponse(BaseModel):
    """Token endpoint response body (RFC 6749 Section 5.1)."""

    model_config = ConfigDict(extra="ignore")

    access_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None  # Seconds until expiry

    def missing_fields(self) -> tuple[str, ...]:
        """Return the names of fields that make this response unusable."""
        missing = []
        if not self.access_token:
            missing.append("access_token")
        if self.expires_in is None or self.expires_in <= 0:
            missing.append("expires_in")
        if not self.token_type:
            missing.append("token_type")
        return tuple(missing)

    def to_access_token(self, now: float | None = None) -> AccessToken:
        """Convert a complete response to an AccessToken.

        Raises:
            ValueError: If the response is missing a required field
        """
        missing = self.missing_fields()
        if missing:
            raise ValueError(f"Token response missing: {', '.join(missing)}")

        issued_at = time.time() if now is None else now
        return AccessToken(
            token=self.access_token,
            token_type=self.token_type,
            expires_at=issued_at + self.expires_in,
        )
