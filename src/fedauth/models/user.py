"""User profile models.

Contains the provider's user-info payload, the normalized profile and the
transient pairing of provider, token and profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from fedauth.models.tokens import AccessToken


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def from_provider(cls, value: str | None) -> Gender:
        """Map a provider gender string to the local enum.

        Unknown or empty values map to UNKNOWN instead of failing.
        """
        if not value:
            return cls.UNKNOWN
        normalized = value.strip().casefold()
        if normalized in ("male", "m"):
            return cls.MALE
        if normalized in ("female", "f"):
            return cls.FEMALE
        return cls.UNKNOWN


@dataclass(frozen=True)
class UserInformation:
    """Normalized profile of the authenticated user.

    Only ``external_id`` is guaranteed; the provider may withhold the rest
    when the user declines optional consent scopes.
    """

    external_id: str
    email: str | None = None
    user_name: str | None = None
    display_name: str | None = None
    locale: str | None = None
    picture_url: str | None = None
    gender: Gender = Gender.UNKNOWN

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError("external_id must not be empty")


@dataclass(frozen=True)
class AuthenticatedClient:
    """Result of a successful exchange and fetch for one callback."""

    provider_name: str
    access_token: AccessToken
    user_information: UserInformation


class UserInfoResponse(BaseModel):
    """User-info endpoint response body.

    Covers the fields of Google's v2 userinfo payload and the OpenID
    Connect standard claims; anything else is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    sub: str | None = None
    email: str | None = None
    name: str | None = None
    given_name: str | None = None
    preferred_username: str | None = None
    login: str | None = None
    locale: str | None = None
    picture: str | None = None
    gender: str | None = None

    @field_validator("id", "sub", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        # Some providers send numeric ids
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator(
        "email",
        "name",
        "given_name",
        "preferred_username",
        "login",
        "locale",
        "picture",
        "gender",
        mode="before",
    )
    @classmethod
    def drop_unexpected_types(cls, v: Any) -> Any:
        # Optional fields never fail the fetch; odd shapes count as absent
        return v if isinstance(v, str) else None
