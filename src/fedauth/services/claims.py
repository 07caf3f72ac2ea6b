"""Claim issuing for validated profiles."""

from __future__ import annotations

from fedauth.models.claims import Claim, ClaimType
from fedauth.models.user import UserInformation


class ClaimsIssuer:
    """Maps a validated profile into the host's claim set."""

    def issue(
        self, provider_name: str, user_information: UserInformation
    ) -> frozenset[Claim]:
        claims = {
            Claim(ClaimType.IDENTIFIER, user_information.external_id),
            Claim(ClaimType.AUTH_METHOD, provider_name),
        }

        if user_information.user_name:
            claims.add(Claim(ClaimType.NAME, user_information.user_name))

        if user_information.email:
            claims.add(Claim(ClaimType.EMAIL, user_information.email))

        return frozenset(claims)
