"""Email-domain policy for fetched profiles."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fedauth.models.user import UserInformation

logger = logging.getLogger(__name__)


def validate(
    user_information: UserInformation, allowed_suffixes: Iterable[str]
) -> bool:
    """Check a profile's email against the allowed suffixes.

    An empty suffix list means no restriction. Comparison is
    case-insensitive and locale independent. A suffix starting with ``.``
    also matches the bare domain (``.ok.com`` accepts ``a@ok.com``).
    A profile without an email never matches a configured restriction.
    """
    suffixes = [suffix.lower() for suffix in allowed_suffixes]
    if not suffixes:
        return True

    email = user_information.email
    if not email:
        return False

    email = email.lower()
    domain = "." + email.rpartition("@")[2]
    return any(
        email.endswith(suffix) or (suffix.startswith(".") and domain.endswith(suffix))
        for suffix in suffixes
    )


class EmailDomainValidator:
    """Policy gate bound to the configured suffix list."""

    def __init__(self, allowed_suffixes: Iterable[str] = ()):
        self.allowed_suffixes = tuple(allowed_suffixes)

    def validate(self, user_information: UserInformation) -> bool:
        accepted = validate(user_information, self.allowed_suffixes)
        if not accepted:
            logger.warning(
                f"Email of user {user_information.external_id} does not match "
                "any allowed suffix"
            )
        return accepted
