"""Claim models handed to the host's identity layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ClaimType(str, Enum):
    # Names follow the OpenID Connect standard claims
    IDENTIFIER = "sub"
    NAME = "name"
    EMAIL = "email"
    AUTH_METHOD = "amr"


@dataclass(frozen=True)
class Claim:
    type: ClaimType
    value: str
