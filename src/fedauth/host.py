"""Collaborators the host application provides to the callback processor."""

from __future__ import annotations

from collections.abc import Set
from typing import Protocol

from fedauth.models.claims import Claim


class SessionSink(Protocol):
    """The host's identity layer for the current request."""

    def is_authenticated(self) -> bool:
        """Whether a local session already exists for this request."""
        ...

    def sign_in(self, claims: Set[Claim]) -> None:
        ...

    def sign_out(self) -> None:
        ...


class AlertSink(Protocol):
    """Receives user-visible messages, e.g. flash alerts on the next page."""

    def add_alert(self, kind: str, message: str) -> None:
        ...
