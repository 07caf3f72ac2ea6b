"""Outcome of processing one provider callback."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fedauth.models.claims import Claim
from fedauth.models.errors import FederationError
from fedauth.models.flow import FlowState


class OutcomeStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class CallbackOutcome:
    """What the host should do after a callback.

    ``claims`` is only set for AUTHENTICATED outcomes. ``signed_out`` reports
    whether an existing local session was cleared.
    """

    status: OutcomeStatus
    final_state: FlowState
    redirect_target: str
    claims: frozenset[Claim] | None = None
    alert_message: str | None = None
    signed_out: bool = False
    error: FederationError | None = None

    def is_authenticated(self) -> bool:
        return self.status is OutcomeStatus.AUTHENTICATED
