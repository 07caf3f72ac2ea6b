"""Storage for authorization state between redirect and callback."""

from __future__ import annotations

import asyncio
from typing import Protocol

from fedauth.models.flow import AuthorizationState


class StateStore(Protocol):
    """Keeps one AuthorizationState per flow key until its callback.

    Keys must be unique per login attempt; two attempts from the same
    browser need distinct keys.
    """

    async def save(self, key: str, state: AuthorizationState) -> None:
        ...

    async def pop(self, key: str) -> AuthorizationState | None:
        """Remove and return the state for ``key`` so it can be used once."""
        ...


class InMemoryStateStore:
    """Process-local StateStore, suitable for a single worker or tests."""

    def __init__(self) -> None:
        self._states: dict[str, AuthorizationState] = {}
        self._lock = asyncio.Lock()

    async def save(self, key: str, state: AuthorizationState) -> None:
        async with self._lock:
            self._states[key] = state

    async def pop(self, key: str) -> AuthorizationState | None:
        async with self._lock:
            return self._states.pop(key, None)

    def __len__(self) -> int:
        return len(self._states)
