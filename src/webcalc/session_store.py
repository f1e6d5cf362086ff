"""
Session storage backend for WebCalc.

Maps an opaque user identifier to that user's ``CalculatorState``.
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

from webcalc.config import settings
from webcalc.models import CalculatorState

logger = structlog.get_logger()


class SessionStore(ABC):
    """
    Abstract base class for session stores.

    ``get`` hands out a copy; changes become visible to later requests only
    once they are written back with ``put`` (last write wins).
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @abstractmethod
    async def get(self, identifier: str) -> CalculatorState:
        """Return the state for ``identifier``, or a fresh default state."""
        pass

    @abstractmethod
    async def put(self, identifier: str, state: CalculatorState) -> None:
        """Store ``state`` for ``identifier``."""
        pass

    @abstractmethod
    async def delete(self, identifier: str) -> None:
        """Forget the state for ``identifier``."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Forget every stored state."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @asynccontextmanager
    async def lock(self, identifier: str) -> AsyncIterator[None]:
        """
        Hold the lock guarding the read-modify-write cycle for ``identifier``.

        Serializes presses from the same user within one process. A lock
        exists only while some request holds or waits for it.
        """
        lock = self._locks.setdefault(identifier, asyncio.Lock())
        self._lock_users[identifier] = self._lock_users.get(identifier, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[identifier] -= 1
            if self._lock_users[identifier] == 0:
                del self._lock_users[identifier]
                del self._locks[identifier]

    @property
    def active_locks(self) -> int:
        """Number of identifiers with a request holding or awaiting the lock."""
        return len(self._locks)


class InMemorySessionStore(SessionStore):
    """Process-local session store backed by a dict."""

    def __init__(self):
        super().__init__()
        self._states: dict[str, CalculatorState] = {}

    async def get(self, identifier: str) -> CalculatorState:
        state = self._states.get(identifier)
        if state is None:
            logger.debug("Creating session state", user_id=identifier)
            return CalculatorState()
        return state.model_copy()

    async def put(self, identifier: str, state: CalculatorState) -> None:
        self._states[identifier] = state.model_copy()

    async def delete(self, identifier: str) -> None:
        self._states.pop(identifier, None)

    async def clear(self) -> None:
        self._states.clear()

    def __len__(self) -> int:
        return len(self._states)


# Global session store instance
_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get the configured session store."""
    global _store

    if _store is None:
        if settings.session_backend == "memory":
            _store = InMemorySessionStore()
        else:
            raise ValueError(f"Unknown session backend: {settings.session_backend}")

    return _store


def reset_session_store() -> None:
    """Drop the global session store so the next lookup builds a new one."""
    global _store
    _store = None
