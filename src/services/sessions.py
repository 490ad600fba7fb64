"""Short-lived search-mode sessions keyed by user id."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class SearchSession:
    user_id: str
    message_id: int | None
    started_at: float


class SearchSessionStore:
    """Tracks users who were prompted for a search term.

    A session expires ``timeout`` seconds after it starts. Expiry is a deferred
    cleanup scheduled on the running loop; ``pop`` also checks the deadline so
    a late message never counts as a search term.
    """

    def __init__(
        self,
        timeout: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout = timeout
        self._clock = clock
        self._sessions: dict[str, SearchSession] = {}
        self._cleanups: dict[str, asyncio.TimerHandle] = {}

    @property
    def timeout(self) -> float:
        return self._timeout

    def start(self, user_id: str | int, message_id: int | None = None) -> SearchSession:
        key = str(user_id)
        self._cancel_cleanup(key)
        session = SearchSession(user_id=key, message_id=message_id, started_at=self._clock())
        self._sessions[key] = session

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._cleanups[key] = loop.call_later(self._timeout, self._expire, key, session)
        return session

    def pop(self, user_id: str | int) -> SearchSession | None:
        key = str(user_id)
        self._cancel_cleanup(key)
        session = self._sessions.pop(key, None)
        if session is None or self._is_expired(session):
            return None
        return session

    def active(self, user_id: str | int) -> bool:
        session = self._sessions.get(str(user_id))
        return session is not None and not self._is_expired(session)

    def clear(self) -> None:
        for handle in self._cleanups.values():
            handle.cancel()
        self._cleanups.clear()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def _is_expired(self, session: SearchSession) -> bool:
        return self._clock() - session.started_at >= self._timeout

    def _expire(self, key: str, session: SearchSession) -> None:
        self._cleanups.pop(key, None)
        if self._sessions.get(key) is session:
            del self._sessions[key]
            logger.debug("Search session for user %s expired", key)

    def _cancel_cleanup(self, key: str) -> None:
        handle = self._cleanups.pop(key, None)
        if handle is not None:
            handle.cancel()
