"""In-memory store of open selection sessions.

TTL + max sessions; lazy cleanup on write. Shared between request threads,
so the dict is guarded by a lock (sessions themselves are used by one
client at a time).
"""
from __future__ import annotations

import logging
from threading import RLock
from time import time
from typing import Dict, Optional

from modsel import metrics
from modsel.modules import SelectionSession

logger = logging.getLogger("modsel.api.sessions")

DEFAULT_TTL_SECONDS = 60 * 60
DEFAULT_MAX_SESSIONS = 64


class SessionStore:
    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._sessions: Dict[str, SelectionSession] = {}
        self._last_access: Dict[str, float] = {}
        self._lock = RLock()

    def add(self, session: SelectionSession) -> None:
        now = time()
        with self._lock:
            self._sessions[session.session_id] = session
            self._last_access[session.session_id] = now
            self._cleanup(now)
        metrics.inc("selection_sessions_opened_total")

    def get(self, session_id: str) -> Optional[SelectionSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if time() - self._last_access[session_id] > self.ttl_seconds:
                self._drop(session_id, "expired")
                return None
            self._last_access[session_id] = time()
            return session

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._drop(session_id, "closed")

    def _drop(self, session_id: str, reason: str) -> None:
        session = self._sessions.pop(session_id, None)
        self._last_access.pop(session_id, None)
        if session is None:
            return
        if reason != "closed" and not session.closed:
            session.discard()
        metrics.inc("selection_sessions_dropped_total", {"reason": reason})
        logger.debug("session %s dropped (%s)", session_id, reason)

    def _cleanup(self, now: float) -> None:
        expired = [
            sid
            for sid, ts in self._last_access.items()
            if now - ts > self.ttl_seconds
        ]
        for sid in expired:
            self._drop(sid, "expired")
        while len(self._sessions) > self.max_sessions:
            oldest = min(self._last_access, key=self._last_access.__getitem__)
            self._drop(oldest, "evicted")

    def stats(self) -> dict:
        with self._lock:
            return {"sessions": len(self._sessions)}


__all__ = ["SessionStore"]
