"""Simple in-memory registry of classification sessions."""

from __future__ import annotations

import logging

from cowclassifier.classification.errors import SessionBusyError
from cowclassifier.classification.session import MAX_ITEMS, ClassificationSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Create, look up and discard sessions. Nothing is persisted."""

    def __init__(self, max_items: int = MAX_ITEMS) -> None:
        self._max_items = max_items
        self._sessions: dict[str, ClassificationSession] = {}

    def create(self) -> ClassificationSession:
        session = ClassificationSession(max_items=self._max_items)
        self._sessions[session.id] = session
        logger.info("Created session %s", session.id)
        return session

    def get(self, session_id: str) -> ClassificationSession:
        """Return a session or raise KeyError if missing."""
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found")
        return session

    def discard(self, session_id: str) -> None:
        """Forget a session. Raises KeyError if missing."""
        session = self.get(session_id)
        if session.is_running:
            raise SessionBusyError(f"Session {session_id} is still classifying")
        del self._sessions[session_id]
        logger.info("Discarded session %s", session_id)

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    @property
    def running_count(self) -> int:
        """Number of sessions with a classification run in flight."""
        return sum(1 for session in self._sessions.values() if session.is_running)
