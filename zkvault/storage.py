"""Session storage.

A session-scoped store that survives a reload of the client (a new
``SessionVault`` can ``restore()`` from it) but is cleared on logout.
Only ``SessionData.encode()`` payloads are stored, so it never sees a
derived key or plaintext.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

from .data import SessionData

logger = logging.getLogger("zkvault")


class SessionStorage(ABC):
    """Abstract session storage."""

    def __init__(self, max_age: Optional[int] = None):
        self.max_age = max_age

    @abstractmethod
    def save_session(self, session: SessionData) -> None:
        pass

    @abstractmethod
    def load_session(self, session_id: str) -> Optional[SessionData]:
        """Return the stored session, or None if missing or expired."""

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        pass


class MemoryStorage(SessionStorage):
    """Process-local storage, the equivalent of a browser's sessionStorage."""

    def __init__(self, max_age: Optional[int] = None):
        super().__init__(max_age=max_age)
        self._sessions: dict[str, str] = {}
        self._lock = threading.Lock()

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def save_session(self, session: SessionData) -> None:
        payload = session.encode()
        with self._lock:
            self._sessions[session.session_id] = payload
        session.is_changed = False
        logger.debug("Session %s saved", session.session_id)

    def load_session(self, session_id: str) -> Optional[SessionData]:
        with self._lock:
            payload = self._sessions.get(session_id)
        if payload is None:
            return None
        session = SessionData.decode(payload, max_age=self.max_age)
        if session.expired:
            logger.info("Session %s expired", session_id)
            self.delete_session(session_id)
            return None
        return session

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
