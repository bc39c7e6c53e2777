"""In-process session store with per-caller flags and flash queues."""

import logging
import secrets
import threading
import time
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Length of generated session identifiers (bytes of entropy before encoding)
SESSION_ID_BYTES = 32

# Upper bound on how often create() sweeps out expired sessions
PURGE_INTERVAL_SECONDS = 300


class FlashBag:
    """Ordered queue of (kind, message) pairs consumed on the next render."""

    def __init__(self) -> None:
        self._messages: List[Tuple[str, str]] = []

    def add(self, kind: str, message: str) -> None:
        self._messages.append((kind, message))

    def peek_all(self) -> List[Tuple[str, str]]:
        return list(self._messages)

    def consume_all(self) -> List[Tuple[str, str]]:
        """Return every queued message and empty the queue."""
        messages, self._messages = self._messages, []
        return messages

    def __len__(self) -> int:
        return len(self._messages)


class Session:
    """Key/value state scoped to a single caller."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.flashes = FlashBag()
        self.last_access = time.monotonic()
        self._data: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def add_flash(self, kind: str, message: str) -> None:
        self.flashes.add(kind, message)

    def touch(self) -> None:
        self.last_access = time.monotonic()

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SessionStore:
    """Registry of live sessions keyed by identifier.

    Sessions idle for longer than ``max_age`` seconds are treated as expired
    and dropped on access or by ``purge_expired``. ``create`` runs the purge
    at most once every ``purge_interval`` seconds (default: the smaller of
    ``max_age`` and ``PURGE_INTERVAL_SECONDS``).
    """

    def __init__(self, max_age: int, purge_interval: Optional[float] = None):
        self.max_age = max_age
        self.purge_interval = (
            purge_interval
            if purge_interval is not None
            else min(max_age, PURGE_INTERVAL_SECONDS)
        )
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._last_purge = time.monotonic()

    def create(self) -> Session:
        if time.monotonic() - self._last_purge >= self.purge_interval:
            self.purge_expired()
        session = Session(secrets.token_urlsafe(SESSION_ID_BYTES))
        with self._lock:
            self._sessions[session.session_id] = session
        logger.debug("Created session %s...", session.session_id[:8])
        return session

    def load(self, session_id: Optional[str]) -> Optional[Session]:
        """Return the live session for ``session_id`` or None."""
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._is_expired(session):
                del self._sessions[session_id]
                logger.debug("Session %s... expired", session_id[:8])
                return None
        session.touch()
        return session

    def load_or_create(self, session_id: Optional[str]) -> Session:
        return self.load(session_id) or self.create()

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        with self._lock:
            self._last_purge = time.monotonic()
            expired = [
                session_id
                for session_id, session in self._sessions.items()
                if self._is_expired(session)
            ]
            for session_id in expired:
                del self._sessions[session_id]
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def _is_expired(self, session: Session) -> bool:
        return time.monotonic() - session.last_access > self.max_age

    def __len__(self) -> int:
        return len(self._sessions)
