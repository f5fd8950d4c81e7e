"""In-memory TTL store of trip sessions.

Sessions hold live asyncio tasks, so they stay in process memory. Expired
sessions are closed (pending lookups cancelled) when they are next touched
or when the next session is created.
"""

from typing import Optional, Dict, Any
import threading
import time
import uuid

from trip_finder.config import settings
from trip_finder.llm.generator import StructuredGenerator
from trip_finder.session.trip import TripSession


class SessionStore:
    """Session dictionary with TTL semantics."""

    def __init__(self, generator: StructuredGenerator, ttl_seconds: Optional[int] = None,
                 quiet_period: Optional[float] = None):
        self.generator = generator
        self.ttl_seconds = ttl_seconds or settings.SESSION_TTL_SECONDS
        self.quiet_period = quiet_period
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Any]] = {}

    def _expired(self, rec: Dict[str, Any]) -> bool:
        return (time.time() - rec.get("updated_at", 0)) > self.ttl_seconds

    def create(self) -> TripSession:
        # Abandoned sessions are never fetched again; sweep them here
        self.cleanup_expired()
        session = TripSession(uuid.uuid4().hex, self.generator, quiet_period=self.quiet_period)
        now = time.time()
        with self._lock:
            self._data[session.id] = {"session": session, "updated_at": now, "started_at": now}
        return session

    def get(self, session_id: str) -> Optional[TripSession]:
        """Return the session if not expired, else None. Refreshes its TTL."""
        expired = None
        with self._lock:
            rec = self._data.get(session_id)
            if not rec:
                return None
            if self._expired(rec):
                expired = self._data.pop(session_id)["session"]
            else:
                rec["updated_at"] = time.time()
                return rec["session"]
        expired.close()
        return None

    def clear(self, session_id: str) -> bool:
        """Close and delete a session."""
        with self._lock:
            rec = self._data.pop(session_id, None)
        if rec is None:
            return False
        rec["session"].close()
        return True

    def cleanup_expired(self) -> int:
        with self._lock:
            stale = [sid for sid, rec in self._data.items() if self._expired(rec)]
            sessions = [self._data.pop(sid)["session"] for sid in stale]
        for session in sessions:
            session.close()
        return len(sessions)

    def close_all(self) -> None:
        with self._lock:
            sessions = [rec["session"] for rec in self._data.values()]
            self._data.clear()
        for session in sessions:
            session.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
