# carbonwise/db.py — process-local session store (no durability)
import threading
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Optional

from .config import SESSION_LIMIT
from .schemas import Session


class SessionStore:
    """Keeps the newest `limit` sessions in memory; older ones are evicted."""

    def __init__(self, limit: int = SESSION_LIMIT):
        self._sessions: Deque[Session] = deque(maxlen=max(limit, 1))
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def save(self, user_id: Optional[str], data: Any) -> str:
        session = Session(
            sessionId=str(uuid.uuid4()),
            userId=user_id,
            data=data,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._sessions.append(session)
        return session.sessionId

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            for s in self._sessions:
                if s.sessionId == session_id:
                    return s
        return None

    def latest_for(self, user_id: str) -> Optional[Session]:
        with self._lock:
            for s in reversed(self._sessions):
                if s.userId == user_id:
                    return s
        return None


SESSIONS = SessionStore()
