"""
In-memory session store keyed by UUID.

Each session holds its own WorkspaceStore (loaded profile, charts, filters).
Sessions expire after a configurable period of inactivity.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from config.settings import Config
from core.state import WorkspaceStore

logger = logging.getLogger(__name__)


@dataclass
class SessionData:
    """Per-session workspace."""

    config: Config = field(default_factory=Config.load)
    store: WorkspaceStore = field(default_factory=WorkspaceStore)
    last_accessed: float = field(default_factory=time.time)


# Global store: session_id -> SessionData
_sessions: Dict[str, SessionData] = {}
_lock = threading.Lock()


def _ttl() -> int:
    return Config.load().app.session_ttl_seconds


def create_session() -> str:
    """Create a new session and return its ID."""
    session_id = str(uuid.uuid4())
    with _lock:
        _sessions[session_id] = SessionData()
    logger.debug("Created session %s", session_id)
    return session_id


def get_session(session_id: str) -> Optional[SessionData]:
    """Return the session if it exists and is not expired."""
    with _lock:
        session = _sessions.get(session_id)
        if session is None:
            return None
        if time.time() - session.last_accessed > _ttl():
            del _sessions[session_id]
            logger.debug("Session %s expired", session_id)
            return None
        session.last_accessed = time.time()
        return session


def cleanup_expired() -> int:
    """Remove expired sessions. Returns number removed."""
    now = time.time()
    ttl = _ttl()
    with _lock:
        expired = [
            sid for sid, s in _sessions.items()
            if now - s.last_accessed > ttl
        ]
        for sid in expired:
            del _sessions[sid]
    if expired:
        logger.info("Removed %d expired sessions", len(expired))
    return len(expired)
