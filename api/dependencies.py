"""
FastAPI dependency-injection helpers.
"""

from fastapi import Request, HTTPException

from api.session_store import SessionData, get_session
from core.state import WorkspaceStore


def get_session_data(request: Request) -> SessionData:
    """Return the current session."""
    session_id: str = request.state.session_id
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=401, detail="Session expired")
    return session


def get_store(request: Request) -> WorkspaceStore:
    return get_session_data(request).store


def require_data(request: Request) -> WorkspaceStore:
    """Like get_store but also asserts a dataset is loaded."""
    store = get_store(request)
    if not store.has_data:
        raise HTTPException(status_code=400, detail="No dataset loaded")
    return store
