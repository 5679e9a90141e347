"""
Session cookie middleware.

Sets / reads a `session_id` HTTP-only cookie on every request so that
each browser tab gets its own profiling workspace.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from api.session_store import create_session, get_session
from config.settings import Config

SESSION_COOKIE = "session_id"


class SessionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        session_id = request.cookies.get(SESSION_COOKIE)

        # Missing or expired cookie gets a fresh workspace
        if session_id is None or get_session(session_id) is None:
            session_id = create_session()

        request.state.session_id = session_id

        response: Response = await call_next(request)

        response.set_cookie(
            key=SESSION_COOKIE,
            value=session_id,
            httponly=True,
            samesite="lax",
            max_age=Config.load().app.session_ttl_seconds,
        )
        return response
