"""
Session middleware.

Loads the caller's session from the application's SessionStore using the
session cookie, exposes it as ``request.state.session`` and refreshes the
cookie on the way out.
"""

import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Probe and scrape endpoints never get a session
SESSIONLESS_PREFIXES = ("/health", "/metrics")


class SessionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path.startswith(SESSIONLESS_PREFIXES):
            return await call_next(request)

        services = request.app.state.services
        settings = services.settings
        cookie_name = settings.SESSION_COOKIE_NAME

        session = services.session_store.load_or_create(request.cookies.get(cookie_name))
        request.state.session = session

        response = await call_next(request)
        # Routes may replace the session (logout issues a fresh one)
        session = getattr(request.state, "session", session)

        response.set_cookie(
            key=cookie_name,
            value=session.session_id,
            max_age=settings.SESSION_MAX_AGE,
            httponly=True,  # Prevents XSS access
            secure=settings.COOKIE_SECURE,
            samesite="lax",
            path="/",
        )
        return response
