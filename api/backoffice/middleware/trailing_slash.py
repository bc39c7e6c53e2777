"""
Trailing slash middleware.

Permanently redirects ``/path/`` to ``/path`` so that URLs typed or linked
with a trailing slash resolve to the same route instead of a 404.
"""

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware


class TrailingSlashMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path != "/" and path.endswith(("/", " ")):
            target = path.rstrip(" /") or "/"
            if request.url.query:
                target = f"{target}?{request.url.query}"
            return RedirectResponse(target, status_code=301)

        return await call_next(request)
