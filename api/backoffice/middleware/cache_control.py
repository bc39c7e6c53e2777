"""
Cache control middleware for post-action responses.

Ajax fragments and post-action redirects depend on session state (flashes,
panel pins, sort order), so neither may be served from a browser or proxy
cache.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_AJAX_HEADER_VALUE = "xmlhttprequest"


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    Headers added to ajax and redirect responses:
    - Cache-Control: no-store, no-cache, must-revalidate, private
    - Pragma: no-cache (for HTTP/1.0 compatibility)
    - Expires: 0 (for HTTP/1.0 compatibility)
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        is_ajax = (
            request.headers.get("x-requested-with", "").lower() == _AJAX_HEADER_VALUE
        )
        is_redirect = 300 <= response.status_code < 400
        is_json = response.headers.get("content-type", "").startswith("application/json")

        if is_ajax or is_redirect or is_json:
            response.headers["Cache-Control"] = (
                "no-store, no-cache, must-revalidate, private"
            )
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"

        return response
