"""FastAPI dependencies for the Backoffice routes.

Provides dependency injection for services stored on app state and the
per-request RequestContext.
"""

import logging

from fastapi import Depends, Request

from backoffice.bootstrap import BackofficeServices
from backoffice.context import RequestContext

logger = logging.getLogger(__name__)


def get_services(request: Request) -> BackofficeServices:
    """Get the service bundle from app state.

    Raises:
        RuntimeError: If services were not initialized.
    """
    if not hasattr(request.app.state, "services"):
        raise RuntimeError("Backoffice services not initialized")

    return request.app.state.services


async def get_request_context(
    request: Request, services: BackofficeServices = Depends(get_services)
) -> RequestContext:
    """Build the RequestContext once per request and cache it on request state."""
    ctx = getattr(request.state, "request_context", None)
    if ctx is None:
        ctx = await RequestContext.from_request(request, services.auth_gate)
        request.state.request_context = ctx
    return ctx
