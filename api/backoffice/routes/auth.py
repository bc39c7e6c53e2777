import logging

from fastapi import APIRouter, Depends, Request

from backoffice.bootstrap import BackofficeServices
from backoffice.context import RequestContext
from backoffice.dependencies import get_request_context, get_services
from backoffice.models.intent import ActionIntent, FlashKind, FlashMessage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", name="backoffice_login")
async def login(
    ctx: RequestContext = Depends(get_request_context),
    services: BackofficeServices = Depends(get_services),
):
    """
    Authenticate the caller's session with the admin API key.

    The key is read from the ``api_key`` parameter. Success follows the
    regular post-action flow back to the dashboard.
    """
    services.auth_gate.login(ctx.session, str(ctx.param("api_key", "") or ""))
    intent = ActionIntent(
        flashes=(FlashMessage(FlashKind.SUCCESS, "backoffice.core.login.success"),),
    )
    return services.composer.compose(intent, ctx)


@router.post("/logout", name="backoffice_logout")
async def logout(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    services: BackofficeServices = Depends(get_services),
):
    """
    Drop the caller's session and return to the dashboard.

    The old session is destroyed and a fresh one carries the logout flash.
    """
    services.auth_gate.logout(ctx.session)
    services.session_store.destroy(ctx.session.session_id)
    ctx.session = services.session_store.create()
    request.state.session = ctx.session
    intent = ActionIntent(
        flashes=(FlashMessage(FlashKind.INFO, "backoffice.core.logout.success"),),
    )
    return services.composer.compose(intent, ctx)
