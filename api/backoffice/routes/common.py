import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.responses import Response

from backoffice.bootstrap import BackofficeServices
from backoffice.context import RequestContext
from backoffice.core.exceptions import AccessDeniedError, HandlerNotFoundError
from backoffice.core.security import AuthLevel
from backoffice.dependencies import get_request_context, get_services
from backoffice.services.composer import INDEX_CONTENT_ID
from backoffice.services.dispatcher import PANEL_PINNED, panel_session_key

logger = logging.getLogger(__name__)

router = APIRouter()

PAGE_TEMPLATE = "default/page.html"


@router.get("/", name="backoffice_core_index", response_class=HTMLResponse)
async def index(
    ctx: RequestContext = Depends(get_request_context),
    services: BackofficeServices = Depends(get_services),
):
    """
    Full page render of the dashboard.

    Consumes any flashes queued by a preceding post-action redirect.
    """
    composer = services.composer
    content = services.registry.render_view(INDEX_CONTENT_ID, {}, ctx.forward())
    page = services.renderer.render(
        PAGE_TEMPLATE,
        {
            "title": services.settings.PROJECT_NAME,
            "content": content,
            "breadcrumbs": composer.render_breadcrumbs({}, ctx),
            "flashes": composer.render_flashes({}, ctx),
            "left_panel": ctx.session_get(panel_session_key("left"), PANEL_PINNED),
        },
    )
    return HTMLResponse(page)


@router.api_route("/ajax", methods=["GET", "POST"], name="backoffice_core_ajax")
async def execute_ajax(
    ctx: RequestContext = Depends(get_request_context),
    services: BackofficeServices = Depends(get_services),
):
    """
    Execute the ajax action named by the ``ajaxAction`` parameter.
    """
    return _dispatch(str(ctx.param("ajaxAction", "") or ""), ctx, services)


@router.api_route(
    "/ajax/{ajax_action}", methods=["GET", "POST"], name="backoffice_core_ajax_action"
)
async def execute_ajax_action(
    ajax_action: str,
    ctx: RequestContext = Depends(get_request_context),
    services: BackofficeServices = Depends(get_services),
):
    """
    Execute the ajax action named in the path.
    """
    return _dispatch(ajax_action, ctx, services)


@router.api_route(
    "/s/{component}/{handler}/{object_action}/{object_id}",
    methods=["GET", "POST"],
    name="backoffice_object_action",
)
async def execute_object_action(
    component: str,
    handler: str,
    object_action: str,
    object_id: str,
    ctx: RequestContext = Depends(get_request_context),
    services: BackofficeServices = Depends(get_services),
):
    """
    Execute an object action exposed by a registered handler.

    Unknown handlers or actions fall through to the access-denied response.
    """
    if not services.auth_gate.is_authenticated(ctx, AuthLevel.REMEMBERED):
        raise AccessDeniedError()
    return services.registry.execute_object_action(
        component, handler, object_action, object_id, ctx
    )


def _dispatch(identifier: str, ctx: RequestContext, services: BackofficeServices) -> Response:
    try:
        result = services.dispatcher.dispatch(identifier, ctx)
    except HandlerNotFoundError as e:
        logger.warning(f"Ajax dispatch failed: {e.detail}")
        return services.composer.access_denied(ctx)

    if isinstance(result, Response):
        return result
    return JSONResponse(dict(result))
