"""Post-action response composition.

After an action completes, the caller describes what should happen next
as an ActionIntent. Flashes are queued in the session, then the request's
asynchronous flag alone decides between a redirect and a JSON body that
carries freshly rendered content, breadcrumbs and flashes.
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping

from fastapi.responses import JSONResponse, RedirectResponse
from starlette.responses import Response

from backoffice.context import RequestContext
from backoffice.core.config import Settings
from backoffice.core.exceptions import RouteLookupError
from backoffice.metrics.dispatch_metrics import (
    record_composed_response,
    record_route_lookup_failure,
)
from backoffice.models.ajax import AjaxResult
from backoffice.models.intent import ActionIntent, FlashKind, FlashMessage
from backoffice.services.handlers import HandlerRegistry, is_view_identifier
from backoffice.services.localization import Translator
from backoffice.services.menu import MenuRegistry
from backoffice.services.routing import RouteResolver
from backoffice.services.templating import TemplateRenderer

logger = logging.getLogger(__name__)

BREADCRUMBS_TEMPLATE = "default/breadcrumbs.html"
FLASHES_TEMPLATE = "default/flashes.html"
FLASH_DOMAIN = "flashes"

ACCESS_DENIED_MESSAGE = "backoffice.core.error.accessdenied"
INDEX_CONTENT_ID = "core:default:index"


class ComposerState(Enum):
    COMPOSING = "composing"
    REDIRECT_READY = "redirect_ready"
    ASYNC_READY = "async_ready"


class ResponseComposer:
    def __init__(
        self,
        settings: Settings,
        registry: HandlerRegistry,
        renderer: TemplateRenderer,
        translator: Translator,
        router: RouteResolver,
        menu: MenuRegistry,
    ):
        self.settings = settings
        self.registry = registry
        self.renderer = renderer
        self.translator = translator
        self.router = router
        self.menu = menu

    def decide(self, ctx: RequestContext) -> ComposerState:
        """Terminal state reached from COMPOSING for this request."""
        if ctx.is_asynchronous():
            return ComposerState.ASYNC_READY
        return ComposerState.REDIRECT_READY

    def compose(self, intent: ActionIntent, ctx: RequestContext) -> Response:
        for flash in intent.flashes:
            self._queue_flash(flash, ctx)

        if self.decide(ctx) is ComposerState.REDIRECT_READY:
            return_url = intent.return_url or self.index_url()
            record_composed_response("redirect")
            return RedirectResponse(
                return_url, status_code=self.settings.REDIRECT_STATUS_CODE
            )

        result = self.compose_async(intent, ctx)
        record_composed_response("async")
        return JSONResponse(result.to_payload())

    def compose_async(self, intent: ActionIntent, ctx: RequestContext) -> AjaxResult:
        passthrough = intent.passthrough_vars
        if passthrough.get("route"):
            self._override_route(str(passthrough["route"]), ctx)

        content_id = intent.content_template_id or self.default_content_id(ctx)
        # Template paths such as "default/page.html" are rendered directly
        if intent.forward_to_handler and is_view_identifier(content_id):
            new_content = self.registry.render_view(
                content_id, intent.view_parameters, ctx.forward()
            )
        else:
            new_content = self.renderer.render(content_id, intent.view_parameters)

        return AjaxResult.build(
            new_content=new_content,
            breadcrumbs_markup=self.render_breadcrumbs(intent.view_parameters, ctx),
            flashes_markup=self.render_flashes(intent.view_parameters, ctx),
            passthrough=passthrough,
        )

    def access_denied(self, ctx: RequestContext) -> Response:
        index_url = self.index_url()
        intent = ActionIntent(
            return_url=index_url,
            content_template_id=INDEX_CONTENT_ID,
            passthrough_vars={
                "activeLink": f"#{self.settings.INDEX_ROUTE_NAME}",
                "route": index_url,
            },
            flashes=(FlashMessage(FlashKind.ERROR, ACCESS_DENIED_MESSAGE),),
        )
        return self.compose(intent, ctx)

    def render_breadcrumbs(self, params: Mapping[str, Any], ctx: RequestContext) -> str:
        trail = self.menu.trail(
            route_name=ctx.override_route_name,
            uri=ctx.override_route_uri or ctx.path,
        )
        return self.renderer.render(
            BREADCRUMBS_TEMPLATE, self._with(params, breadcrumb_trail=trail)
        )

    def render_flashes(self, params: Mapping[str, Any], ctx: RequestContext) -> str:
        messages = ctx.session.flashes.consume_all()
        return self.renderer.render(
            FLASHES_TEMPLATE, self._with(params, flash_messages=messages)
        )

    def default_content_id(self, ctx: RequestContext) -> str:
        bundle = str(ctx.param("bundle", "") or self.settings.DEFAULT_BUNDLE)
        return f"{bundle.lower()}:default:index"

    def index_url(self) -> str:
        return self.router.url_for(self.settings.INDEX_ROUTE_NAME)

    def _queue_flash(self, flash: FlashMessage, ctx: RequestContext) -> None:
        message = self.translator.translate(
            flash.message_key, flash.message_vars, domain=FLASH_DOMAIN
        )
        ctx.session.add_flash(flash.kind.value, message)

    def _override_route(self, route: str, ctx: RequestContext) -> None:
        ctx.override_route_uri = route

        route_path = route
        if ctx.base_url and route.startswith(ctx.base_url):
            route_path = route[len(ctx.base_url):] or "/"
        try:
            resolved = self.router.resolve_route(route_path)
        except RouteLookupError as e:
            # Breadcrumbs fall back to the URI match
            logger.warning(f"Route override lookup failed: {e}")
            record_route_lookup_failure()
            return
        ctx.override_route_name = resolved.qualified_name

    @staticmethod
    def _with(params: Mapping[str, Any], **extra: Any) -> Dict[str, Any]:
        merged = dict(params)
        merged.update(extra)
        return merged
