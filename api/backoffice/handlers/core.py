"""Core handler: dashboard content and panel state."""

from typing import Any, Dict, Mapping

from backoffice.context import RequestContext
from backoffice.services.dispatcher import (
    GLOBAL_SEARCH_SESSION_KEY,
    PANEL_PINNED,
    panel_session_key,
)
from backoffice.services.handlers import BaseHandler, ajax_action, view
from backoffice.services.templating import TemplateRenderer

PANELS = ("left", "right")


class CoreHandler(BaseHandler):
    component = "core"
    name = "default"

    def __init__(self, renderer: TemplateRenderer):
        super().__init__()
        self.renderer = renderer

    @view("index")
    def index(self, params: Mapping[str, Any], ctx: RequestContext) -> str:
        context = dict(params)
        context.setdefault("last_search", ctx.session_get(GLOBAL_SEARCH_SESSION_KEY, ""))
        context.setdefault("panels", self._panel_states(ctx))
        return self.renderer.render("core:default:index", context)

    @ajax_action("panelstatus")
    def panel_status(self, ctx: RequestContext) -> Dict[str, Any]:
        return {"success": 1, "panels": self._panel_states(ctx)}

    @staticmethod
    def _panel_states(ctx: RequestContext) -> Dict[str, str]:
        return {
            panel: ctx.session_get(panel_session_key(panel), PANEL_PINNED)
            for panel in PANELS
        }
