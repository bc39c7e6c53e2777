"""Ajax action dispatch.

Identifiers are either a bare built-in action name (``togglepanel``) or a
namespaced ``component:handler:action`` forwarded to a registered handler.
Unauthenticated callers and unknown built-ins get ``{"success": 0}`` with
no state change, so the response never reveals which actions exist.
"""

import logging
from typing import Any, Callable, Dict, FrozenSet

from backoffice.context import RequestContext
from backoffice.core.exceptions import HandlerNotFoundError, MalformedActionIdentifierError
from backoffice.core.security import AuthGate, AuthLevel
from backoffice.metrics.dispatch_metrics import record_ajax_action
from backoffice.services.events import CoreEvents, EventBus, GlobalSearchEvent
from backoffice.services.handlers import AjaxResponse, HandlerRegistry, parse_identifier
from backoffice.services.templating import TemplateRenderer

logger = logging.getLogger(__name__)

SEARCH_RESULTS_TEMPLATE = "default/globalsearchresults.html"
GLOBAL_SEARCH_SESSION_KEY = "backoffice.global_search"

PANEL_PINNED = "default"
PANEL_UNPINNED = "unpinned"


def panel_session_key(panel: str) -> str:
    return f"{panel}-panel"


def orderby_session_key(name: str) -> str:
    return f"backoffice.{name}.orderby"


def orderbydir_session_key(name: str) -> str:
    return f"backoffice.{name}.orderbydir"


class ActionDispatcher:
    def __init__(
        self,
        registry: HandlerRegistry,
        auth_gate: AuthGate,
        event_bus: EventBus,
        renderer: TemplateRenderer,
    ):
        self.registry = registry
        self.auth_gate = auth_gate
        self.event_bus = event_bus
        self.renderer = renderer
        self._builtins: Dict[str, Callable[[RequestContext], Dict[str, Any]]] = {
            "togglepanel": self._toggle_panel,
            "setorderby": self._set_order_by,
            "globalsearch": self._global_search,
        }

    @property
    def builtin_actions(self) -> FrozenSet[str]:
        return frozenset(self._builtins)

    def dispatch(self, identifier: str, ctx: RequestContext) -> AjaxResponse:
        """Run the action named by ``identifier``.

        Raises:
            MalformedActionIdentifierError: If the identifier is empty or not
                exactly ``component:handler:action``
            HandlerNotFoundError: If a namespaced handler is not registered
        """
        identifier = (identifier or "").strip()

        if not self.auth_gate.is_authenticated(ctx, AuthLevel.REMEMBERED):
            record_ajax_action(identifier, "denied")
            return {"success": 0}

        if not identifier:
            record_ajax_action(identifier, "error")
            raise MalformedActionIdentifierError(identifier)

        if ":" in identifier:
            return self._dispatch_namespaced(identifier, ctx)

        builtin = self._builtins.get(identifier.lower())
        if builtin is None:
            logger.debug(f"Ignoring unknown ajax action '{identifier}'")
            record_ajax_action(identifier, "noop")
            return {"success": 0}

        result = builtin(ctx)
        record_ajax_action(identifier.lower(), "success" if result["success"] else "noop")
        return result

    def _dispatch_namespaced(self, identifier: str, ctx: RequestContext) -> AjaxResponse:
        try:
            component, handler, action = parse_identifier(identifier)
        except MalformedActionIdentifierError:
            record_ajax_action(identifier, "error")
            raise

        if not self.registry.exists(component, handler):
            logger.warning(f"Ajax action requested for unknown handler {component}:{handler}")
            record_ajax_action(identifier, "error")
            raise HandlerNotFoundError(component, handler)

        record_ajax_action(identifier, "forwarded")
        return self.registry.invoke(component, handler, action, ctx)

    def _toggle_panel(self, ctx: RequestContext) -> Dict[str, Any]:
        panel = ctx.param("panel", "left")
        key = panel_session_key(panel)
        status = ctx.session_get(key, PANEL_PINNED)
        ctx.session_set(key, PANEL_PINNED if status == PANEL_UNPINNED else PANEL_UNPINNED)
        return {"success": 1}

    def _set_order_by(self, ctx: RequestContext) -> Dict[str, Any]:
        name = ctx.param("name")
        order_by = ctx.param("orderby")
        if not name or not order_by:
            return {"success": 0}

        direction = ctx.session_get(orderbydir_session_key(name), "ASC")
        direction = "DESC" if direction == "ASC" else "ASC"
        ctx.session_set(orderby_session_key(name), order_by)
        ctx.session_set(orderbydir_session_key(name), direction)
        return {"success": 1}

    def _global_search(self, ctx: RequestContext) -> Dict[str, Any]:
        search_string = str(ctx.param("searchstring", "") or "")
        ctx.session_set(GLOBAL_SEARCH_SESSION_KEY, search_string)

        event = self.event_bus.dispatch(
            CoreEvents.GLOBAL_SEARCH, GlobalSearchEvent(search_string)
        )
        markup = self.renderer.render(
            SEARCH_RESULTS_TEMPLATE,
            {"results": event.results, "search_string": search_string},
        )
        return {"success": 1, "searchResults": markup}
