"""Path-to-route resolution against the application's own route table."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from starlette.routing import Match
from starlette.types import Scope

from backoffice.core.exceptions import RouteLookupError

logger = logging.getLogger(__name__)

OBJECT_ACTION_PARAM = "object_action"


@dataclass(frozen=True)
class ResolvedRoute:
    route_name: str
    action_suffix: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        """Route name with the object action appended, e.g. ``lead_action|edit``.

        Object-action URLs share one route name, so the action tells them apart.
        """
        if self.action_suffix:
            return f"{self.route_name}|{self.action_suffix}"
        return self.route_name


class RouteResolver:
    """Resolve paths and names using the routes registered on an app."""

    def __init__(self, app: Any):
        self.app = app

    def resolve_route(self, path: str, method: str = "GET") -> ResolvedRoute:
        """Find the named route matching ``path``.

        Raises:
            RouteLookupError: If no named route fully matches the path
        """
        scope: Scope = {
            "type": "http",
            "path": path.split("?", 1)[0] or "/",
            "root_path": "",
            "method": method,
        }
        for route in self.app.router.routes:
            match, child_scope = route.matches(scope)
            if match != Match.FULL:
                continue
            name = getattr(route, "name", None)
            if not name:
                continue
            path_params = child_scope.get("path_params", {})
            return ResolvedRoute(
                route_name=name, action_suffix=path_params.get(OBJECT_ACTION_PARAM)
            )
        raise RouteLookupError(path)

    def url_for(self, route_name: str, **path_params: Any) -> str:
        return str(self.app.url_path_for(route_name, **path_params))
