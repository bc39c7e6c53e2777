"""Handler registration and invocation.

Handlers expose three explicit tables built from decorated methods:

- ajax actions: ``(ctx) -> Mapping | Response``
- views: ``(params, ctx) -> str`` (rendered markup)
- object actions: ``(object_id, ctx) -> Response``

Tables are validated when the handler is registered, so a lookup at
request time is a plain dictionary access.
"""

import logging
import re
from typing import Any, Callable, Dict, Mapping, Tuple, Union

from starlette.responses import Response

from backoffice.context import RequestContext
from backoffice.core.exceptions import (
    HandlerNotFoundError,
    HandlerRegistrationError,
    MalformedActionIdentifierError,
)

logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")
_SEGMENT_SEPARATOR = ":"

AJAX_ACTION_MARKER = "_backoffice_ajax_action"
VIEW_MARKER = "_backoffice_view"
OBJECT_ACTION_MARKER = "_backoffice_object_action"

AjaxResponse = Union[Mapping[str, Any], Response]


def ajax_action(name: str) -> Callable:
    """Expose a handler method as an ajax action."""

    def decorator(func: Callable) -> Callable:
        setattr(func, AJAX_ACTION_MARKER, name)
        return func

    return decorator


def view(name: str) -> Callable:
    """Expose a handler method as a forwardable content view."""

    def decorator(func: Callable) -> Callable:
        setattr(func, VIEW_MARKER, name)
        return func

    return decorator


def object_action(name: str) -> Callable:
    """Expose a handler method as a route-driven object action."""

    def decorator(func: Callable) -> Callable:
        setattr(func, OBJECT_ACTION_MARKER, name)
        return func

    return decorator


def parse_identifier(identifier: str) -> Tuple[str, str, str]:
    """Split ``component:handler:member`` into its lowercased segments.

    Raises:
        MalformedActionIdentifierError: Unless there are exactly three non-empty segments
    """
    parts = identifier.split(_SEGMENT_SEPARATOR)
    if len(parts) != 3 or not all(part.strip() for part in parts):
        raise MalformedActionIdentifierError(identifier)
    component, handler, member = (part.strip().lower() for part in parts)
    return component, handler, member


def is_view_identifier(identifier: str) -> bool:
    try:
        parse_identifier(identifier)
    except MalformedActionIdentifierError:
        return False
    return True


class BaseHandler:
    """Base class for handlers registered with the HandlerRegistry.

    Example:
        class SegmentHandler(BaseHandler):
            component = "lead"
            name = "segment"

            @ajax_action("rebuild")
            def rebuild(self, ctx):
                return {"success": 1}
    """

    component: str = ""
    name: str = ""

    def __init__(self) -> None:
        self.ajax_actions: Dict[str, Callable[..., AjaxResponse]] = {}
        self.views: Dict[str, Callable[..., str]] = {}
        self.object_actions: Dict[str, Callable[..., Response]] = {}

        tables = (
            (AJAX_ACTION_MARKER, self.ajax_actions),
            (VIEW_MARKER, self.views),
            (OBJECT_ACTION_MARKER, self.object_actions),
        )
        for attr_name in dir(type(self)):
            member = getattr(type(self), attr_name, None)
            if not callable(member):
                continue
            for marker, table in tables:
                exposed_name = getattr(member, marker, None)
                if exposed_name is None:
                    continue
                exposed_name = exposed_name.lower()
                if exposed_name in table:
                    raise HandlerRegistrationError(
                        f"{type(self).__name__} exposes '{exposed_name}' twice"
                    )
                table[exposed_name] = getattr(self, attr_name)

    @property
    def key(self) -> Tuple[str, str]:
        return self.component.lower(), self.name.lower()


class HandlerRegistry:
    """Registry of handlers keyed by (component, handler)."""

    def __init__(self) -> None:
        self._handlers: Dict[Tuple[str, str], BaseHandler] = {}

    def register(self, handler: BaseHandler) -> None:
        """Register a handler.

        Raises:
            HandlerRegistrationError: If the names are invalid or already taken
        """
        component, name = handler.key
        for label, value in (("component", component), ("name", name)):
            if not _IDENTIFIER_PATTERN.match(value):
                raise HandlerRegistrationError(
                    f"{type(handler).__name__} has invalid {label} '{value}'"
                )
        if (component, name) in self._handlers:
            raise HandlerRegistrationError(
                f"Handler '{component}:{name}' is already registered"
            )
        for table in (handler.ajax_actions, handler.views, handler.object_actions):
            for exposed_name in table:
                if not _IDENTIFIER_PATTERN.match(exposed_name):
                    raise HandlerRegistrationError(
                        f"Handler '{component}:{name}' exposes invalid name '{exposed_name}'"
                    )

        self._handlers[(component, name)] = handler
        logger.info(
            f"Registered handler {component}:{name} "
            f"(ajax={len(handler.ajax_actions)}, views={len(handler.views)}, "
            f"object_actions={len(handler.object_actions)})"
        )

    def exists(self, component: str, handler: str) -> bool:
        return (component.lower(), handler.lower()) in self._handlers

    def get(self, component: str, handler: str) -> BaseHandler:
        try:
            return self._handlers[(component.lower(), handler.lower())]
        except KeyError:
            raise HandlerNotFoundError(component, handler) from None

    def invoke(
        self, component: str, handler: str, action: str, ctx: RequestContext
    ) -> AjaxResponse:
        """Run an ajax action; unknown actions answer ``success: 0``."""
        target = self.get(component, handler)
        func = target.ajax_actions.get(action.lower())
        if func is None:
            logger.debug(f"Unknown ajax action {component}:{handler}:{action}")
            return {"success": 0}
        return func(ctx)

    def render_view(
        self, view_id: str, params: Mapping[str, Any], ctx: RequestContext
    ) -> str:
        component, handler, view_name = parse_identifier(view_id)
        target = self.get(component, handler)
        func = target.views.get(view_name)
        if func is None:
            raise HandlerNotFoundError(component, handler, view_name)
        return func(params, ctx)

    def execute_object_action(
        self,
        component: str,
        handler: str,
        action: str,
        object_id: str,
        ctx: RequestContext,
    ) -> Response:
        target = self.get(component, handler)
        func = target.object_actions.get(action.lower())
        if func is None:
            raise HandlerNotFoundError(component, handler, action)
        return func(object_id, ctx)

    def __len__(self) -> int:
        return len(self._handlers)
