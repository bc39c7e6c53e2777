"""Read-only view over an inbound call plus its caller's session."""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from fastapi import Request

from backoffice.core.security import AuthGate, AuthLevel
from backoffice.session.store import Session

logger = logging.getLogger(__name__)

_AJAX_HEADER = "x-requested-with"
_AJAX_HEADER_VALUE = "xmlhttprequest"
_AJAX_MARKER_PARAM = "ajax"
_TRUTHY = {"1", "true", "yes", "on"}

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class RequestContext:
    """Per-call context threaded through dispatch and composition.

    Parameters are looked up in path parameters, then the query string,
    then the body. The override route markers are the only mutable request
    state and are written by the response composer for breadcrumb rendering.
    """

    def __init__(
        self,
        session: Session,
        *,
        path: str = "/",
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        path_params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        base_url: str = "",
        auth_level: AuthLevel = AuthLevel.ANONYMOUS,
        ignore_ajax: bool = False,
    ):
        self.session = session
        self.path = path
        self.base_url = base_url
        self.auth_level = auth_level
        self.ignore_ajax = ignore_ajax
        self.override_route_uri: Optional[str] = None
        self.override_route_name: Optional[str] = None
        self._query = dict(query or {})
        self._body = dict(body or {})
        self._path_params = dict(path_params or {})
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}

    @classmethod
    async def from_request(cls, request: Request, auth_gate: AuthGate) -> "RequestContext":
        session = getattr(request.state, "session", None)
        if session is None:
            raise RuntimeError("Session middleware not installed")

        headers = dict(request.headers)
        return cls(
            session,
            path=request.url.path,
            query=dict(request.query_params),
            body=await _read_body(request),
            path_params=request.path_params,
            headers=headers,
            base_url=request.scope.get("root_path", ""),
            auth_level=auth_gate.resolve_level(session, headers),
        )

    def is_asynchronous(self) -> bool:
        """True when the caller asked for a partial (JSON) response."""
        if self.ignore_ajax:
            return False
        if (self.header(_AJAX_HEADER) or "").lower() == _AJAX_HEADER_VALUE:
            return True
        return str(self.param(_AJAX_MARKER_PARAM, "")).lower() in _TRUTHY

    def param(self, name: str, default: Any = None) -> Any:
        for source in (self._path_params, self._query, self._body):
            if name in source:
                return source[name]
        return default

    def session_get(self, key: str, default: Any = None) -> Any:
        return self.session.get(key, default)

    def session_set(self, key: str, value: Any) -> None:
        self.session.set(key, value)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(name.lower(), default)

    def forward(self) -> "RequestContext":
        """Copy of this context for an in-process forward to another handler."""
        forwarded = copy.copy(self)
        forwarded.ignore_ajax = True
        return forwarded


async def _read_body(request: Request) -> Dict[str, Any]:
    if request.method in ("GET", "HEAD"):
        return {}

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            logger.warning(f"Ignoring malformed JSON body on {request.url.path}")
            return {}
        return payload if isinstance(payload, dict) else {}

    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items()}

    return {}
