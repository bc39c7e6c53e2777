"""
Custom exception hierarchy for the Backoffice API.

HTTP-facing errors derive from BaseAppException so the central error
handlers can format them consistently. Lookup failures that are meant to
degrade silently (route resolution) are plain exceptions.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BaseAppException(HTTPException):
    """Base exception for all application errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.__class__.__name__


# Authentication Exceptions


class AuthenticationError(BaseAppException):
    """Raised when authentication fails."""

    def __init__(
        self, detail: str = "Authentication failed", error_code: Optional[str] = None
    ):
        super().__init__(
            detail, status.HTTP_401_UNAUTHORIZED, error_code=error_code or "AUTH_ERROR"
        )


class InvalidAPIKeyError(AuthenticationError):
    """Raised when API key is invalid."""

    def __init__(self):
        super().__init__("Invalid API key", error_code="INVALID_API_KEY")


class AccessDeniedError(BaseAppException):
    """Raised when the caller may not perform the requested action."""

    def __init__(self, detail: str = "Access denied"):
        super().__init__(detail, status.HTTP_403_FORBIDDEN, error_code="ACCESS_DENIED")


# Dispatch Exceptions


class MalformedActionIdentifierError(BaseAppException):
    """Raised when an ajax action identifier cannot be parsed."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        detail = (
            f"Malformed action identifier '{identifier}': "
            "expected 'action' or 'component:handler:action'"
        )
        super().__init__(
            detail,
            status.HTTP_400_BAD_REQUEST,
            error_code="MALFORMED_ACTION_IDENTIFIER",
        )


class HandlerNotFoundError(BaseAppException):
    """Raised when no handler is registered under a component/handler pair."""

    def __init__(self, component: str, handler: str, member: Optional[str] = None):
        self.component = component
        self.handler = handler
        self.member = member
        target = f"{component}:{handler}"
        if member:
            target = f"{target}:{member}"
        super().__init__(
            f"Handler '{target}' not found",
            status.HTTP_404_NOT_FOUND,
            error_code="HANDLER_NOT_FOUND",
        )


# Rendering Exceptions


class TemplateRenderError(BaseAppException):
    """Raised when a template is missing or fails to render."""

    def __init__(self, template_id: str, detail: str):
        self.template_id = template_id
        super().__init__(
            f"Template '{template_id}' could not be rendered: {detail}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="TEMPLATE_RENDER_ERROR",
        )


# Non-HTTP Exceptions


class RouteLookupError(LookupError):
    """Raised when a path does not match any registered route."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No route matches path '{path}'")


class HandlerRegistrationError(ValueError):
    """Raised when a handler is rejected at registration time."""

    pass
