"""
Security utilities for the Backoffice API.

Authentication is tracked as a level stored in the caller's session, or
granted per request through the ``X-API-KEY`` header.
"""

import logging
import secrets
from enum import IntEnum
from typing import TYPE_CHECKING, Mapping, Optional

from backoffice.core.config import Settings
from backoffice.core.exceptions import AuthenticationError, InvalidAPIKeyError
from backoffice.session.store import Session

if TYPE_CHECKING:
    from backoffice.context import RequestContext

logger = logging.getLogger(__name__)

# Minimum length for secure API keys
MIN_API_KEY_LENGTH = 24

AUTH_LEVEL_SESSION_KEY = "_security.auth_level"
API_KEY_HEADER = "x-api-key"


class AuthLevel(IntEnum):
    """Ordered authentication levels (higher includes lower)."""

    ANONYMOUS = 0
    REMEMBERED = 1
    FULLY = 2


class AuthGate:
    """Decides whether a caller reached a given authentication level."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def resolve_level(
        self, session: Session, headers: Optional[Mapping[str, str]] = None
    ) -> AuthLevel:
        """Determine the caller's level from the session and request headers."""
        provided_key = (headers or {}).get(API_KEY_HEADER)
        if provided_key and self._key_matches(provided_key):
            return AuthLevel.FULLY
        return AuthLevel(session.get(AUTH_LEVEL_SESSION_KEY, AuthLevel.ANONYMOUS))

    def is_authenticated(self, ctx: "RequestContext", min_level: AuthLevel) -> bool:
        return ctx.auth_level >= min_level

    def login(self, session: Session, provided_key: str) -> AuthLevel:
        """Authenticate a session with the admin API key.

        Raises:
            AuthenticationError: If API key login is not configured
            InvalidAPIKeyError: If the key does not match
        """
        if not self.settings.ADMIN_API_KEY:
            logger.warning("Login attempted but ADMIN_API_KEY is not configured")
            raise AuthenticationError(
                "API key login is not configured", error_code="AUTH_NOT_CONFIGURED"
            )

        if not self._key_matches(provided_key):
            logger.warning("Invalid API key supplied for session login")
            raise InvalidAPIKeyError()

        level = AuthLevel.FULLY
        session.set(AUTH_LEVEL_SESSION_KEY, int(level))
        logger.info(f"Session authenticated at level {level.name}")
        return level

    def logout(self, session: Session) -> None:
        session.remove(AUTH_LEVEL_SESSION_KEY)

    def _key_matches(self, provided_key: str) -> bool:
        admin_api_key = self.settings.ADMIN_API_KEY
        if not admin_api_key:
            return False
        if len(admin_api_key) < MIN_API_KEY_LENGTH:
            logger.warning(
                f"ADMIN_API_KEY is configured with insecure length: {len(admin_api_key)} (min: {MIN_API_KEY_LENGTH})"
            )
        return secrets.compare_digest(provided_key, admin_api_key)
