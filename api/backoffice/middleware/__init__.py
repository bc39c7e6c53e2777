"""
Middleware package for the Backoffice API.
"""

from backoffice.middleware.cache_control import CacheControlMiddleware
from backoffice.middleware.session import SessionMiddleware
from backoffice.middleware.trailing_slash import TrailingSlashMiddleware

__all__ = ["CacheControlMiddleware", "SessionMiddleware", "TrailingSlashMiddleware"]
