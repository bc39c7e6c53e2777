"""
Per-caller session state for the Backoffice API.
"""

from backoffice.session.store import FlashBag, Session, SessionStore

__all__ = ["FlashBag", "Session", "SessionStore"]
