"""HTTP control surface for fire-and-forget sessions."""

from useragent.server.api import create_app
from useragent.server.registry import SessionRecord, SessionRegistry, SessionStatus

__all__ = ["SessionRecord", "SessionRegistry", "SessionStatus", "create_app"]
