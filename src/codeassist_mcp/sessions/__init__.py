"""In-memory session tracking."""

from .context import RECENT_SESSION_LIMIT, recent_sessions, render_recent_sessions
from .ledger import SessionLedger
from .models import Session, SessionContext

__all__ = [
    "RECENT_SESSION_LIMIT",
    "Session",
    "SessionContext",
    "SessionLedger",
    "recent_sessions",
    "render_recent_sessions",
]
