"""Server-side conversation state.

Holds per-user chat history in memory for prompt continuity. Nothing here
survives a restart; the store interface exists so another backend can be
plugged into the orchestrator later.
"""

from lumina.sessions.store import (
    MAX_HISTORY_TURNS,
    HistoryTurn,
    InMemorySessionStore,
    Role,
    Session,
    SessionStore,
    get_session_store,
)

__all__ = [
    "MAX_HISTORY_TURNS",
    "HistoryTurn",
    "InMemorySessionStore",
    "Role",
    "Session",
    "SessionStore",
    "get_session_store",
]
