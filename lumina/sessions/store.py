"""Per-user conversation history kept for the lifetime of the process.

Sessions are created lazily on first reference, trimmed to the most recent
``MAX_HISTORY_TURNS`` turns after every append, and only disappear when the
process exits. Concurrent requests for the same user are not serialized:
the last append wins.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# 15 human/assistant exchanges
MAX_HISTORY_TURNS = 30


class Role(str, Enum):
    """Speaker of a stored history turn."""

    HUMAN = "human"
    ASSISTANT = "assistant"


class HistoryTurn(BaseModel):
    """One human or assistant utterance.

    Attributes:
        role: Who said it.
        text: What was said.
    """

    role: Role
    text: str


class Session(BaseModel):
    """Conversation state for one user."""

    user_id: str
    history: list[HistoryTurn] = Field(default_factory=list)


class SessionStore(ABC):
    """Interface the chat orchestrator uses to read and update history."""

    @abstractmethod
    def get(self, user_id: str) -> Session:
        """Return the session for ``user_id``, creating an empty one if needed."""

    @abstractmethod
    def append(self, user_id: str, human_text: str, assistant_text: str) -> None:
        """Record one completed exchange."""

    @abstractmethod
    def clear(self, user_id: str) -> None:
        """Drop all history for ``user_id``."""


class InMemorySessionStore(SessionStore):
    """Dict-backed store shared by every request in the process."""

    def __init__(self, max_turns: int = MAX_HISTORY_TURNS) -> None:
        self._max_turns = max_turns
        self._sessions: dict[str, Session] = {}

    def get(self, user_id: str) -> Session:
        session = self._sessions.get(user_id)
        if session is None:
            session = Session(user_id=user_id)
            self._sessions[user_id] = session
            logger.debug(f"Created session for user {user_id}")
        return session

    def append(self, user_id: str, human_text: str, assistant_text: str) -> None:
        session = self.get(user_id)
        session.history.append(HistoryTurn(role=Role.HUMAN, text=human_text))
        session.history.append(HistoryTurn(role=Role.ASSISTANT, text=assistant_text))

        if len(session.history) > self._max_turns:
            # FIFO eviction, keep the newest turns
            session.history = session.history[-self._max_turns :]

    def clear(self, user_id: str) -> None:
        self.get(user_id).history.clear()
        logger.info(f"Cleared session history for user {user_id}")

    def __len__(self) -> int:
        return len(self._sessions)


# Module-level singleton instance
_session_store: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get or create the process-wide session store.

    Returns:
        The shared InMemorySessionStore instance.
    """
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store
