"""Completion source backed by an Agno agent.

The orchestrator only sees ``CompletionSource.stream``: system prompt,
prior history and the new user input go in, normalized fragments come out.

Design notes:

1. **Stateless agent** - History lives in the session store, not in Agno.
   Each call builds a fresh Agent with no db, and the stored turns are passed
   explicitly as messages. This keeps the store swappable and makes the prompt
   for a turn fully determined by its inputs.

2. **OpenAI-compatible model** - ``OpenAILike`` talks to any endpoint that
   speaks the chat-completions protocol; the default config points at Groq.

3. **Per-request source** - API keys may arrive with the request, so a source
   is created per chat request via ``get_completion_source``. The model client
   is cheap to construct.

4. **Errors propagate** - Agno reports a failed or cancelled run as a
   ``RunError`` or ``RunCancelled`` event instead of raising. Those events are
   re-raised here as ``CompletionError`` so the caller turns them into an
   in-band error event. Nothing is swallowed here.
"""

import logging
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Protocol

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAILike
from agno.run.agent import RunEvent

from lumina.agent.config import AgentConfig, Credentials, get_agent_config
from lumina.agent.fragments import Fragment, normalize_fragment
from lumina.sessions.store import HistoryTurn, Role

logger = logging.getLogger(__name__)

_ROLE_MAP = {
    Role.HUMAN: "user",
    Role.ASSISTANT: "assistant",
}

_FAILURE_EVENTS = (RunEvent.run_error, RunEvent.run_cancelled)


class CompletionError(Exception):
    """Raised when the model run ends with an error or is cancelled."""

    pass


class CompletionSource(Protocol):
    """Produces answer fragments for one chat turn."""

    def stream(
        self,
        system_prompt: str,
        history: Sequence[HistoryTurn],
        user_input: str,
    ) -> AsyncIterator[Fragment]:
        """Stream fragments for ``user_input`` given the prompt and history."""
        ...


CompletionSourceFactory = Callable[[Credentials], CompletionSource]


def to_messages(history: Sequence[HistoryTurn], user_input: str) -> list[Message]:
    """Convert stored turns plus the new input into model messages.

    Args:
        history: Prior turns, oldest first.
        user_input: The new human message.

    Returns:
        Messages in chat-completions role vocabulary.
    """
    messages = [Message(role=_ROLE_MAP[turn.role], content=turn.text) for turn in history]
    messages.append(Message(role="user", content=user_input))
    return messages


class AgnoCompletionSource:
    """CompletionSource that streams from an Agno agent."""

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the completion source.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._model = self._create_model()

    def _create_model(self) -> OpenAILike:
        """Create the chat model client.

        Returns:
            OpenAI-compatible model configured from AgentConfig.
        """
        return OpenAILike(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

    def _create_agent(self, system_prompt: str) -> Agent:
        """Create a single-use agent for one turn.

        Args:
            system_prompt: Full system instruction, document included.

        Returns:
            Agent with no storage and no history of its own.
        """
        return Agent(
            model=self._model,
            system_message=system_prompt,
        )

    async def stream(
        self,
        system_prompt: str,
        history: Sequence[HistoryTurn],
        user_input: str,
    ) -> AsyncIterator[Fragment]:
        """Stream response fragments for a message.

        Args:
            system_prompt: System instruction for this turn.
            history: Prior turns to replay, oldest first.
            user_input: The user's message.

        Yields:
            Normalized fragments as they arrive.
        """
        agent = self._create_agent(system_prompt)
        messages = to_messages(history, user_input)
        logger.debug(
            f"Requesting completion from {self._config.model_name} "
            f"with {len(history)} history turns"
        )

        response_stream = agent.arun(input=messages, stream=True)

        async for chunk in response_stream:
            event = getattr(chunk, "event", RunEvent.run_content)
            if event in _FAILURE_EVENTS:
                raise CompletionError(_failure_detail(chunk))
            # Only content events carry answer text; lifecycle events repeat it
            if event != RunEvent.run_content:
                continue
            fragment = normalize_fragment(chunk)
            if fragment is not None:
                yield fragment


def _failure_detail(chunk: object) -> str:
    detail = getattr(chunk, "content", None) or getattr(chunk, "reason", None)
    if detail:
        return str(detail)
    return "Model run did not complete"


def get_completion_source(credentials: Credentials) -> CompletionSource:
    """Create a completion source for one request.

    Args:
        credentials: Resolved API keys for the request.

    Returns:
        An AgnoCompletionSource using the request's completion key.
    """
    return AgnoCompletionSource(get_agent_config(api_key=credentials.groq_api_key))
