"""One chat turn, from user query to event stream.

The orchestrator snapshots the user's history, builds the system prompt with
the full document inline, drives the completion source and turns fragments
into stream events. History is only written after the source is exhausted
with a non-empty answer: failed, empty and abandoned turns leave it as it was.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from lumina.agent.chat_agent import CompletionSource
from lumina.agent.fragments import Fragment, SourcedFragment, TextFragment
from lumina.agent.prompts import build_system_prompt, has_document
from lumina.models.schemas import (
    DONE,
    ContentEvent,
    ErrorEvent,
    SourcesEvent,
    StatusEvent,
    StreamEvent,
)
from lumina.sessions.store import SessionStore

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class ChatOrchestrator:
    """Runs chat turns against a session store and a completion source.

    Args:
        store: Where conversation history is read from and appended to.
        source: Produces answer fragments for each turn.
        fragment_timeout: Seconds to wait for each fragment. None waits
            indefinitely; an expired wait is reported like any upstream failure.
    """

    def __init__(
        self,
        store: SessionStore,
        source: CompletionSource,
        fragment_timeout: float | None = None,
    ) -> None:
        self._store = store
        self._source = source
        self._fragment_timeout = fragment_timeout

    async def converse(
        self,
        user_id: str,
        query: str,
        document_text: str | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Answer ``query`` for ``user_id`` as a sequence of stream events.

        The sequence always starts with a status event and ends with the
        DONE sentinel. An upstream failure yields exactly one error event
        before DONE. Closing the sequence early closes the upstream stream.

        Args:
            user_id: Key of the session whose history is used and updated.
            query: The user's message.
            document_text: Extracted document text, if the client has one.

        Yields:
            Status, content, sources and error events, then DONE.
        """
        history = list(self._store.get(user_id).history)
        system_prompt = build_system_prompt(document_text)
        logger.info(
            f"Chat turn for user {user_id} "
            f"(history={len(history)} turns, document={'yes' if has_document(document_text) else 'no'})"
        )

        yield StatusEvent()

        answer_parts: list[str] = []
        fragment_count = 0
        upstream: AsyncIterator[Fragment] | None = None
        try:
            upstream = aiter(self._source.stream(system_prompt, history, query))
            while True:
                fragment = await self._next_fragment(upstream)
                if fragment is _EXHAUSTED:
                    break
                fragment_count += 1
                for event in self._to_events(fragment, answer_parts):
                    yield event
        except Exception as e:
            logger.error(f"Completion failed for user {user_id} after {fragment_count} fragments: {e}")
            yield ErrorEvent(detail=str(e) or type(e).__name__)
            yield DONE
            return
        except (GeneratorExit, asyncio.CancelledError):
            logger.info(f"Chat stream for user {user_id} closed before completion")
            raise
        finally:
            if upstream is not None:
                await _close(upstream)

        answer = "".join(answer_parts)
        if answer:
            self._store.append(user_id, query, answer)
        logger.info(
            f"Chat turn for user {user_id} complete "
            f"({fragment_count} fragments, {len(answer)} chars)"
        )
        yield DONE

    async def _next_fragment(self, upstream: AsyncIterator[Fragment]) -> Fragment | object:
        if self._fragment_timeout is None:
            return await anext(upstream, _EXHAUSTED)

        async def pull() -> Fragment | object:
            return await anext(upstream, _EXHAUSTED)

        try:
            return await asyncio.wait_for(pull(), self._fragment_timeout)
        except TimeoutError as e:
            raise TimeoutError(
                f"No response from the model within {self._fragment_timeout:g} seconds"
            ) from e

    @staticmethod
    def _to_events(fragment: Fragment, answer_parts: list[str]) -> list[StreamEvent]:
        events: list[StreamEvent] = []
        if isinstance(fragment, TextFragment):
            if fragment.text:
                answer_parts.append(fragment.text)
                events.append(ContentEvent(content=fragment.text))
        elif isinstance(fragment, SourcedFragment):
            if fragment.answer:
                answer_parts.append(fragment.answer)
                events.append(ContentEvent(content=fragment.answer))
            if fragment.sources is not None:
                events.append(SourcesEvent(sources=fragment.sources))
        return events


async def _close(upstream: AsyncIterator[Fragment]) -> None:
    aclose = getattr(upstream, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception as e:
        logger.warning(f"Failed to close completion stream: {e}")
