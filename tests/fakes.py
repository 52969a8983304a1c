"""Test doubles for the completion boundary."""

import asyncio
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field

from lumina.agent.fragments import Fragment, SourcedFragment, SourceRef, TextFragment
from lumina.sessions.store import HistoryTurn


def text(*parts: str) -> list[Fragment]:
    """Build text fragments from strings."""
    return [TextFragment(text=part) for part in parts]


def sourced(answer: str, *pages: tuple[int, str]) -> SourcedFragment:
    """Build a sourced fragment; pages are already 1-indexed."""
    return SourcedFragment(
        answer=answer,
        sources=[SourceRef(page=page, snippet=snippet) for page, snippet in pages],
    )


@dataclass
class RecordedCall:
    system_prompt: str
    history: list[HistoryTurn]
    user_input: str


@dataclass
class ScriptedSource:
    """Yields a fixed list of fragments, then optionally raises."""

    fragments: list[Fragment] = field(default_factory=list)
    error: Exception | None = None
    calls: list[RecordedCall] = field(default_factory=list)
    closed: bool = False

    async def stream(
        self,
        system_prompt: str,
        history: Sequence[HistoryTurn],
        user_input: str,
    ) -> AsyncIterator[Fragment]:
        self.calls.append(RecordedCall(system_prompt, list(history), user_input))
        try:
            for fragment in self.fragments:
                yield fragment
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True

    @property
    def last_call(self) -> RecordedCall:
        return self.calls[-1]


class UnreachableSource:
    """Fails while the request is being constructed, before any fragment."""

    def __init__(self, message: str = "upstream unavailable") -> None:
        self.message = message

    def stream(self, system_prompt, history, user_input):
        raise ConnectionError(self.message)


class HangingSource:
    """Yields one fragment and then never produces another."""

    async def stream(self, system_prompt, history, user_input):
        yield TextFragment(text="partial")
        await asyncio.sleep(3600)
