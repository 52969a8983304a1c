"""Server-sent event encoding for the chat stream.

Each event becomes one ``data: <JSON>\\n\\n`` record. The stream is closed
by ``data: [DONE]\\n\\n`` exactly once, whatever happens upstream.
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator

from lumina.models.schemas import DoneEvent, ErrorEvent, StreamEvent

logger = logging.getLogger(__name__)

DONE_MARKER = "[DONE]"
DONE_RECORD = f"data: {DONE_MARKER}\n\n"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def encode_event(event: StreamEvent) -> str:
    """Encode one event as a self-contained SSE record.

    Args:
        event: The event to encode.

    Returns:
        The record, terminated by a blank line.
    """
    if isinstance(event, DoneEvent):
        return DONE_RECORD
    return f"data: {event.model_dump_json()}\n\n"


async def encode_stream(events: AsyncIterable[StreamEvent]) -> AsyncIterator[str]:
    """Re-encode an event sequence as SSE records.

    Guarantees a single trailing DONE record: one is appended if the source
    ends without it, and an error record precedes it if the source raises.
    Anything after the first DONE is dropped.

    Args:
        events: Internal event sequence, typically from ``ChatOrchestrator``.

    Yields:
        SSE records ready to write to the response.
    """
    iterator = aiter(events)
    done = False
    try:
        async for event in iterator:
            yield encode_event(event)
            if isinstance(event, DoneEvent):
                done = True
                break
    except Exception as e:
        logger.exception("Chat event stream failed")
        yield encode_event(ErrorEvent(detail=str(e) or type(e).__name__))
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()

    if not done:
        yield DONE_RECORD
