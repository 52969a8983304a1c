"""Incremental decoder for the chat event stream.

Transport chunks do not line up with records: a JSON record can be split
across two chunks, or one chunk can carry several records. The decoder keeps
whatever follows the last blank line and only parses complete records.
"""

import json
import logging

from pydantic import TypeAdapter, ValidationError

from lumina.chat.sse import DONE_MARKER
from lumina.models.schemas import DONE, StreamEvent

logger = logging.getLogger(__name__)

_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def decode_record(record: str) -> StreamEvent | None:
    """Parse one complete SSE record.

    Args:
        record: Record text without its terminating blank line.

    Returns:
        The decoded event, DONE for the sentinel, or None for records
        without data or with an unrecognized payload.
    """
    data_lines = []
    for line in record.split("\n"):
        if line.startswith("data:"):
            data_lines.append(line[5:].removeprefix(" "))
    if not data_lines:
        return None

    payload = "\n".join(data_lines).strip()
    if payload == DONE_MARKER:
        return DONE

    try:
        return _event_adapter.validate_python(json.loads(payload))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.debug(f"Skipping undecodable record: {e}")
        return None


class SSEDecoder:
    """Buffers transport chunks and emits events for complete records."""

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a blank line."""
        return self._buffer

    def feed(self, chunk: str) -> list[StreamEvent]:
        """Add a chunk and return the events it completed.

        Args:
            chunk: Text as received from the transport.

        Returns:
            Events whose records are now complete, in stream order.
        """
        self._buffer = (self._buffer + chunk).replace("\r\n", "\n")
        events: list[StreamEvent] = []
        while "\n\n" in self._buffer:
            record, self._buffer = self._buffer.split("\n\n", 1)
            event = decode_record(record)
            if event is not None:
                events.append(event)
        return events

    def flush(self) -> list[StreamEvent]:
        """Decode whatever is left once the transport has closed."""
        record, self._buffer = self._buffer, ""
        if not record.strip():
            return []
        event = decode_record(record)
        return [event] if event is not None else []
