"""Streaming chat pipeline.

Turns a query, the user's history and the client's document text into an
ordered event stream, and re-encodes that stream as server-sent events.
"""

from lumina.chat.orchestrator import ChatOrchestrator
from lumina.chat.sse import DONE_RECORD, SSE_HEADERS, encode_event, encode_stream

__all__ = ["DONE_RECORD", "SSE_HEADERS", "ChatOrchestrator", "encode_event", "encode_stream"]
