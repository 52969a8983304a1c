"""Pydantic models for API requests, responses and stream events.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatRequest / ClearRequest: Incoming payloads
    - UploadResponse / ClearResponse: Outgoing payloads
    - StatusEvent, ContentEvent, SourcesEvent, ErrorEvent, DoneEvent: Stream records
    - ChatMessage: Client-side message that accumulates streamed content
"""

from lumina.models.schemas import (
    DEFAULT_USER_ID,
    DONE,
    ChatMessage,
    ChatRequest,
    ClearRequest,
    ClearResponse,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    SourcesEvent,
    StatusEvent,
    StreamEvent,
    UploadResponse,
)

__all__ = [
    "DEFAULT_USER_ID",
    "DONE",
    "ChatMessage",
    "ChatRequest",
    "ClearRequest",
    "ClearResponse",
    "ContentEvent",
    "DoneEvent",
    "ErrorEvent",
    "SourcesEvent",
    "StatusEvent",
    "StreamEvent",
    "UploadResponse",
]
