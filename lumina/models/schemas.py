from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from lumina.agent.fragments import SourceRef

DEFAULT_USER_ID = "default"
THINKING = "thinking..."


def _default_user_id(v: str | None) -> str:
    if v is None or (isinstance(v, str) and not v.strip()):
        return DEFAULT_USER_ID
    return v


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        query: User's question.
        user_id: Client-generated identifier keying the session history.
        api_key: Primary API key; falls back to the server environment.
        groq_api_key: Completion API key; falls back to the server environment.
        pdf_text: Full extracted document text held by the client.
    """

    query: str = Field(..., min_length=1)
    user_id: str = DEFAULT_USER_ID
    api_key: str | None = None
    groq_api_key: str | None = None
    pdf_text: str | None = None

    @field_validator("query")
    @classmethod
    def reject_blank_query(cls, v: str) -> str:
        """Reject whitespace-only queries; the query itself is kept as sent."""
        if not v.strip():
            raise ValueError("Query must not be blank")
        return v

    @field_validator("user_id", mode="before")
    @classmethod
    def default_user_id(cls, v: str | None) -> str:
        return _default_user_id(v)


class ClearRequest(BaseModel):
    """Request payload for clearing a user's history."""

    user_id: str = DEFAULT_USER_ID
    api_key: str | None = None

    @field_validator("user_id", mode="before")
    @classmethod
    def default_user_id(cls, v: str | None) -> str:
        return _default_user_id(v)


class ClearResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    """Response after PDF upload processing.

    Attributes:
        filename: Name of the uploaded file.
        status: Always "indexed".
        chunks: Always 0; the document is not chunked.
        text: Normalized extracted text for the client to keep.
        message: Human-readable summary.
    """

    filename: str
    status: Literal["indexed"] = "indexed"
    chunks: int = 0
    text: str
    message: str


class StatusEvent(BaseModel):
    type: Literal["status"] = "status"
    content: str = THINKING


class ContentEvent(BaseModel):
    type: Literal["content"] = "content"
    content: str


class SourcesEvent(BaseModel):
    type: Literal["sources"] = "sources"
    sources: list[SourceRef]


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    detail: str


class DoneEvent(BaseModel):
    """Terminal sentinel; encoded on the wire as ``[DONE]``."""

    type: Literal["done"] = "done"


StreamEvent = StatusEvent | ContentEvent | SourcesEvent | ErrorEvent | DoneEvent

DONE = DoneEvent()


class ChatMessage(BaseModel):
    """A message as shown to the user.

    The assistant message's ``content`` grows in place while the answer streams.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Literal["user", "assistant"]
    content: str = ""
    sources: list[SourceRef] = Field(default_factory=list)
    error: str | None = None
