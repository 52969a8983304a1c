"""Normalized completion fragments.

Upstream producers hand back heterogeneous chunks: bare strings, message
or run events carrying a ``content`` attribute, or structured results with
an ``answer`` and a list of ``context`` documents. Everything is folded into
``TextFragment`` or ``SourcedFragment`` right at the completion boundary.
"""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field

SNIPPET_LENGTH = 200


class SourceRef(BaseModel):
    """A document excerpt supporting an answer.

    Attributes:
        page: 1-indexed page number.
        snippet: Leading text of the excerpt, at most 200 characters.
    """

    page: int = Field(ge=1)
    snippet: str = Field(max_length=SNIPPET_LENGTH)


class TextFragment(BaseModel):
    """An incremental piece of answer text."""

    kind: Literal["text"] = "text"
    text: str


class SourcedFragment(BaseModel):
    """A structured result carrying answer text and optional sources.

    ``sources`` is None when the result had no context list at all, and an
    empty list when it had one with no entries.
    """

    kind: Literal["sourced"] = "sourced"
    answer: str
    sources: list[SourceRef] | None = None


Fragment = TextFragment | SourcedFragment


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _has_field(obj: Any, name: str) -> bool:
    if isinstance(obj, Mapping):
        return name in obj
    return hasattr(obj, name)


def to_source_ref(document: Any) -> SourceRef:
    """Build a SourceRef from a context document.

    The document's ``metadata.page`` is zero-based; missing pages count as 0.
    """
    metadata = _field(document, "metadata") or {}
    page = _field(metadata, "page") or 0

    content = _field(document, "page_content")
    if content is None:
        content = _field(document, "pageContent")
    snippet = content[:SNIPPET_LENGTH] if isinstance(content, str) else ""

    return SourceRef(page=int(page) + 1, snippet=snippet)


def normalize_fragment(raw: Any) -> Fragment | None:
    """Fold one raw upstream chunk into a Fragment.

    Args:
        raw: Whatever the upstream producer yielded.

    Returns:
        The normalized fragment, or None if the chunk carries no text.
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        return TextFragment(text=raw) if raw else None

    if _has_field(raw, "answer"):
        answer = _field(raw, "answer")
        context = _field(raw, "context")
        sources = None
        if isinstance(context, (list, tuple)):
            sources = [to_source_ref(doc) for doc in context]
        return SourcedFragment(
            answer=answer if isinstance(answer, str) else "",
            sources=sources,
        )

    content = _field(raw, "content")
    if isinstance(content, str) and content:
        return TextFragment(text=content)

    return None
