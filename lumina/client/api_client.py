"""HTTP client for the Lumina API with SSE streaming support."""

import logging
import os
from collections.abc import AsyncIterator, Callable

import httpx

from lumina.client.decoder import SSEDecoder
from lumina.models.schemas import (
    DEFAULT_USER_ID,
    ChatMessage,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    SourcesEvent,
    StreamEvent,
    UploadResponse,
)

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


class LuminaAPIError(Exception):
    """Raised when the API answers with an error envelope."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Server error: {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if detail:
            return str(detail)
    return f"Server error: {response.status_code}"


class LuminaClient:
    """Talks to the upload, chat and clear endpoints.

    Args:
        base_url: Server root URL.
        user_id: Stable client-generated identifier for this device.
        api_key: Primary API key sent with each request, if any.
        groq_api_key: Completion API key sent with chat requests, if any.
        transport: Optional httpx transport (e.g. ASGITransport in tests).
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        user_id: str = DEFAULT_USER_ID,
        api_key: str | None = None,
        groq_api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 120.0,
    ) -> None:
        self.user_id = user_id
        self._api_key = api_key
        self._groq_api_key = groq_api_key
        self.document_text: str | None = None
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "LuminaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def upload_pdf(self, filename: str, content: bytes) -> UploadResponse:
        """Upload a PDF and return its extracted text.

        The extracted text is kept as ``document_text`` and sent with later
        chat requests.

        Raises:
            LuminaAPIError: If the server rejects the upload.
        """
        data = {"user_id": self.user_id}
        if self._api_key:
            data["api_key"] = self._api_key
        response = await self._client.post(
            "/api/upload",
            files={"file": (filename, content, "application/pdf")},
            data=data,
        )
        if response.is_error:
            raise LuminaAPIError(response.status_code, _error_detail(response))
        upload = UploadResponse.model_validate(response.json())
        self.document_text = upload.text
        return upload

    async def clear_history(self) -> str:
        """Clear this user's server-side history.

        Returns:
            The server's confirmation message.
        """
        response = await self._client.post(
            "/api/clear",
            json={"user_id": self.user_id, "api_key": self._api_key},
        )
        if response.is_error:
            raise LuminaAPIError(response.status_code, _error_detail(response))
        return response.json()["message"]

    async def stream_chat(
        self,
        query: str,
        pdf_text: str | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Send a chat request and yield decoded events as they arrive.

        Records split across transport chunks are reassembled. Iteration
        stops after the DONE sentinel.
        ``pdf_text`` defaults to the text of the last uploaded document.

        Raises:
            LuminaAPIError: If the request is rejected before streaming.
        """
        payload = {
            "query": query,
            "user_id": self.user_id,
            "api_key": self._api_key,
            "groq_api_key": self._groq_api_key,
            "pdf_text": pdf_text if pdf_text is not None else self.document_text,
        }
        decoder = SSEDecoder()
        async with self._client.stream(
            "POST",
            "/api/chat",
            json=payload,
            headers={"Accept": "text/event-stream"},
        ) as response:
            if response.is_error:
                await response.aread()
                raise LuminaAPIError(response.status_code, _error_detail(response))

            async for chunk in response.aiter_text():
                for event in decoder.feed(chunk):
                    yield event
                    if isinstance(event, DoneEvent):
                        return

            for event in decoder.flush():
                yield event

    async def ask(
        self,
        query: str,
        pdf_text: str | None = None,
        on_update: Callable[[ChatMessage], None] | None = None,
    ) -> ChatMessage:
        """Stream an answer into a single assistant message.

        The message's content grows in place as fragments arrive; ``on_update``
        is called after every change.

        Returns:
            The completed assistant message. Its ``error`` is set if the
            server reported a failure mid-stream.
        """
        message = ChatMessage(role="assistant")
        async for event in self.stream_chat(query, pdf_text=pdf_text):
            if isinstance(event, ContentEvent) and event.content:
                message.content += event.content
            elif isinstance(event, SourcesEvent):
                message.sources.extend(event.sources)
            elif isinstance(event, ErrorEvent):
                logger.warning(f"Chat failed mid-stream: {event.detail}")
                message.error = event.detail
            else:
                continue
            if on_update is not None:
                on_update(message)
        return message
