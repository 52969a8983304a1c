"""Chat streaming and history endpoints.

POST /api/chat streams the answer as server-sent events. Input problems are
rejected with a JSON envelope before any streaming starts; failures after
that point travel in-band as an error event followed by ``[DONE]``.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, StreamingResponse

from lumina.agent.chat_agent import CompletionSourceFactory
from lumina.agent.config import ChatSettings, MissingCredentialsError
from lumina.api.dependencies import get_completion_factory, get_settings, get_store
from lumina.chat.orchestrator import ChatOrchestrator
from lumina.chat.sse import SSE_HEADERS, encode_stream
from lumina.models.schemas import ChatRequest, ClearRequest, ClearResponse
from lumina.sessions.store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat(
    request: ChatRequest,
    store: SessionStore = Depends(get_store),
    completion_factory: CompletionSourceFactory = Depends(get_completion_factory),
    settings: ChatSettings = Depends(get_settings),
) -> StreamingResponse:
    """Stream an answer to the user's query.

    Args:
        request: Query, user id, optional keys and document text.

    Returns:
        ``text/event-stream`` response of ``data: <JSON>`` records ending
        with ``data: [DONE]``.

    Raises:
        400: Missing API keys.
        500: The completion source could not be created.
    """
    try:
        credentials = settings.resolve_credentials(request.api_key, request.groq_api_key)
    except MissingCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    try:
        source = completion_factory(credentials)
    except Exception as e:
        logger.exception(f"Failed to create completion source for user {request.user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Internal Server Error",
        ) from e

    orchestrator = ChatOrchestrator(store, source, fragment_timeout=settings.fragment_timeout)
    events = orchestrator.converse(request.user_id, request.query, request.pdf_text)

    return StreamingResponse(
        encode_stream(events),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/clear", response_model=ClearResponse)
async def clear_history(
    request: ClearRequest,
    store: SessionStore = Depends(get_store),
    settings: ChatSettings = Depends(get_settings),
) -> ClearResponse | JSONResponse:
    """Clear the server-side history for a user.

    The completion key is only taken from the server environment here.

    Returns:
        Confirmation message, or ``{"error": ...}`` with 400/500.
    """
    try:
        settings.resolve_credentials(request.api_key)
    except MissingCredentialsError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})

    try:
        store.clear(request.user_id)
    except Exception as e:
        logger.exception(f"Failed to clear history for user {request.user_id}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    return ClearResponse(message=f"Session history cleared for {request.user_id}")
