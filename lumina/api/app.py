"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error envelopes and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lumina.agent.chat_agent import CompletionSourceFactory, get_completion_source
from lumina.agent.config import ChatSettings, get_chat_settings
from lumina.api.chat import router as chat_router
from lumina.api.routes import router as upload_router
from lumina.sessions.store import SessionStore, get_session_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Lumina API...")
    yield
    logger.info("Shutting down Lumina API...")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as a 400 ``{"detail": ...}`` envelope."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    detail = "; ".join(messages) or "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def create_app(
    session_store: SessionStore | None = None,
    completion_factory: CompletionSourceFactory | None = None,
    chat_settings: ChatSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session_store: History backend. Defaults to the process-wide store.
        completion_factory: Builds a completion source from request credentials.
        chat_settings: Credential fallbacks and limits. Loaded from env if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Lumina API",
        description=(
            "Document chat API. Extracts text from an uploaded PDF and streams "
            "answers grounded in the full document text over server-sent events, "
            "keeping per-user conversation history in memory."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.session_store = (
        session_store if session_store is not None else get_session_store()
    )
    application.state.completion_factory = completion_factory or get_completion_source
    application.state.chat_settings = chat_settings or get_chat_settings()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(RequestValidationError, validation_error_handler)

    application.include_router(upload_router)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "lumina"}

    return application


app = create_app()
