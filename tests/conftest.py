"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - session_store: Fresh in-memory history store per test
    - source: Scripted completion source, editable per test
    - chat_settings: Settings with both fallback API keys present
    - test_app: FastAPI app wired to the fixtures above
    - async_client: HTTPX client for API testing
    - pdf_bytes: Minimal valid PDF header for upload tests
"""

import io
from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from lumina.agent.config import ChatSettings
from lumina.api.app import create_app
from lumina.sessions.store import InMemorySessionStore
from tests.fakes import ScriptedSource


@pytest.fixture
def session_store() -> InMemorySessionStore:
    """Return an empty store isolated from the process-wide one."""
    return InMemorySessionStore()


@pytest.fixture
def source() -> ScriptedSource:
    """Return a completion source with no fragments; tests fill it in."""
    return ScriptedSource()


@pytest.fixture
def chat_settings() -> ChatSettings:
    """Return settings whose environment fallbacks satisfy the key check."""
    return ChatSettings(api_key="test-primary-key", groq_api_key="test-groq-key", fragment_timeout=None)


@pytest.fixture
def test_app(
    session_store: InMemorySessionStore,
    source: ScriptedSource,
    chat_settings: ChatSettings,
) -> FastAPI:
    """Create an app that streams from the scripted source."""
    return create_app(
        session_store=session_store,
        completion_factory=lambda credentials: source,
        chat_settings=chat_settings,
    )


@pytest.fixture
async def async_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def pdf_bytes() -> bytes:
    """Bytes that pass header validation; pair with a patched PdfReader."""
    return b"%PDF-1.4\n%test document\n"


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """A real one-page PDF with no text on it."""
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
