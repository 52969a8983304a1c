"""Integration tests for PDF upload endpoint."""

from unittest.mock import MagicMock, patch

import pytest
import pytest_check as check
from httpx import AsyncClient

from lumina.agent.config import ChatSettings
from lumina.parsing.pdf_parser import MAX_FILE_SIZE


def fake_reader(*page_texts: str) -> MagicMock:
    reader = MagicMock()
    reader.pages = [MagicMock(**{"extract_text.return_value": t}) for t in page_texts]
    reader.metadata = None
    return reader


class TestUploadValidPdf:
    """Tests for successful PDF upload."""

    @patch("lumina.parsing.pdf_parser.PdfReader")
    async def test_returns_normalized_text(
        self, mock_reader: MagicMock, async_client: AsyncClient, pdf_bytes: bytes
    ) -> None:
        """Valid PDF returns 200 with the extracted text."""
        mock_reader.return_value = fake_reader("Hello\n\n\nWorld")

        response = await async_client.post(
            "/api/upload",
            files={"file": ("policy.pdf", pdf_bytes, "application/pdf")},
            data={"user_id": "u1"},
        )

        check.equal(response.status_code, 200)
        data = response.json()
        check.equal(data["filename"], "policy.pdf")
        check.equal(data["status"], "indexed")
        check.equal(data["chunks"], 0)
        check.equal(data["text"], "Hello\n\nWorld")
        check.equal(data["message"], "Successfully indexed 0 chunks from policy.pdf")

    @patch("lumina.parsing.pdf_parser.PdfReader")
    async def test_uppercase_extension_accepted(
        self, mock_reader: MagicMock, async_client: AsyncClient, pdf_bytes: bytes
    ) -> None:
        mock_reader.return_value = fake_reader("Scanned text")

        response = await async_client.post(
            "/api/upload",
            files={"file": ("REPORT.PDF", pdf_bytes, "application/pdf")},
        )

        assert response.status_code == 200


class TestUploadRejection:
    """Tests for upload validation and rejection."""

    async def test_missing_file_returns_400(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/upload", data={"user_id": "u1"})

        check.equal(response.status_code, 400)
        check.equal(response.json()["detail"], "No file uploaded")

    async def test_rejects_non_pdf_extension(self, async_client: AsyncClient) -> None:
        """Non-PDF file extension returns 400."""
        response = await async_client.post(
            "/api/upload",
            files={"file": ("notes.txt", b"plain text", "text/plain")},
        )

        check.equal(response.status_code, 400)
        check.is_in("PDF", response.json()["detail"])

    async def test_rejects_fake_pdf(self, async_client: AsyncClient) -> None:
        """A .pdf name over non-PDF content returns 400."""
        response = await async_client.post(
            "/api/upload",
            files={"file": ("fake.pdf", b"This is not a PDF file", "application/pdf")},
        )

        check.equal(response.status_code, 400)
        check.is_in("Invalid PDF", response.json()["detail"])

    async def test_rejects_oversized_file(self, async_client: AsyncClient) -> None:
        """File over 10MB returns 413."""
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        response = await async_client.post(
            "/api/upload",
            files={"file": ("large.pdf", oversized, "application/pdf")},
        )

        check.equal(response.status_code, 413)
        check.is_in("exceeds maximum", response.json()["detail"])

    async def test_rejects_empty_file(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("empty.pdf", b"", "application/pdf")},
        )

        check.equal(response.status_code, 400)
        check.is_in("Empty file", response.json()["detail"])

    async def test_pdf_without_text_returns_500(
        self, async_client: AsyncClient, blank_pdf_bytes: bytes
    ) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("scan.pdf", blank_pdf_bytes, "application/pdf")},
        )

        check.equal(response.status_code, 500)
        check.equal(response.json(), {"detail": "PDF text extraction failed."})


class TestUploadCredentials:
    """Tests with no API keys in the server environment."""

    @pytest.fixture
    def chat_settings(self) -> ChatSettings:
        return ChatSettings(api_key=None, groq_api_key=None, fragment_timeout=None)

    async def test_missing_keys_returns_400(self, async_client: AsyncClient, pdf_bytes: bytes) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("policy.pdf", pdf_bytes, "application/pdf")},
        )

        check.equal(response.status_code, 400)
        check.equal(response.json(), {"detail": "Missing API keys"})


class TestUploadCors:
    """Tests for CORS headers on the upload endpoint."""

    async def test_preflight_allows_post(self, async_client: AsyncClient) -> None:
        response = await async_client.options(
            "/api/upload",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        check.equal(response.status_code, 200)
        check.is_in("access-control-allow-origin", response.headers)


async def test_health(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")

    assert response.json() == {"status": "healthy", "service": "lumina"}
