"""PDF parsing module using pypdf.

Extracts and normalizes the text of an uploaded PDF. The result is sent back
to the client, which re-sends it with every chat request, so the text is
capped to stay well inside the model's context window.
"""

import io
import logging
import re

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
# ~128k token context; 300k chars leaves a generous margin
MAX_TEXT_LENGTH = 300_000
TRUNCATION_MARKER = "... (Document Truncated)"

_BLANK_LINES = re.compile(r"\n\s*\n")


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Normalized text content from all pages.
        pages: Total number of pages in the document.
        metadata: Document metadata (title, author, etc.).
        truncated: Whether the text was cut to MAX_TEXT_LENGTH.
    """

    text: str
    pages: int = Field(ge=0)
    metadata: dict[str, str | None]
    truncated: bool = False


class PDFParseError(Exception):
    """Raised when PDF parsing fails."""

    pass


class PDFValidationError(PDFParseError):
    """The upload is not an acceptable PDF (empty, oversized, corrupt)."""

    pass


class PDFExtractionError(PDFParseError):
    """The PDF was read but yielded no usable text."""

    pass


def normalize_text(text: str) -> str:
    """Collapse runs of blank lines into one blank line and trim.

    Args:
        text: Raw extracted text.

    Returns:
        Normalized text.
    """
    return _BLANK_LINES.sub("\n\n", text).strip()


def truncate_text(text: str, limit: int = MAX_TEXT_LENGTH) -> tuple[str, bool]:
    """Cut text to ``limit`` characters, appending the truncation marker.

    Args:
        text: Normalized text.
        limit: Maximum characters of original content to keep.

    Returns:
        The possibly truncated text and whether truncation happened.
    """
    if len(text) <= limit:
        return text, False
    return text[:limit] + TRUNCATION_MARKER, True


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        PDFValidationError: If validation fails.
    """
    if not file_content:
        raise PDFValidationError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFValidationError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFValidationError("Invalid PDF: file does not start with PDF header")


def _extract_metadata(reader: PdfReader) -> dict[str, str | None]:
    """Extract metadata from PDF reader.

    Args:
        reader: Initialized PdfReader instance.

    Returns:
        Dictionary of metadata fields.
    """
    metadata: dict[str, str | None] = {}

    try:
        if reader.metadata:
            metadata["title"] = reader.metadata.get("/Title")
            metadata["author"] = reader.metadata.get("/Author")
            metadata["subject"] = reader.metadata.get("/Subject")
            metadata["creator"] = reader.metadata.get("/Creator")
            metadata["producer"] = reader.metadata.get("/Producer")
    except Exception as e:
        logger.warning(f"Failed to extract some metadata: {e}")

    return {k: str(v) for k, v in metadata.items() if v is not None}


def parse_pdf(file_content: bytes) -> PDFContent:
    """Parse a PDF file and extract its normalized text content.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with normalized text, page count, and metadata.

    Raises:
        PDFValidationError: If the file is empty, too large, not a PDF, or corrupt.
        PDFExtractionError: If no text could be extracted.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFValidationError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFValidationError(f"Failed to read PDF: {e}") from e

    # Extract text from all pages
    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue

    raw_text = "\n\n".join(text_parts)
    if not raw_text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")
        raise PDFExtractionError("PDF text extraction failed.")

    text, truncated = truncate_text(normalize_text(raw_text))
    if truncated:
        logger.info(f"Truncated extracted text to {MAX_TEXT_LENGTH} characters")

    return PDFContent(
        text=text,
        pages=pages,
        metadata=_extract_metadata(reader),
        truncated=truncated,
    )
