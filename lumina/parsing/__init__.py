"""PDF parsing utilities for document ingestion.

Responsibilities:
    - PDF text extraction with pypdf
    - Blank-line normalization and trimming
    - Truncation to a fixed character budget with a visible marker
    - Metadata extraction (title, author, pages)

There is no chunking: the whole text goes back to the client.
"""

from lumina.parsing.pdf_parser import (
    MAX_TEXT_LENGTH,
    TRUNCATION_MARKER,
    PDFContent,
    PDFExtractionError,
    PDFParseError,
    PDFValidationError,
    normalize_text,
    parse_pdf,
    truncate_text,
)

__all__ = [
    "MAX_TEXT_LENGTH",
    "TRUNCATION_MARKER",
    "PDFContent",
    "PDFExtractionError",
    "PDFParseError",
    "PDFValidationError",
    "normalize_text",
    "parse_pdf",
    "truncate_text",
]
