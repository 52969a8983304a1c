"""PDF upload endpoint for document ingestion.

Handles file upload, validation and text extraction. The extracted text is
returned to the client, which sends it back with each chat request.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from lumina.agent.config import ChatSettings, MissingCredentialsError
from lumina.api.dependencies import get_settings
from lumina.models.schemas import DEFAULT_USER_ID, UploadResponse
from lumina.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDFParseError,
    PDFValidationError,
    parse_pdf,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

# 10MB limit matches pdf_parser constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE


def _validate_file_extension(filename: str | None) -> str:
    """Validate that file has .pdf extension.

    Args:
        filename: The uploaded filename.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if extension is invalid.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    return filename


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Args:
        file: The uploaded file.

    Returns:
        File content as bytes.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


@router.post("/upload", response_model=UploadResponse)
async def upload_pdf(
    file: UploadFile | None = File(None),
    user_id: str = Form(DEFAULT_USER_ID),
    api_key: str | None = Form(None),
    settings: ChatSettings = Depends(get_settings),
) -> UploadResponse:
    """Upload a PDF and return its extracted text.

    Args:
        file: The uploaded PDF file (multipart/form-data).
        user_id: Client-generated user identifier.
        api_key: Primary API key; falls back to the server environment.

    Returns:
        UploadResponse with the normalized text and ``chunks`` of 0.

    Raises:
        400: No file, missing API keys, not a PDF, empty or corrupt.
        413: File exceeds 10MB limit.
        500: No text could be extracted, or an internal error.
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    try:
        settings.resolve_credentials(api_key)
    except MissingCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    filename = _validate_file_extension(file.filename)
    content = await _read_and_validate_size(file)

    # pypdf is CPU-bound
    try:
        pdf_content = await run_in_threadpool(parse_pdf, content)
    except PDFValidationError as e:
        logger.warning(f"PDF parse error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except PDFParseError as e:
        logger.error(f"PDF text extraction failed for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
    except Exception as e:
        logger.exception(f"Unexpected error while processing {filename}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Internal Server Error",
        ) from e

    chunks = 0
    logger.info(
        f"Extracted {len(pdf_content.text)} chars from {filename} "
        f"({pdf_content.pages} pages) for user {user_id or DEFAULT_USER_ID}"
    )

    return UploadResponse(
        filename=filename,
        chunks=chunks,
        text=pdf_content.text,
        message=f"Successfully indexed {chunks} chunks from {filename}",
    )
