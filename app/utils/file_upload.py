"""
File Upload Utility - store uploaded CV PDFs on disk.

Only PDFs are accepted. Max file size: MAX_UPLOAD_SIZE_MB (10MB default).
Stored files are served back under /uploads.
"""

import os
import random
import time
from pathlib import Path

from fastapi import UploadFile, HTTPException

from app.core.config import Settings
from app.core.logging_config import get_logger
from app.schemas.schemas import UploadResponse

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
UPLOAD_URL_PREFIX = "/uploads"
CHUNK_SIZE = 1024 * 1024


def ensure_upload_dir(settings: Settings) -> Path:
    """Create the uploads directory if needed and return its absolute path."""
    upload_dir = Path(settings.upload_dir).resolve()
    if not upload_dir.exists():
        upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created uploads directory at: %s", upload_dir)
    return upload_dir


def make_stored_filename(field_name: str) -> str:
    """<field>-<epoch millis>-<random>.pdf"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{field_name}-{unique_suffix}.pdf"


async def save_pdf_upload(file: UploadFile, field_name: str, settings: Settings) -> UploadResponse:
    """
    Validate and store an uploaded PDF.

    Args:
        file: FastAPI UploadFile
        field_name: multipart field the file arrived in (used in the stored name)
        settings: app settings (upload dir, size limit)

    Returns:
        UploadResponse with the absolute path and the public URL

    Raises:
        HTTPException(400) on wrong type or oversize file
    """
    logger.info("Uploading file: %s Type: %s", file.filename, file.content_type)
    if file.content_type != PDF_CONTENT_TYPE:
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    # Stop reading as soon as the limit is passed
    chunks = []
    size = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > settings.max_upload_size_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File too large. Maximum size is {settings.max_upload_size_mb}MB."
            )
        chunks.append(chunk)
    content = b"".join(chunks)

    upload_dir = ensure_upload_dir(settings)
    filename = make_stored_filename(field_name)
    path = upload_dir / filename
    path.write_bytes(content)

    response = UploadResponse(
        filename=filename,
        path=os.path.abspath(path),
        url=f"{UPLOAD_URL_PREFIX}/{filename}",
        size=len(content)
    )
    logger.info("Upload successful: %s (%d bytes)", response.path, response.size)
    return response
