"""
Text Extractor - turn an uploaded PDF into plain text.

The upload endpoint has already enforced the PDF content type and the
size ceiling; nothing here re-checks them.
"""

import io
from pathlib import Path

from app.core.exceptions import ExtractionFailed
from app.core.logging_config import get_logger

# PDF support
try:
    from PyPDF2 import PdfReader
    PDF_SUPPORTED = True
except ImportError:
    PDF_SUPPORTED = False

logger = get_logger(__name__)


def read_pdf_file(pdf_path: str) -> bytes:
    """Read the stored upload. Raises ExtractionFailed if it is missing or unreadable."""
    path = Path(pdf_path)
    if not path.is_file():
        logger.error("File not found at path: %s", pdf_path)
        raise ExtractionFailed(f"PDF file not found at path: {pdf_path}", path=pdf_path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise ExtractionFailed(f"Could not read PDF file at {pdf_path}: {e}", path=pdf_path) from e


def unavailable_placeholder(content: bytes) -> str:
    return f"[PDF text extraction unavailable: {len(content)} bytes received]"


def extract_pdf_text(content: bytes) -> str:
    """
    Extract text from PDF bytes.

    Returns the text of every page joined with newlines (possibly empty).
    When no PDF library is installed, returns a placeholder noting the byte
    length instead of failing.

    Raises:
        ExtractionFailed: the bytes cannot be opened as a PDF
    """
    if not PDF_SUPPORTED:
        logger.warning("PyPDF2 not installed; using placeholder text")
        return unavailable_placeholder(content)

    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    except Exception as e:
        raise ExtractionFailed(f"Error reading PDF: {e}") from e

    return '\n'.join(text_parts)


def extract_text_from_path(pdf_path: str) -> str:
    """Read the file at pdf_path and extract its text."""
    content = read_pdf_file(pdf_path)
    text = extract_pdf_text(content)
    logger.info("PDF parsed successfully, text length: %d", len(text))
    return text
