"""PDF text extraction using pypdf.

Pages are joined with blank lines so that page boundaries become
paragraph boundaries for the chunker.
"""

import io
import logging
import re

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from studynotes.config import MAX_UPLOAD_SIZE

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"

_TRAILING_SPACE = re.compile(r"[ \t]+\n")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Combined text of all pages.
        pages: Total number of pages in the document.
        title: Title from the document metadata, if any.
    """

    text: str
    pages: int = Field(ge=0)
    title: str | None = None

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())


class PDFParseError(Exception):
    """Raised when PDF parsing fails."""

    pass


def _validate_pdf_bytes(file_content: bytes, max_size: int) -> None:
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > max_size:
        size_mb = len(file_content) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        raise PDFParseError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)"
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def _normalize_page_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_SPACE.sub("\n", text)
    return _EXCESS_BLANK_LINES.sub("\n\n", text).strip()


def _read_title(reader: PdfReader) -> str | None:
    try:
        if reader.metadata and reader.metadata.title:
            return str(reader.metadata.title)
    except Exception as e:
        logger.warning(f"Failed to read PDF metadata: {e}")
    return None


def parse_pdf(file_content: bytes, max_size: int = MAX_UPLOAD_SIZE) -> PDFContent:
    """Parse a PDF file and extract its text content.

    Args:
        file_content: Raw bytes of the PDF file.
        max_size: Maximum accepted size in bytes.

    Returns:
        PDFContent with extracted text, page count and title.

    Raises:
        PDFParseError: If the file is invalid, too large, empty, or corrupt.
    """
    _validate_pdf_bytes(file_content, max_size)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = _normalize_page_text(page.extract_text() or "")
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text:
            text_parts.append(page_text)

    text = "\n\n".join(text_parts)
    if not text:
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(text=text, pages=pages, title=_read_title(reader))
