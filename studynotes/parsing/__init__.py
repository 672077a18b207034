"""PDF parsing utilities for note generation.

Responsibilities:
    - PDF validation (header, size, emptiness)
    - Text extraction with pypdf
    - Whitespace normalization so pages split cleanly into paragraphs
"""

from studynotes.parsing.pdf_parser import PDFContent, PDFParseError, parse_pdf

__all__ = ["PDFContent", "PDFParseError", "parse_pdf"]
