"""
Resume text extraction.

Dispatches uploaded resume bytes to pdfplumber or python-docx by MIME type.
Unrecognised types yield an empty string rather than an error.
"""

import io

import docx
import pdfplumber

from resumevault.core.errors import ExtractionError

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MSWORD_MIME = "application/msword"

WORD_MIME_TYPES = (DOCX_MIME, MSWORD_MIME)


def _extract_text_from_pdf(data: bytes) -> str:
    """
    Extract all text from a PDF document.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts joined by newlines
    """
    text_parts = []

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

    return "\n".join(text_parts)


def _extract_text_from_docx(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    parts: list[str] = []
    for paragraph in document.paragraphs:
        text = paragraph.text.strip()
        if text:
            parts.append(text)
    return "\n".join(parts)


def extract_resume_text(content_type: str, data: bytes) -> str:
    """
    Extract plain text from a resume upload.

    Args:
        content_type: Declared MIME type of the upload
        data: Raw file bytes

    Returns:
        The extracted text, or "" for unsupported types

    Raises:
        ExtractionError: the extractor could not read the document
    """
    mime = (content_type or "").split(";")[0].strip().lower()

    try:
        if mime == PDF_MIME:
            return _extract_text_from_pdf(data)
        if mime in WORD_MIME_TYPES:
            return _extract_text_from_docx(data)
    except Exception as e:
        raise ExtractionError(f"Error parsing {mime}: {str(e)}") from e

    return ""
