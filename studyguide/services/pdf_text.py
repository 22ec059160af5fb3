from __future__ import annotations

import logging
import re
from io import BytesIO

import pdfplumber
from werkzeug.datastructures import FileStorage

logger = logging.getLogger(__name__)

PDF_MIMETYPE = "application/pdf"


class PdfUploadError(Exception):
    def __init__(self, message: str, *, code: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


class PdfExtractionError(Exception):
    code = "PDF_EXTRACTION_FAILED"
    status = 500

    def __init__(self, message: str = "Failed to process PDF"):
        super().__init__(message)
        self.message = message


def validate_pdf_upload(file_storage: FileStorage | None, max_bytes: int) -> bytes:
    """Check the uploaded ``pdf`` field and return its bytes."""
    if file_storage is None or not file_storage.filename:
        raise PdfUploadError("No PDF file uploaded", code="PDF_REQUIRED")

    if file_storage.mimetype != PDF_MIMETYPE:
        raise PdfUploadError("Only PDF files are allowed", code="PDF_INVALID_TYPE")

    data = file_storage.read(max_bytes + 1)
    if not data:
        raise PdfUploadError(
            "PDF appears to be empty or could not extract text", code="PDF_EMPTY"
        )
    if len(data) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise PdfUploadError(
            f"PDF exceeds the {limit_mb:g}MB upload limit",
            code="PDF_TOO_LARGE",
            status=413,
        )
    return data


def _clean_page_text(text: str) -> str:
    text = text.replace("\u00A0", " ")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_pdf_text(data: bytes) -> str:
    """Extract the text of every page, in page order."""
    pages = []
    try:
        with pdfplumber.open(BytesIO(data)) as pdf:
            for page in pdf.pages:
                text_content = _clean_page_text(page.extract_text() or "")
                if text_content:
                    pages.append(text_content)
    except Exception as exc:
        logger.warning("PDF text extraction failed: %s", exc)
        raise PdfExtractionError() from exc
    return "\n\n".join(pages)
