from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from studyguide.services.pdf_text import (
    PdfExtractionError,
    PdfUploadError,
    extract_pdf_text,
    validate_pdf_upload,
)


def _storage(data: bytes, filename="lecture.pdf", content_type="application/pdf"):
    return FileStorage(
        stream=io.BytesIO(data), filename=filename, content_type=content_type
    )


def test_validate_pdf_upload_returns_bytes():
    assert validate_pdf_upload(_storage(b"%PDF-1.4 data"), max_bytes=100) == b"%PDF-1.4 data"


def test_validate_pdf_upload_accepts_file_at_limit():
    assert len(validate_pdf_upload(_storage(b"x" * 10), max_bytes=10)) == 10


def test_validate_pdf_upload_requires_file():
    with pytest.raises(PdfUploadError) as exc_info:
        validate_pdf_upload(None, max_bytes=100)
    assert exc_info.value.code == "PDF_REQUIRED"
    assert exc_info.value.status == 400


def test_validate_pdf_upload_requires_filename():
    with pytest.raises(PdfUploadError) as exc_info:
        validate_pdf_upload(_storage(b"data", filename=""), max_bytes=100)
    assert exc_info.value.code == "PDF_REQUIRED"


def test_validate_pdf_upload_rejects_other_types():
    with pytest.raises(PdfUploadError) as exc_info:
        validate_pdf_upload(_storage(b"data", content_type="image/png"), max_bytes=100)
    assert exc_info.value.code == "PDF_INVALID_TYPE"


def test_validate_pdf_upload_rejects_oversized_file():
    with pytest.raises(PdfUploadError) as exc_info:
        validate_pdf_upload(_storage(b"x" * 11), max_bytes=10)
    assert exc_info.value.code == "PDF_TOO_LARGE"
    assert exc_info.value.status == 413


def test_extract_pdf_text_reads_pages_in_order():
    fitz = pytest.importorskip("fitz")
    doc = fitz.open()
    for text in ("First page about atoms", "Second page about molecules"):
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=12)
    data = doc.tobytes()
    doc.close()

    text = extract_pdf_text(data)

    assert text.index("First page about atoms") < text.index("Second page about molecules")


def test_extract_pdf_text_wraps_parser_errors():
    with pytest.raises(PdfExtractionError) as exc_info:
        extract_pdf_text(b"garbage bytes")
    assert exc_info.value.code == "PDF_EXTRACTION_FAILED"
    assert exc_info.value.__cause__ is not None


def test_validate_pdf_upload_rejects_empty_file():
    with pytest.raises(PdfUploadError) as exc_info:
        validate_pdf_upload(_storage(b""), max_bytes=100)
    assert exc_info.value.code == "PDF_EMPTY"
    assert exc_info.value.status == 400
