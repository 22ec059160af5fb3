"""Study guide generation API Blueprint"""
import logging
from typing import Optional

from flask import Blueprint, request

from config import get_config
from studyguide.services.api_response import (
    success_response as _success_response,
    error_response as _error_response,
)
from studyguide.services.pdf_text import (
    PdfExtractionError,
    PdfUploadError,
    extract_pdf_text,
    validate_pdf_upload,
)
from studyguide.services.study_guide import (
    StudyGuideError,
    StudyGuideGenerator,
)

logger = logging.getLogger(__name__)

api_study_guide_bp = Blueprint('api_study_guide', __name__)


def _json_success(data: dict, status: int = 200):
    # Study guide fields stay at the top level for flat-contract clients.
    return _success_response(
        data=data,
        status=status,
        code="STUDY_GUIDE_GENERATED",
        legacy=data,
    )


def _json_error(
    message: str,
    code: str = "BAD_REQUEST",
    status: int = 400,
    payload: Optional[dict] = None,
):
    return _error_response(
        message=message,
        code=code,
        status=status,
        data=payload or None,
        legacy={"error": message},
    )


def _respond_with_study_guide(lecture_text: str):
    try:
        study_guide = StudyGuideGenerator().generate(lecture_text)
    except StudyGuideError as e:
        return _json_error(e.message, code=e.code, status=e.status)
    return _json_success(study_guide.to_dict())


@api_study_guide_bp.route('/generate', methods=['POST'])
def generate():
    """Generate a study guide from pasted lecture notes."""
    data = request.get_json(silent=True) or {}
    lecture_text = data.get('text') if isinstance(data, dict) else None

    if not lecture_text:
        return _json_error(
            "No text provided. Please paste text or upload a PDF.",
            code="TEXT_REQUIRED",
        )
    if not isinstance(lecture_text, str):
        return _json_error("Text must be a string.", code="TEXT_INVALID")
    if not lecture_text.strip():
        return _json_error("Text cannot be empty.", code="TEXT_EMPTY")

    return _respond_with_study_guide(lecture_text)


@api_study_guide_bp.route('/upload', methods=['POST'])
def upload():
    """Generate a study guide from an uploaded PDF."""
    cfg = get_config()
    try:
        pdf_bytes = validate_pdf_upload(
            request.files.get('pdf'), cfg.runtime.max_pdf_bytes
        )
        lecture_text = extract_pdf_text(pdf_bytes)
    except (PdfUploadError, PdfExtractionError) as e:
        return _json_error(e.message, code=e.code, status=e.status)

    if not lecture_text.strip():
        return _json_error(
            "PDF appears to be empty or could not extract text",
            code="PDF_EMPTY",
        )

    logger.info("Extracted %d characters from uploaded PDF", len(lecture_text))
    return _respond_with_study_guide(lecture_text)
