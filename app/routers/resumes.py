import asyncio

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.helpers.parsing import extract_text_from_upload
from app.services.db import CANDIDATES_COLLECTION
from app.services.duplicates import check_for_duplicates, format_duplicate_alert
from app.services.fingerprint import generate_fingerprint
from app.services.resume_parser import parse_resume_text
from app.models.models import Identity
from app.models.schemas import ResumeParseResponse
from app.utils import config
from app.utils.auth import get_current_identity
from app.utils.logging_config import get_logger, PerformanceMonitor
from app.utils.exceptions import ExceptionContext, ValidationError

router = APIRouter()
logger = get_logger(__name__)


def _convert_and_parse(filename, content_type, data):
    text = extract_text_from_upload(filename, content_type, data)
    return text, parse_resume_text(text)


@router.post("/resume", response_model=ResumeParseResponse)
async def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    identity: Identity = Depends(get_current_identity),
):
    """Parse an uploaded resume for auto-fill and flag likely duplicates"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    # One byte past the limit is enough to reject the upload
    data = await file.read(config.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise ValidationError("No file provided", field="file")
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File exceeds the {config.MAX_UPLOAD_BYTES} byte limit",
            field="file"
        )

    logger.info(
        f"Parsing resume {file.filename} for {identity.user_id}",
        extra={"request_id": request_id, "content_type": file.content_type, "size": len(data)}
    )

    with PerformanceMonitor("parse_resume", logger):
        # pdfminer and python-docx are blocking
        text, parsed = await asyncio.to_thread(
            _convert_and_parse, file.filename, file.content_type, data
        )

    fingerprint = generate_fingerprint(email=parsed.email, phone=parsed.phone, name=parsed.name)

    with ExceptionContext(
        "check for duplicates", logger, collection=CANDIDATES_COLLECTION, request_id=request_id
    ):
        duplicates = await check_for_duplicates(parsed, fingerprint=fingerprint)

    return ResumeParseResponse(
        parsed=parsed,
        fingerprint=fingerprint,
        duplicates=duplicates,
        alert=format_duplicate_alert(duplicates),
        raw_text=text[:config.RAW_TEXT_PREVIEW_CHARS],
    )
