from fastapi import APIRouter, Depends, Query, Request
from pymongo import DESCENDING
from typing import Optional

from app.services.db import candidates_coll, CANDIDATES_COLLECTION
from app.services.access import candidate_list_query, is_admin
from app.services.duplicates import check_for_duplicates, format_duplicate_alert
from app.services.fingerprint import generate_fingerprint
from app.models.models import CandidateFields, CandidateRecord, Identity
from app.models.schemas import (
    CandidateListResponse,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    FingerprintResponse,
    IdentifyingFields,
)
from app.utils.auth import get_current_identity
from app.utils.logging_config import get_logger, PerformanceMonitor
from app.utils.exceptions import ExceptionContext

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=CandidateListResponse)
async def list_candidates(
    request: Request,
    status: Optional[str] = Query(None, description="Pipeline status, or 'all'"),
    search: Optional[str] = Query(None, description="Matches name, email or position"),
    identity: Identity = Depends(get_current_identity),
):
    """List the candidates visible to the caller, newest first"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    query = candidate_list_query(identity, status=status, search=search)

    logger.info(
        f"Listing candidates for {identity.role.value} {identity.user_id}",
        extra={"request_id": request_id, "scoped": not is_admin(identity)}
    )

    with ExceptionContext("list_candidates", logger, collection=CANDIDATES_COLLECTION, request_id=request_id):
        cursor = candidates_coll.find(query, {"_id": 0}).sort("created_at", DESCENDING)
        docs = await cursor.to_list(length=None)

    candidates = [CandidateRecord(**doc) for doc in docs]
    return CandidateListResponse(candidates=candidates, count=len(candidates))


@router.post("/fingerprint", response_model=FingerprintResponse)
async def fingerprint_candidate(
    payload: IdentifyingFields,
    identity: Identity = Depends(get_current_identity),
):
    """Compute the fingerprint stored alongside a new candidate"""
    return FingerprintResponse(
        fingerprint=generate_fingerprint(email=payload.email, phone=payload.phone, name=payload.name)
    )


@router.post("/duplicates", response_model=DuplicateCheckResponse)
async def check_duplicates(
    payload: DuplicateCheckRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
):
    """Advisory duplicate check before creating or after editing a candidate"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    fields = CandidateFields(email=payload.email, phone=payload.phone, name=payload.name)
    fingerprint = payload.fingerprint or generate_fingerprint(
        email=payload.email, phone=payload.phone, name=payload.name
    )

    with PerformanceMonitor("check_duplicates", logger, threshold_ms=500):
        with ExceptionContext(
            "check for duplicates", logger, collection=CANDIDATES_COLLECTION, request_id=request_id
        ):
            duplicates = await check_for_duplicates(
                fields,
                fingerprint=fingerprint,
                exclude_candidate_id=payload.exclude_candidate_id,
            )

    if duplicates:
        logger.warning(
            f"Found {len(duplicates)} possible duplicates",
            extra={"request_id": request_id, "top_score": duplicates[0].score}
        )

    return DuplicateCheckResponse(
        fingerprint=fingerprint,
        duplicates=duplicates,
        alert=format_duplicate_alert(duplicates),
    )
