"""
Duplicate candidate detection.

Incoming identifying fields become a list of lookup clauses, the clauses
become one Mongo aggregation against the candidate store, and every
returned candidate is scored by how many fields actually agree. The result
is advisory: nothing here writes, and storage failures propagate unchanged.
"""
import re
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel

from app.models.models import CandidateFields, CandidateRecord, DuplicateMatch
from app.services.db import candidates_coll, USERS_COLLECTION
from app.services.fingerprint import normalize_email, normalize_phone
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

EMAIL_SCORE = 50
PHONE_SCORE = 30
NAME_SCORE = 20
PARTIAL_NAME_SCORE = 10

EMAIL_LABEL = "email"
PHONE_LABEL = "phone"
NAME_LABEL = "name"
PARTIAL_NAME_LABEL = "name (partial)"


class EmailClause(BaseModel):
    kind: Literal["email"] = "email"
    email: str


class PhoneClause(BaseModel):
    kind: Literal["phone"] = "phone"
    digits: str


class FingerprintClause(BaseModel):
    kind: Literal["fingerprint"] = "fingerprint"
    fingerprint: str


LookupClause = Union[EmailClause, PhoneClause, FingerprintClause]


def build_clauses(fields: CandidateFields, fingerprint: Optional[str] = None) -> List[LookupClause]:
    clauses: List[LookupClause] = []

    email = normalize_email(fields.email)
    if email:
        clauses.append(EmailClause(email=email))

    digits = normalize_phone(fields.phone)
    if digits:
        clauses.append(PhoneClause(digits=digits))

    if fingerprint:
        clauses.append(FingerprintClause(fingerprint=fingerprint))

    return clauses


def clause_to_condition(clause: LookupClause) -> Dict[str, Any]:
    if isinstance(clause, EmailClause):
        return {"email": {"$regex": f"^{re.escape(clause.email)}$", "$options": "i"}}
    if isinstance(clause, PhoneClause):
        return {"phone": {"$regex": re.escape(clause.digits)}}
    if isinstance(clause, FingerprintClause):
        return {"fingerprint": clause.fingerprint}
    raise TypeError(f"Unknown lookup clause: {clause!r}")


def clauses_to_query(clauses: List[LookupClause], exclude_candidate_id: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"$or": [clause_to_condition(c) for c in clauses]}
    if exclude_candidate_id:
        query["candidate_id"] = {"$ne": exclude_candidate_id}
    return query


def build_pipeline(query: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Match candidates and attach the owning recruiter in the same round trip."""
    return [
        {"$match": query},
        {"$lookup": {
            "from": USERS_COLLECTION,
            "localField": "recruiter_id",
            "foreignField": "user_id",
            "as": "recruiter",
        }},
        {"$unwind": {"path": "$recruiter", "preserveNullAndEmptyArrays": True}},
        {"$project": {"_id": 0, "recruiter._id": 0, "recruiter.password": 0}},
    ]


def score_candidate(fields: CandidateFields, candidate: CandidateRecord) -> Tuple[int, List[str]]:
    """Return (score, matched_fields) for one stored candidate."""
    score = 0
    matched: List[str] = []

    email = normalize_email(fields.email)
    if email and normalize_email(candidate.email) == email:
        score += EMAIL_SCORE
        matched.append(EMAIL_LABEL)

    phone = normalize_phone(fields.phone)
    if phone and normalize_phone(candidate.phone) == phone:
        score += PHONE_SCORE
        matched.append(PHONE_LABEL)

    # Trimmed and lowercased only; inner whitespace must agree.
    # Two empty names would otherwise be substrings of each other.
    name = (fields.name or "").strip().lower()
    stored_name = (candidate.name or "").strip().lower()
    if name and stored_name:
        if name == stored_name:
            score += NAME_SCORE
            matched.append(NAME_LABEL)
        elif name in stored_name or stored_name in name:
            score += PARTIAL_NAME_SCORE
            matched.append(PARTIAL_NAME_LABEL)

    return score, matched


async def check_for_duplicates(
    fields: CandidateFields,
    fingerprint: Optional[str] = None,
    exclude_candidate_id: Optional[str] = None,
    collection=None,
) -> List[DuplicateMatch]:
    """Rank stored candidates that plausibly are the same person as ``fields``.

    Returns an empty list without touching storage when neither email,
    a usable phone, nor a fingerprint is given.
    """
    clauses = build_clauses(fields, fingerprint)
    if not clauses:
        logger.debug("No identifying fields supplied, skipping duplicate lookup")
        return []

    coll = collection if collection is not None else candidates_coll
    query = clauses_to_query(clauses, exclude_candidate_id)
    logger.debug(
        "Looking up duplicate candidates",
        extra={"clauses": [c.kind for c in clauses], "excluding": exclude_candidate_id}
    )

    cursor = coll.aggregate(build_pipeline(query))
    docs = await cursor.to_list(length=None)

    matches = []
    for doc in docs:
        candidate = CandidateRecord(**doc)
        score, matched = score_candidate(fields, candidate)
        if matched:
            matches.append(DuplicateMatch(candidate=candidate, score=score, matched_fields=matched))

    matches.sort(key=lambda m: m.score, reverse=True)
    logger.info(f"Duplicate check retrieved {len(docs)} candidates, {len(matches)} matched")
    return matches


def format_duplicate_alert(matches: List[DuplicateMatch]) -> str:
    if not matches:
        return ""

    top = matches[0]
    recruiter = top.candidate.recruiter
    recruiter_name = (recruiter.name if recruiter else None) or "Unknown"
    return (
        f'Potential duplicate found! This candidate matches "{top.candidate.name}" '
        f'({", ".join(top.matched_fields)}) currently being handled by {recruiter_name}.'
    )
