from pydantic import BaseModel, Field
from typing import List, Optional

from app.models.models import CandidateFields, CandidateRecord, DuplicateMatch


# -------- Duplicate checks --------
class IdentifyingFields(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None


class DuplicateCheckRequest(IdentifyingFields):
    fingerprint: Optional[str] = None
    exclude_candidate_id: Optional[str] = None  # set when re-checking an edited candidate


class DuplicateCheckResponse(BaseModel):
    fingerprint: str
    duplicates: List[DuplicateMatch] = []
    alert: str = ""


class FingerprintResponse(BaseModel):
    fingerprint: str


# -------- Resume upload --------
class ResumeParseResponse(BaseModel):
    parsed: CandidateFields
    fingerprint: str
    duplicates: List[DuplicateMatch] = []
    alert: str = ""
    raw_text: str = Field(default="", description="Leading slice of the converted resume text")


# -------- Candidates --------
class CandidateListResponse(BaseModel):
    candidates: List[CandidateRecord] = []
    count: int = 0
