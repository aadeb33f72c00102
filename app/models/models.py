from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Roles issued by the identity provider"""
    SUPER_USER = "SUPER_USER"
    RECRUITER = "RECRUITER"


class Identity(BaseModel):
    user_id: str
    role: Role


class CandidateFields(BaseModel):
    """Best-effort fields pulled out of resume text. Every field may be absent."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[int] = Field(default=None, ge=0)


class RecruiterRef(BaseModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None


class CandidateRecord(BaseModel):
    """A persisted candidate as read from the candidate store"""
    candidate_id: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    position: Optional[str] = None
    experience: Optional[int] = None
    skills: Optional[str] = None
    status: str = "APPLIED"
    fingerprint: Optional[str] = None
    recruiter_id: Optional[str] = None
    recruiter: Optional[RecruiterRef] = None
    created_at: Optional[datetime] = None


class DuplicateMatch(BaseModel):
    candidate: CandidateRecord
    score: int
    matched_fields: List[str] = Field(default_factory=list)
