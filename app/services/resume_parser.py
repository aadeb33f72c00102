"""
Heuristic field extraction from resume text.

Every extractor is a pure function of the text and returns None (or an
empty list for skills) when it finds nothing. Nothing in this module
raises on odd input; a garbage document yields an empty CandidateFields.
"""
import re
from typing import List, Optional, Sequence

from app.models.models import CandidateFields
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(?:\+?(\d{1,3}))?[-.\s]?\(?\d{2,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{3,4}")
HEADER_PATTERN = re.compile(r"\b(?:resume|curriculum vitae|cv|profile)\b", re.IGNORECASE)
NAME_TOKEN_PATTERN = re.compile(r"^[A-Za-z.-]+$")

EXPERIENCE_PATTERNS = (
    re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of)?\s*(?:experience|exp)", re.IGNORECASE),
    re.compile(r"experience[:\s]*(\d+)\s*(?:years?|yrs?)", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:years?|yrs?)\s*(?:in\s+)?(?:software|development|engineering)", re.IGNORECASE),
)

NAME_SCAN_LINES = 5
NAME_MAX_LENGTH = 50
MIN_PHONE_DIGITS = 10

SKILL_VOCABULARY = (
    'JavaScript', 'TypeScript', 'Python', 'Java', 'C++', 'C#', 'Ruby', 'Go', 'Rust', 'PHP',
    'React', 'Angular', 'Vue', 'Node.js', 'Express', 'Django', 'Flask', 'Spring', 'Laravel',
    'SQL', 'MongoDB', 'PostgreSQL', 'MySQL', 'Redis', 'GraphQL',
    'AWS', 'Azure', 'GCP', 'Docker', 'Kubernetes', 'Jenkins', 'Git',
    'HTML', 'CSS', 'Sass', 'Tailwind', 'Bootstrap',
    'Machine Learning', 'Deep Learning', 'TensorFlow', 'PyTorch',
    'Agile', 'Scrum', 'Jira', 'Confluence',
    'REST API', 'Microservices', 'CI/CD', 'DevOps',
    'Linux', 'Unix', 'Windows', 'macOS',
    'Figma', 'Sketch', 'Adobe XD', 'Photoshop', 'Illustrator',
    'Communication', 'Leadership', 'Problem Solving', 'Team Management',
)


def extract_email(text: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(text or "")
    return match.group(0).lower() if match else None


def extract_phone(text: str) -> Optional[str]:
    """First phone-like sequence, reduced to digits with an optional leading '+'."""
    match = PHONE_PATTERN.search(text or "")
    if not match:
        return None
    raw = match.group(0).strip()
    digits = re.sub(r"\D", "", raw)
    if len(digits) < MIN_PHONE_DIGITS:
        return None
    return f"+{digits}" if raw.startswith("+") else digits


def extract_name(text: str) -> Optional[str]:
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]

    for line in lines[:NAME_SCAN_LINES]:
        if len(line) > NAME_MAX_LENGTH:
            continue
        if EMAIL_PATTERN.search(line) or PHONE_PATTERN.search(line):
            continue
        if HEADER_PATTERN.search(line):
            continue

        words = line.split()
        if 2 <= len(words) <= 4 and all(NAME_TOKEN_PATTERN.match(word) for word in words):
            return line

    return None


def extract_skills(text: str, vocabulary: Sequence[str] = SKILL_VOCABULARY) -> List[str]:
    """Vocabulary terms found in ``text`` (case-insensitive), in vocabulary order."""
    lower_text = (text or "").lower()
    found = []
    for skill in vocabulary:
        if skill.lower() in lower_text and skill not in found:
            found.append(skill)
    return found


def extract_experience(text: str) -> Optional[int]:
    for pattern in EXPERIENCE_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return int(match.group(1))
    return None


def parse_resume_text(text: str, vocabulary: Sequence[str] = SKILL_VOCABULARY) -> CandidateFields:
    fields = CandidateFields(
        name=extract_name(text),
        email=extract_email(text),
        phone=extract_phone(text),
        skills=extract_skills(text, vocabulary),
        experience=extract_experience(text),
    )
    logger.debug(
        "Parsed resume text",
        extra={
            "found_fields": [k for k, v in (
                ("name", fields.name),
                ("email", fields.email),
                ("phone", fields.phone),
                ("skills", fields.skills),
                ("experience", fields.experience),
            ) if v not in (None, [])],
            "text_length": len(text or ""),
        }
    )
    return fields
