"""
Fingerprint derivation for duplicate-candidate lookups.

A fingerprint is ``key:value`` pairs joined by ``|`` in the fixed order
email, phone, name. A component is present only when its field survives
normalisation.
"""
import re
from typing import Optional

PHONE_DIGITS = 10

_NON_DIGIT = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s+")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Last 10 digits of ``phone``, or None when fewer than 10 digits exist."""
    digits = _NON_DIGIT.sub("", phone or "")
    if len(digits) < PHONE_DIGITS:
        return None
    return digits[-PHONE_DIGITS:]


def normalize_name(name: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", (name or "").strip().lower())


def generate_fingerprint(
    email: Optional[str] = None,
    phone: Optional[str] = None,
    name: Optional[str] = None,
) -> str:
    parts = []

    email_key = normalize_email(email)
    if email_key:
        parts.append(f"email:{email_key}")

    phone_key = normalize_phone(phone)
    if phone_key:
        parts.append(f"phone:{phone_key}")

    name_key = normalize_name(name)
    if name_key:
        parts.append(f"name:{name_key}")

    return "|".join(parts)
