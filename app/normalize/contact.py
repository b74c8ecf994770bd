from __future__ import annotations

import re

from app.schemas.resume import ContactInfo

from .patterns import HeuristicConfig, default_heuristics
from .utils import EMAIL_RE, LINKEDIN_RE, PHONE_RE, contains_any, contains_token

_YEAR_SPAN_RE = re.compile(r"^(?:19|20)\d{2}\s*[-–—]\s*(?:19|20)\d{2}$")
_PART_SPLIT_RE = re.compile(r"\s*[|•·;]\s*")
_MIN_PHONE_DIGITS = 9


def _find_phone(text: str) -> str:
    for match in PHONE_RE.finditer(text):
        candidate = match.group(0).strip()
        if _YEAR_SPAN_RE.match(candidate):
            continue
        if sum(ch.isdigit() for ch in candidate) >= _MIN_PHONE_DIGITS:
            return candidate
    return ""


def _find_location(line: str, heuristics: HeuristicConfig) -> str:
    for part in _PART_SPLIT_RE.split(line):
        part = part.strip()
        if not part or "@" in part or contains_any(part, ("linkedin", "http", "www.")):
            continue
        if any(ch.isdigit() for ch in part):
            continue
        if contains_token(part, heuristics.locality_keywords):
            return part
    return ""


def extract_contact(
    contact_line: str,
    text: str = "",
    *,
    scan_lines: int = 15,
    heuristics: HeuristicConfig | None = None,
) -> ContactInfo:
    heuristics = heuristics or default_heuristics()
    top = "\n".join((text or "").split("\n")[:scan_lines])
    sources = [contact_line or "", top]

    email = phone = linkedin = ""
    for source in sources:
        if not email:
            match = EMAIL_RE.search(source)
            email = match.group(0) if match else ""
        if not linkedin:
            match = LINKEDIN_RE.search(source)
            linkedin = match.group(0).rstrip(".") if match else ""
        if not phone:
            phone = _find_phone(source)

    return ContactInfo(
        email=email,
        phone=phone,
        linkedin=linkedin,
        location=_find_location(contact_line or "", heuristics),
    )
