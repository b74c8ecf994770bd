"""
Section segmenter for normalized CV text.

The segmenter is a small finite-state machine. Every line is fed to
:func:`transition`:

* a line that is a known section heading (``EXPERIENCE``, ``Work history:``,
  ``Education & Training`` ...) moves the machine to that section's state and
  is consumed;
* any other line leaves the state unchanged and is appended to the buffer of
  the current state.

Lines seen in ``NONE`` (before the first heading) are the identity block: the
first name-like line becomes ``full_name``, the first contact-like line within
the first few rows becomes ``contact_line`` and the remainder is kept as
``preamble_text``. Nothing here raises; unknown input ends up in the preamble or
is ignored.
"""
from __future__ import annotations

import re
from enum import Enum

from app.schemas.resume import ParsedCv

from .patterns import SECTION_HEADINGS, HeuristicConfig, default_heuristics
from .utils import EMAIL_RE, contains_any, contains_token, has_long_digit_run, word_tokens

DEFAULT_NAME = "Candidate"
_HEADING_DECORATION = " \t:-–—=*#|_"
_IDENTITY_SPLIT_RE = re.compile(r"\s*[,|•·]\s*")


class SegmentState(Enum):
    NONE = "NONE"
    IN_SUMMARY = "IN_SUMMARY"
    IN_EXPERIENCE = "IN_EXPERIENCE"
    IN_EDUCATION = "IN_EDUCATION"
    IN_SKILLS = "IN_SKILLS"
    IN_PROJECTS = "IN_PROJECTS"
    IN_CERTIFICATIONS = "IN_CERTIFICATIONS"


_SECTION_STATES = {
    "summary": SegmentState.IN_SUMMARY,
    "experience": SegmentState.IN_EXPERIENCE,
    "education": SegmentState.IN_EDUCATION,
    "skills": SegmentState.IN_SKILLS,
    "projects": SegmentState.IN_PROJECTS,
    "certifications": SegmentState.IN_CERTIFICATIONS,
}

def _heading_key(text: str) -> str:
    return " ".join(text.lower().replace("&", " and ").split())


_HEADING_LOOKUP: dict[str, SegmentState] = {
    _heading_key(phrase): _SECTION_STATES[section]
    for section, phrases in SECTION_HEADINGS.items()
    for phrase in phrases
}


def heading_state(line: str) -> SegmentState | None:
    key = _heading_key(line.strip(_HEADING_DECORATION))
    if not key or len(key) > 40:
        return None
    return _HEADING_LOOKUP.get(key)


def transition(state: SegmentState, line: str) -> tuple[SegmentState, bool]:
    """Return ``(next_state, consumed)`` for one line."""
    target = heading_state(line)
    if target is None:
        return state, False
    return target, True


def is_name_line(line: str, heuristics: HeuristicConfig) -> bool:
    if not line or not line[0].isalpha():
        return False
    if len(line) > heuristics.max_name_chars:
        return False
    if "@" in line or any(ch.isdigit() for ch in line):
        return False
    return not contains_any(line, ("linkedin", "http", "www."))


def is_contact_line(line: str, heuristics: HeuristicConfig) -> bool:
    if "@" in line and EMAIL_RE.search(line):
        return True
    if has_long_digit_run(line):
        return True
    return contains_any(line, ("linkedin",)) or contains_token(line, heuristics.locality_keywords)


def _is_locality_only(line: str, heuristics: HeuristicConfig) -> bool:
    """True when every comma/pipe separated part is made of locality words."""
    single_words = {token for token in heuristics.locality_keywords if " " not in token}
    for part in _IDENTITY_SPLIT_RE.split(line):
        lowered = part.strip().lower()
        if not lowered:
            continue
        if lowered in heuristics.locality_keywords:
            continue
        words = word_tokens(lowered)
        if not words or any(word not in single_words for word in words):
            return False
    return True


def split_identity(line: str, heuristics: HeuristicConfig) -> tuple[str, str]:
    """Split ``"Jane Doe, London"`` into the name and its locality remainder."""
    parts = _IDENTITY_SPLIT_RE.split(line, maxsplit=1)
    if len(parts) == 2:
        name, remainder = parts[0].strip(), parts[1].strip()
        if name and remainder and contains_token(remainder, heuristics.locality_keywords):
            return name, remainder
    return line, ""


def segment(normalized: str, heuristics: HeuristicConfig | None = None) -> ParsedCv:
    heuristics = heuristics or default_heuristics()
    buffers: dict[SegmentState, list[str]] = {state: [] for state in SegmentState}
    state = SegmentState.NONE
    full_name: str | None = None
    contact_line: str | None = None
    name_locality = ""

    for index, line in enumerate((normalized or "").split("\n")):
        line = line.strip()
        if not line:
            continue
        state, consumed = transition(state, line)
        if consumed:
            continue

        if state is SegmentState.NONE:
            # Name-shaped lines never carry an email or a phone number, so the
            # name is claimed before any locality-based contact match.
            if full_name is None and is_name_line(line, heuristics) and not _is_locality_only(line, heuristics):
                full_name, name_locality = split_identity(line, heuristics)
                continue
            if contact_line is None and index < heuristics.contact_scan_lines and is_contact_line(line, heuristics):
                contact_line = line
                continue

        buffers[state].append(line)

    if name_locality:
        contact_line = f"{contact_line} | {name_locality}" if contact_line else name_locality

    return ParsedCv(
        full_name=full_name or DEFAULT_NAME,
        contact_line=contact_line or "",
        summary_text="\n".join(buffers[SegmentState.IN_SUMMARY]),
        experience_text="\n".join(buffers[SegmentState.IN_EXPERIENCE]),
        education_text="\n".join(buffers[SegmentState.IN_EDUCATION]),
        preamble_text="\n".join(buffers[SegmentState.NONE]),
        skills_text="\n".join(buffers[SegmentState.IN_SKILLS]),
        projects_text="\n".join(buffers[SegmentState.IN_PROJECTS]),
        certifications_text="\n".join(buffers[SegmentState.IN_CERTIFICATIONS]),
    )
