"""
Line-shape tokenizer for the experience section.

Each line is classified once, in priority order:

1. ``DATE``   - a short non-bullet line holding a date range or a year beside
   header-shaped text (a bare year counts); or a bullet line holding a full date range.
   Role boundary. "Promoted in 2021" style narrative falls through.
2. ``BULLET`` - starts with a bullet marker.
3. ``ROLE``   - a short line containing a role-title keyword.
4. ``TEXT``   - anything else.

The tokenizer is deliberately lossy. It never invents an entry: entries are
only opened by ``DATE`` or ``ROLE`` lines, and empty entries are dropped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from app.schemas.resume import ExperienceEntry

from .patterns import HeuristicConfig, default_heuristics
from .utils import contains_token, has_year, is_bullet_like, strip_bullet_prefix

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
_POINT = rf"(?:(?:{_MONTH}\s+)?(?:\d{{1,2}}/)?(?:19|20)\d{{2}})"
_END = rf"(?:{_POINT}|present|current|now|date|ongoing)"
DATE_RANGE_RE = re.compile(
    rf"(?P<start>{_POINT})\s*(?:-|–|—|to|until)\s*(?P<end>{_END})",
    re.IGNORECASE,
)
DATE_POINT_RE = re.compile(_POINT, re.IGNORECASE)
_HEADER_SPLIT_RE = re.compile(r"\s+(?:—|–|-|\||@|at)\s+|\s*[—|]\s*", re.IGNORECASE)
_EDGE_PUNCT = " ,;:|()[]-–—"
_MAX_COMPANY_CHARS = 60


class LineKind(Enum):
    DATE = "DATE"
    BULLET = "BULLET"
    ROLE = "ROLE"
    TEXT = "TEXT"


@dataclass
class _Draft:
    title: str = ""
    company: str = ""
    location: str = ""
    start: str = ""
    end: str = ""
    bullets: list[str] = field(default_factory=list)

    @property
    def has_dates(self) -> bool:
        return bool(self.start or self.end)

    def to_entry(self) -> ExperienceEntry:
        return ExperienceEntry(
            title=self.title,
            company=self.company,
            location=self.location,
            start=self.start,
            end=self.end,
            bullets=list(self.bullets),
        )


def _is_header_like(text: str, heuristics: HeuristicConfig) -> bool:
    return bool(_HEADER_SPLIT_RE.search(text)) or contains_token(text, heuristics.role_keywords)


def classify_line(line: str, heuristics: HeuristicConfig) -> LineKind:
    bullet = is_bullet_like(line)
    if bullet:
        if len(line) < heuristics.max_date_line_chars and DATE_RANGE_RE.search(line):
            return LineKind.DATE
        return LineKind.BULLET
    if has_year(line) and len(line) < heuristics.max_date_line_chars:
        if DATE_RANGE_RE.search(line):
            return LineKind.DATE
        _, _, remainder = split_dates(line)
        # "Promoted in 2021" is narrative; a lone year or a dated header is not.
        if not remainder or _is_header_like(remainder, heuristics):
            return LineKind.DATE
    if (
        len(line) <= heuristics.max_header_chars
        and not line.endswith(".")
        and contains_token(line, heuristics.role_keywords)
    ):
        return LineKind.ROLE
    return LineKind.TEXT


def split_dates(line: str) -> tuple[str, str, str]:
    """Return ``(start, end, remainder)`` for a date-bearing line."""
    text = strip_bullet_prefix(line) if is_bullet_like(line) else line
    match = DATE_RANGE_RE.search(text)
    if match:
        start, end = match.group("start"), match.group("end")
    else:
        match = DATE_POINT_RE.search(text)
        if not match:
            return "", "", text.strip(_EDGE_PUNCT)
        start, end = match.group(0), ""
    remainder = (text[: match.start()] + " " + text[match.end() :]).strip()
    remainder = re.sub(r"\(\s*\)", "", remainder)
    return start.strip(), end.strip(), re.sub(r"\s+", " ", remainder).strip(_EDGE_PUNCT)


def split_header(text: str) -> tuple[str, str, str]:
    """Split ``Title — Company, Location`` style headers."""
    text = text.strip(_EDGE_PUNCT)
    if not text:
        return "", "", ""
    parts = _HEADER_SPLIT_RE.split(text, maxsplit=1)
    if len(parts) == 2:
        title, rest = parts[0], parts[1]
    elif "," in text:
        title, rest = text.split(",", 1)
    else:
        return text, "", ""
    company, _, location = rest.partition(",")
    return title.strip(_EDGE_PUNCT), company.strip(_EDGE_PUNCT), location.strip(_EDGE_PUNCT)


def _apply_header(draft: _Draft, text: str) -> None:
    if not text:
        return
    if draft.title:
        if not draft.company:
            company, _, location = text.partition(",")
            draft.company = company.strip(_EDGE_PUNCT)
            draft.location = draft.location or location.strip(_EDGE_PUNCT)
        return
    title, company, location = split_header(text)
    draft.title = title
    draft.company = draft.company or company
    draft.location = draft.location or location


def _apply_role_line(draft: _Draft, line: str) -> None:
    """Apply a role header, lifting an inline date range into the draft."""
    if DATE_RANGE_RE.search(line):
        start, end, line = split_dates(line)
        if not draft.has_dates:
            draft.start, draft.end = start, end
    _apply_header(draft, line)


def _looks_like_company(line: str) -> bool:
    if len(line) > _MAX_COMPANY_CHARS or line.endswith("."):
        return False
    words = [word for word in re.split(r"[\s,]+", line) if word]
    capitalised = sum(1 for word in words if word[0].isupper() or word[0].isdigit() or word == "&")
    return capitalised * 2 >= len(words)


def tokenize_experience(segment_text: str, heuristics: HeuristicConfig | None = None) -> list[ExperienceEntry]:
    heuristics = heuristics or default_heuristics()
    drafts: list[_Draft] = []
    current: _Draft | None = None

    def close() -> None:
        nonlocal current
        if current is not None:
            drafts.append(current)
        current = None

    for raw_line in (segment_text or "").split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        kind = classify_line(line, heuristics)

        if kind is LineKind.DATE:
            start, end, remainder = split_dates(line)
            if current is None or current.has_dates or current.bullets:
                close()
                current = _Draft()
            current.start, current.end = start, end
            _apply_header(current, remainder)
            continue

        if kind is LineKind.BULLET:
            bullet = strip_bullet_prefix(line)
            if current is not None and bullet:
                current.bullets.append(bullet)
            continue

        if kind is LineKind.ROLE:
            if current is None:
                current = _Draft()
                _apply_role_line(current, line)
                continue
            if not current.title:
                _apply_role_line(current, line)
                continue
            if current.bullets or current.has_dates or current.company:
                close()
                current = _Draft()
                _apply_role_line(current, line)
                continue
            current.bullets.append(line)
            continue

        if current is None:
            continue
        if current.title and not current.company and not current.bullets and _looks_like_company(line):
            _apply_header(current, line)
            continue
        current.bullets.append(line)

    close()
    entries = [draft.to_entry() for draft in drafts]
    return [entry for entry in entries if not entry.is_empty()]
