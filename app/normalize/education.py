from __future__ import annotations

import re

from app.schemas.resume import EducationEntry

from .experience import DATE_RANGE_RE
from .patterns import DEGREE_KEYWORDS
from .utils import YEAR_RE, contains_token, is_bullet_like, strip_bullet_prefix

_INSTITUTION_MARKERS = ("university", "college", "school", "institute", "academy", "polytechnic")
_SPLIT_RE = re.compile(r"\s*,\s*|\s+(?:—|–|-|\||at)\s+|\s*[—|]\s*", re.IGNORECASE)
_EDGE_PUNCT = " ,;:|()[]-–—"


def _pull_year(line: str) -> tuple[str, str]:
    match = DATE_RANGE_RE.search(line)
    if match:
        year = match.group("end") if YEAR_RE.search(match.group("end")) else match.group(0)
    else:
        years = list(YEAR_RE.finditer(line))
        if not years:
            return "", line.strip(_EDGE_PUNCT)
        match = years[-1]
        year = match.group(0)
    remainder = (line[: match.start()] + " " + line[match.end() :]).strip()
    remainder = re.sub(r"\(\s*\)", "", remainder)
    return year.strip(), re.sub(r"\s+", " ", remainder).strip(_EDGE_PUNCT)


def _split_fields(text: str) -> tuple[str, str]:
    parts = [part.strip(_EDGE_PUNCT) for part in _SPLIT_RE.split(text, maxsplit=1)]
    parts = [part for part in parts if part]
    if not parts:
        return "", ""
    if len(parts) == 1:
        if contains_token(parts[0], _INSTITUTION_MARKERS) and not contains_token(parts[0], DEGREE_KEYWORDS):
            return "", parts[0]
        return parts[0], ""
    first, second = parts[0], parts[1]
    if contains_token(first, _INSTITUTION_MARKERS) and contains_token(second, DEGREE_KEYWORDS):
        return second, first
    return first, second


def parse_education(segment_text: str) -> list[EducationEntry]:
    entries: list[EducationEntry] = []
    current: EducationEntry | None = None

    for raw_line in (segment_text or "").split("\n"):
        line = raw_line.strip()
        if is_bullet_like(line):
            line = strip_bullet_prefix(line)
        if not line:
            continue
        year, remainder = _pull_year(line)

        if not remainder:
            if not year:
                continue
            if current is not None and not current.year:
                current.year = year
            else:
                current = EducationEntry(year=year)
                entries.append(current)
            continue

        has_degree = contains_token(remainder, DEGREE_KEYWORDS)
        complete = current is not None and bool(current.degree) and bool(current.institution)
        if current is None or (has_degree and current.degree) or (complete and year):
            degree, institution = _split_fields(remainder)
            current = EducationEntry(degree=degree, institution=institution, year=year)
            entries.append(current)
            continue
        if complete:
            continue

        if has_degree and not current.degree:
            current.degree = remainder
        elif not current.institution:
            current.institution = remainder
        else:
            current.degree = remainder
        if year and not current.year:
            current.year = year

    return [entry for entry in entries if not entry.is_empty()]
