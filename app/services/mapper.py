from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from app.core.config import Settings
from app.normalize.contact import extract_contact
from app.normalize.education import parse_education
from app.normalize.experience import tokenize_experience
from app.normalize.patterns import HeuristicConfig
from app.normalize.segmenter import DEFAULT_NAME
from app.normalize.utils import is_bullet_like, strip_bullet_prefix
from app.schemas.requests import EducationOverride, ExperienceOverride, ProfileOverride, ResumeRequest
from app.schemas.resume import (
    AlignedContent,
    CanonicalResume,
    ContactInfo,
    EducationEntry,
    ExperienceEntry,
    ParsedCv,
)


@dataclass(frozen=True)
class MergePolicy:
    # False reproduces the "parsed first, caller fills gaps" behaviour.
    prefer_caller_fields: bool = True
    # False treats an explicit empty list from the caller as "not provided".
    explicit_empty_overrides: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "MergePolicy":
        return cls(
            prefer_caller_fields=settings.prefer_caller_fields,
            explicit_empty_overrides=settings.explicit_empty_overrides,
        )


def normalize_bullets(value: Sequence[str] | str | None) -> list[str]:
    """Accept a list or a newline-delimited string; strip bullet markers and blanks."""
    if value is None:
        return []
    items = value.split("\n") if isinstance(value, str) else list(value)
    bullets: list[str] = []
    for item in items:
        text = str(item or "").strip()
        if is_bullet_like(text):
            text = strip_bullet_prefix(text)
        if text:
            bullets.append(text)
    return bullets


def _pick(caller: str | None, heuristic: str, *, prefer_caller: bool) -> str:
    caller_value = (caller or "").strip()
    heuristic_value = (heuristic or "").strip()
    if prefer_caller:
        return caller_value or heuristic_value
    return heuristic_value or caller_value


def _caller_items(items: list | None, policy: MergePolicy) -> list | None:
    if items is None:
        return None
    if not items and not policy.explicit_empty_overrides:
        return None
    return items


def _experience_from_override(item: ExperienceOverride) -> ExperienceEntry:
    return ExperienceEntry(
        title=item.title.strip(),
        company=item.company.strip(),
        location=item.location.strip(),
        start=item.start.strip(),
        end=item.end.strip(),
        bullets=normalize_bullets(item.bullets),
    )


def _education_from_override(item: EducationOverride) -> EducationEntry:
    return EducationEntry(
        degree=item.degree.strip(),
        institution=item.institution.strip(),
        year=str(item.year).strip(),
    )


def _resolve_list(caller: list | None, heuristic: list, policy: MergePolicy) -> list:
    if caller is None:
        return heuristic
    if policy.prefer_caller_fields:
        return caller
    return heuristic or caller


def merge_into_canonical(
    parsed: ParsedCv,
    aligned: AlignedContent,
    overrides: ResumeRequest | None = None,
    policy: MergePolicy | None = None,
    *,
    source_text: str = "",
    heuristics: HeuristicConfig | None = None,
) -> CanonicalResume:
    policy = policy or MergePolicy()
    profile = (overrides.profile if overrides else None) or ProfileOverride()
    prefer_caller = policy.prefer_caller_fields

    parsed_contact = extract_contact(parsed.contact_line, source_text, heuristics=heuristics)
    contact = ContactInfo(
        email=_pick(profile.email, parsed_contact.email, prefer_caller=prefer_caller),
        phone=_pick(profile.phone, parsed_contact.phone, prefer_caller=prefer_caller),
        linkedin=_pick(profile.linkedin, parsed_contact.linkedin, prefer_caller=prefer_caller),
        location=_pick(profile.location, parsed_contact.location, prefer_caller=prefer_caller),
    )
    parsed_name = "" if parsed.full_name == DEFAULT_NAME else parsed.full_name
    full_name = _pick(profile.full_name, parsed_name, prefer_caller=prefer_caller) or DEFAULT_NAME

    caller_experience = _caller_items(overrides.experience if overrides else None, policy)
    if caller_experience is not None:
        caller_experience = [_experience_from_override(item) for item in caller_experience]
    heuristic_experience = (
        aligned.experience_entries
        or tokenize_experience(aligned.experience_text, heuristics)
        or tokenize_experience(parsed.experience_text, heuristics)
    )
    experience = _resolve_list(caller_experience, heuristic_experience, policy)

    caller_education = _caller_items(overrides.education if overrides else None, policy)
    if caller_education is not None:
        caller_education = [_education_from_override(item) for item in caller_education]
    heuristic_education = aligned.education_entries or parse_education(parsed.education_text)
    education = _resolve_list(caller_education, heuristic_education, policy)

    return CanonicalResume(
        full_name=full_name,
        target_title=(profile.target_title or "").strip(),
        contact=contact,
        contact_line=parsed.contact_line,
        summary=aligned.summary.strip(),
        skills_line=aligned.skills_line.strip(),
        experience=[entry for entry in experience if not entry.is_empty()],
        education=[entry for entry in education if not entry.is_empty()],
        projects=normalize_bullets(parsed.projects_text),
        certifications=normalize_bullets(parsed.certifications_text),
    )
