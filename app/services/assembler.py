from __future__ import annotations

from app.schemas.resume import CanonicalResume, DocumentBlock, EducationEntry, ExperienceEntry

EXPERIENCE_PLACEHOLDER = "Experience details as provided by the candidate."
EDUCATION_PLACEHOLDER = "Education details as provided by the candidate."
SKILLS_PLACEHOLDER = "Skills as listed in the candidate's CV."


def _heading(text: str, level: int = 1) -> DocumentBlock:
    return DocumentBlock(kind="heading", text=text, level=level)


def _centered(text: str) -> DocumentBlock:
    return DocumentBlock(kind="centered_line", text=text)


def _label(text: str) -> DocumentBlock:
    return DocumentBlock(kind="label", text=text)


def _para(text: str) -> DocumentBlock:
    return DocumentBlock(kind="paragraph", text=text)


def _bullet(text: str) -> DocumentBlock:
    return DocumentBlock(kind="bullet", text=text)


def experience_heading(entry: ExperienceEntry) -> str:
    return " — ".join(part for part in (entry.title, entry.company) if part)


def experience_subline(entry: ExperienceEntry) -> str:
    dates = ""
    if entry.start or entry.end:
        dates = f"{entry.start or 'Start'} – {entry.end or 'Present'}"
    return " | ".join(part for part in (entry.location, dates) if part)


def education_line(entry: EducationEntry) -> str:
    line = ", ".join(part for part in (entry.degree, entry.institution) if part)
    if entry.year:
        line = f"{line} ({entry.year})" if line else entry.year
    return line


def assemble(resume: CanonicalResume) -> list[DocumentBlock]:
    """Lay the canonical résumé out as an ordered list of typed blocks."""
    blocks: list[DocumentBlock] = [_heading(resume.full_name or "Candidate", level=1)]

    if resume.target_title:
        blocks.append(_centered(resume.target_title))
    contact_line = resume.contact.as_line() or resume.contact_line
    if contact_line:
        blocks.append(_centered(contact_line))

    blocks.append(_label("PROFILE SUMMARY"))
    blocks.append(_para(resume.summary or f"Motivated professional targeting {resume.target_title or 'the role'}."))

    blocks.append(_label("KEY SKILLS"))
    blocks.append(_para(resume.skills_line or SKILLS_PLACEHOLDER))

    blocks.append(_label("PROFESSIONAL EXPERIENCE"))
    if not resume.experience:
        blocks.append(_para(EXPERIENCE_PLACEHOLDER))
    for entry in resume.experience:
        heading = experience_heading(entry)
        if heading:
            blocks.append(_heading(heading, level=2))
        subline = experience_subline(entry)
        if subline:
            blocks.append(_para(subline))
        blocks.extend(_bullet(bullet) for bullet in entry.bullets)

    blocks.append(_label("EDUCATION"))
    education_lines = [line for line in (education_line(entry) for entry in resume.education) if line]
    if not education_lines:
        education_lines = [EDUCATION_PLACEHOLDER]
    blocks.extend(_para(line) for line in education_lines)

    if resume.projects:
        blocks.append(_label("PROJECTS"))
        blocks.extend(_bullet(line) for line in resume.projects)

    if resume.certifications:
        blocks.append(_label("CERTIFICATIONS"))
        blocks.extend(_para(line) for line in resume.certifications)

    return blocks
