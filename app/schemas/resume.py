from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

GenerationMode = Literal["llm", "fallback", "mixed"]
BlockKind = Literal["heading", "centered_line", "label", "paragraph", "bullet"]


class ParsedCv(BaseModel):
    full_name: str = "Candidate"
    contact_line: str = ""
    summary_text: str = ""
    experience_text: str = ""
    education_text: str = ""
    preamble_text: str = ""
    skills_text: str = ""
    projects_text: str = ""
    certifications_text: str = ""


class ExperienceEntry(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    start: str = ""
    end: str = ""
    bullets: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.title.strip() or self.company.strip() or any(b.strip() for b in self.bullets))


class EducationEntry(BaseModel):
    degree: str = ""
    institution: str = ""
    year: str = ""

    def is_empty(self) -> bool:
        return not (self.degree.strip() or self.institution.strip() or self.year.strip())


class AlignedContent(BaseModel):
    summary: str = ""
    skills_line: str = ""
    experience_text: str = ""
    experience_entries: list[ExperienceEntry] = Field(default_factory=list)
    education_entries: list[EducationEntry] = Field(default_factory=list)
    generation_mode: GenerationMode = "fallback"


class ContactInfo(BaseModel):
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    location: str = ""

    def as_line(self, separator: str = " • ") -> str:
        parts = [self.email, self.phone, self.linkedin, self.location]
        return separator.join(part for part in parts if part)


class CanonicalResume(BaseModel):
    full_name: str = "Candidate"
    target_title: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)
    contact_line: str = ""
    summary: str = ""
    skills_line: str = ""
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)


class DocumentBlock(BaseModel):
    kind: BlockKind
    text: str
    level: int = Field(default=0, ge=0, le=3)
