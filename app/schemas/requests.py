from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .resume import EducationEntry, ExperienceEntry, ParsedCv

OutputFormat = Literal["docx", "json"]


class ProfileOverride(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str | None = Field(
        default=None, max_length=200, validation_alias=AliasChoices("full_name", "fullName", "name")
    )
    target_title: str | None = Field(
        default=None, max_length=200, validation_alias=AliasChoices("target_title", "targetTitle", "jobTitle")
    )
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=60)
    linkedin: str | None = Field(default=None, max_length=300)
    location: str | None = Field(default=None, max_length=200)


class ExperienceOverride(BaseModel):
    title: str = Field(default="", max_length=200)
    company: str = Field(default="", max_length=200)
    location: str = Field(default="", max_length=200)
    start: str = Field(default="", max_length=60)
    end: str = Field(default="", max_length=60)
    bullets: list[str] | str = Field(default_factory=list)


class EducationOverride(BaseModel):
    degree: str = Field(default="", max_length=300)
    institution: str = Field(default="", max_length=300)
    year: str | int = ""


class ResumeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(
        default="",
        max_length=60000,
        validation_alias=AliasChoices("cv_text", "cvText", "oldCvText", "pastedCv"),
    )
    job_description: str = Field(
        default="",
        max_length=20000,
        validation_alias=AliasChoices("job_description", "jobDescription", "jd"),
    )
    profile: ProfileOverride | None = None
    experience: list[ExperienceOverride] | None = None
    education: list[EducationOverride] | None = None


class ParseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(
        default="",
        max_length=60000,
        validation_alias=AliasChoices("cv_text", "cvText", "oldCvText", "pastedCv"),
    )


class ParseResponse(BaseModel):
    parsed: ParsedCv
    experience: list[ExperienceEntry]
    education: list[EducationEntry]
