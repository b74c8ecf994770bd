from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import BaseModel, Field, ValidationError

from app.ai.prompts import (
    build_experience_prompt,
    build_skills_prompt,
    build_structured_prompt,
    build_summary_prompt,
)
from app.ai.types import CompletionClient, CompletionOptions
from app.core.config import Settings
from app.core.errors import (
    UpstreamMalformedError,
    UpstreamQuotaExceeded,
    UpstreamRateLimited,
    UpstreamUnavailableError,
)
from app.normalize.patterns import DEFAULT_SKILLS, KNOWN_SKILLS
from app.normalize.utils import truncate
from app.schemas.resume import AlignedContent, EducationEntry, ExperienceEntry, ParsedCv

logger = logging.getLogger(__name__)

SKILL_SEPARATOR = " • "
_SUMMARY_FALLBACK_LINES = 5
_SUMMARY_FALLBACK_CHARS = 500
_MIN_SKILLS = 4
_MAX_SKILLS = 14
_SKILL_SPLIT_RE = re.compile(r"\s*(?:[,;|\n•·]|\s-\s)\s*")
_WRAPPING_QUOTES = "\"'`“”‘’"


@dataclass(frozen=True)
class AlignmentOptions:
    summary_char_budget: int = 900
    experience_char_budget: int = 2500
    skills_char_budget: int = 2500
    jd_char_budget: int = 1500
    summary_timeout_s: float = 15.0
    experience_timeout_s: float = 20.0
    skills_timeout_s: float = 10.0
    retry_backoff_s: float = 1.2
    structured_output: bool = False
    temperature: float = 0.3

    @classmethod
    def from_settings(cls, settings: Settings) -> "AlignmentOptions":
        return cls(
            summary_char_budget=settings.summary_char_budget,
            experience_char_budget=settings.experience_char_budget,
            skills_char_budget=settings.skills_char_budget,
            jd_char_budget=settings.jd_char_budget,
            summary_timeout_s=settings.summary_timeout_s,
            experience_timeout_s=settings.experience_timeout_s,
            skills_timeout_s=settings.skills_timeout_s,
            retry_backoff_s=settings.retry_backoff_s,
            structured_output=settings.structured_output,
        )

    @property
    def structured_timeout_s(self) -> float:
        return self.experience_timeout_s + self.skills_timeout_s


class _StructuredRole(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    start: str = ""
    end: str = ""
    bullets: list[str] = Field(default_factory=list)


class _StructuredEducation(BaseModel):
    degree: str = ""
    institution: str = ""
    year: str = ""


class StructuredTailoring(BaseModel):
    summary: str
    skills: list[str]
    experience_blocks: list[_StructuredRole]
    education: list[_StructuredEducation] = Field(default_factory=list)


def _clean_text(text: str) -> str:
    return (text or "").strip().strip(_WRAPPING_QUOTES).strip()


def _clean_skills_line(text: str) -> str:
    items = [item.strip(_WRAPPING_QUOTES + " .") for item in _SKILL_SPLIT_RE.split(_clean_text(text))]
    unique = list(dict.fromkeys(item for item in items if item))
    return SKILL_SEPARATOR.join(unique[:_MAX_SKILLS])


def summary_fallback(parsed: ParsedCv, target_title: str = "") -> str:
    if parsed.summary_text.strip():
        return parsed.summary_text.strip()
    lines = [line for line in parsed.preamble_text.split("\n") if line.strip()]
    if lines:
        return truncate(" ".join(lines[:_SUMMARY_FALLBACK_LINES]), _SUMMARY_FALLBACK_CHARS)
    return f"Motivated professional targeting {target_title.strip() or 'the role'}."


def _contains_phrase(haystack: str, phrase: str) -> bool:
    return bool(re.search(rf"(?<![\w]){re.escape(phrase.lower())}(?![\w])", haystack))


def skills_fallback(parsed: ParsedCv, job_description: str, source_text: str = "") -> str:
    cv_lower = (source_text or "\n".join(parsed.model_dump().values())).lower()
    jd_lower = (job_description or "").lower()

    own = [item.strip() for item in _SKILL_SPLIT_RE.split(parsed.skills_text) if item.strip()]
    known = [skill for skill in KNOWN_SKILLS if _contains_phrase(cv_lower, skill)]
    candidates = list(dict.fromkeys(own + known))
    in_jd = [skill for skill in candidates if _contains_phrase(jd_lower, skill)]
    ordered = list(dict.fromkeys(in_jd + candidates))[:_MAX_SKILLS]
    for default in DEFAULT_SKILLS:
        if len(ordered) >= _MIN_SKILLS:
            break
        if default not in ordered:
            ordered.append(default)
    return SKILL_SEPARATOR.join(ordered)


def experience_to_text(entries: list[ExperienceEntry]) -> str:
    """Render entries in the same line shape the experience tokenizer reads."""
    blocks: list[str] = []
    for entry in entries:
        lines: list[str] = []
        employer = ", ".join(part for part in (entry.company, entry.location) if part)
        header = " — ".join(part for part in (entry.title, employer) if part)
        if header:
            lines.append(header)
        if entry.start or entry.end:
            lines.append(f"{entry.start or 'Start'} – {entry.end or 'Present'}")
        lines.extend(f"- {bullet}" for bullet in entry.bullets)
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


class AlignmentEngine:
    """Aligns parsed CV content to a job description through the completion capability.

    A missing client, a generic upstream failure or a per-part timeout degrades
    to deterministic fallback text. Rate limits are retried once; a second rate
    limit, quota exhaustion and malformed structured output propagate.
    """

    def __init__(
        self,
        client: CompletionClient | None,
        options: AlignmentOptions | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._client = client
        self._options = options or AlignmentOptions()
        self._sleep = sleep

    @property
    def capability_available(self) -> bool:
        return self._client is not None

    async def _complete_with_retry(self, system_prompt: str, user_prompt: str, options: CompletionOptions) -> str:
        if self._client is None:
            raise UpstreamUnavailableError("Completion capability is not configured.")
        try:
            return await self._client.complete(system_prompt, user_prompt, options)
        except UpstreamRateLimited:
            logger.warning("resume_alignment_rate_limited retry_in=%.2fs", self._options.retry_backoff_s)
            await self._sleep(self._options.retry_backoff_s)
            return await self._client.complete(system_prompt, user_prompt, options)

    async def _run_part(
        self,
        part: str,
        prompt: tuple[str, str],
        fallback: str,
        timeout_s: float,
        *,
        clean: Callable[[str], str] = _clean_text,
    ) -> tuple[str, bool]:
        if not self.capability_available:
            return fallback, False
        system_prompt, user_prompt = prompt
        options = CompletionOptions(temperature=self._options.temperature)
        try:
            raw = await asyncio.wait_for(
                self._complete_with_retry(system_prompt, user_prompt, options),
                timeout=timeout_s,
            )
        except (UpstreamRateLimited, UpstreamQuotaExceeded, UpstreamMalformedError):
            raise
        except asyncio.TimeoutError:
            logger.warning("resume_alignment_fallback part=%s reason=timeout timeout_s=%s", part, timeout_s)
            return fallback, False
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning("resume_alignment_fallback part=%s reason=%s", part, exc.__class__.__name__)
            return fallback, False

        text = clean(raw)
        if not text:
            logger.info("resume_alignment_fallback part=%s reason=empty_response", part)
            return fallback, False
        return text, True

    async def rewrite_summary(
        self,
        parsed: ParsedCv,
        job_description: str,
        *,
        target_title: str = "",
    ) -> tuple[str, bool]:
        fallback = summary_fallback(parsed, target_title)
        prompt = build_summary_prompt(
            fallback,
            job_description,
            target_title=target_title,
            cv_limit=self._options.summary_char_budget,
            jd_limit=self._options.jd_char_budget,
        )
        return await self._run_part("summary", prompt, fallback, self._options.summary_timeout_s)

    async def align_experience(
        self,
        parsed: ParsedCv,
        job_description: str,
        *,
        source_text: str = "",
    ) -> tuple[str, bool]:
        fallback = parsed.experience_text.strip()
        experience_source = fallback or source_text.strip()
        if not experience_source:
            return fallback, False
        prompt = build_experience_prompt(
            experience_source,
            job_description,
            cv_limit=self._options.experience_char_budget,
            jd_limit=self._options.jd_char_budget,
        )
        return await self._run_part("experience", prompt, fallback, self._options.experience_timeout_s)

    async def build_skills(
        self,
        parsed: ParsedCv,
        job_description: str,
        *,
        source_text: str = "",
    ) -> tuple[str, bool]:
        fallback = skills_fallback(parsed, job_description, source_text)
        prompt = build_skills_prompt(
            source_text or "\n".join(parsed.model_dump().values()),
            job_description,
            cv_limit=self._options.skills_char_budget,
            jd_limit=self._options.jd_char_budget,
        )
        return await self._run_part(
            "skills", prompt, fallback, self._options.skills_timeout_s, clean=_clean_skills_line
        )

    async def align(
        self,
        parsed: ParsedCv,
        job_description: str,
        *,
        source_text: str = "",
        target_title: str = "",
    ) -> AlignedContent:
        if self._options.structured_output:
            return await self.align_structured(
                parsed, job_description, source_text=source_text, target_title=target_title
            )

        results = await asyncio.gather(
            self.rewrite_summary(parsed, job_description, target_title=target_title),
            self.align_experience(parsed, job_description, source_text=source_text),
            self.build_skills(parsed, job_description, source_text=source_text),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        (summary, summary_llm), (experience, experience_llm), (skills, skills_llm) = results

        used = [summary_llm, experience_llm, skills_llm]
        if all(used):
            mode = "llm"
        elif any(used):
            mode = "mixed"
        else:
            mode = "fallback"
        logger.info(
            "resume_alignment_complete mode=%s summary_llm=%s experience_llm=%s skills_llm=%s",
            mode,
            summary_llm,
            experience_llm,
            skills_llm,
        )
        return AlignedContent(
            summary=summary,
            skills_line=skills,
            experience_text=experience,
            generation_mode=mode,
        )

    async def align_structured(
        self,
        parsed: ParsedCv,
        job_description: str,
        *,
        source_text: str = "",
        target_title: str = "",
    ) -> AlignedContent:
        fallback = AlignedContent(
            summary=summary_fallback(parsed, target_title),
            skills_line=skills_fallback(parsed, job_description, source_text),
            experience_text=parsed.experience_text.strip(),
            generation_mode="fallback",
        )
        if not self.capability_available:
            return fallback

        system_prompt, user_prompt = build_structured_prompt(
            source_text or "\n".join(parsed.model_dump().values()),
            job_description,
            target_title=target_title,
            cv_limit=self._options.experience_char_budget,
            jd_limit=self._options.jd_char_budget,
        )
        options = CompletionOptions(temperature=self._options.temperature, json_mode=True, max_tokens=1800)
        try:
            raw = await asyncio.wait_for(
                self._complete_with_retry(system_prompt, user_prompt, options),
                timeout=self._options.structured_timeout_s,
            )
        except (UpstreamRateLimited, UpstreamQuotaExceeded):
            raise
        except asyncio.TimeoutError:
            logger.warning("resume_alignment_fallback part=structured reason=timeout")
            return fallback
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning("resume_alignment_fallback part=structured reason=%s", exc.__class__.__name__)
            return fallback

        try:
            payload = StructuredTailoring.model_validate_json(raw or "")
        except ValidationError as exc:
            logger.warning("resume_alignment_malformed errors=%s raw_len=%s", exc.error_count(), len(raw or ""))
            raise UpstreamMalformedError(
                f"Model output was not valid JSON for the expected schema: {(raw or '')[:300]}"
            ) from exc

        experience = [ExperienceEntry(**role.model_dump()) for role in payload.experience_blocks]
        education = [EducationEntry(**item.model_dump()) for item in payload.education]
        experience = [entry for entry in experience if not entry.is_empty()]
        return AlignedContent(
            summary=_clean_text(payload.summary) or fallback.summary,
            skills_line=_clean_skills_line("\n".join(payload.skills)) or fallback.skills_line,
            experience_text=experience_to_text(experience),
            experience_entries=experience,
            education_entries=[entry for entry in education if not entry.is_empty()],
            generation_mode="llm",
        )
