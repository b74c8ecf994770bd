from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from app.ai.types import CompletionClient
from app.core.config import Settings, settings as default_settings
from app.core.errors import InputError, ServiceTimeoutError
from app.normalize.education import parse_education
from app.normalize.experience import tokenize_experience
from app.normalize.patterns import HeuristicConfig, default_heuristics
from app.normalize.segmenter import segment
from app.normalize.text import normalize
from app.parsing.models import ExtractedDocument
from app.schemas.requests import ParseResponse, ResumeRequest
from app.schemas.resume import CanonicalResume, DocumentBlock, ParsedCv
from app.services.alignment import AlignmentEngine, AlignmentOptions
from app.services.assembler import assemble
from app.services.mapper import MergePolicy, merge_into_canonical
from app.services.rendering import render_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedInput:
    normalized: str
    parsed: ParsedCv


def ensure_cv_text(cv_text: str) -> str:
    text = (cv_text or "").strip()
    if not text:
        raise InputError("No CV text found")
    return text


def ensure_extracted_text(document: ExtractedDocument, *, min_words: int = 0) -> str:
    """Validate text pulled from an uploaded file against the word floor."""
    text = ensure_cv_text(document.text)
    if min_words and document.word_count < min_words:
        raise InputError("We couldn't extract enough text from the CV. Please upload a text-based file.")
    return text


class ResumePipeline:
    """One request, one sequential run: normalize, segment, align, merge, assemble."""

    def __init__(
        self,
        completion_client: CompletionClient | None,
        settings: Settings | None = None,
        *,
        heuristics: HeuristicConfig | None = None,
        policy: MergePolicy | None = None,
        alignment_options: AlignmentOptions | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._settings = settings or default_settings
        self._heuristics = heuristics or default_heuristics()
        self._policy = policy or MergePolicy.from_settings(self._settings)
        self._engine = AlignmentEngine(
            completion_client,
            alignment_options or AlignmentOptions.from_settings(self._settings),
            sleep=sleep,
        )

    def parse(self, cv_text: str) -> ParsedInput:
        normalized = normalize(cv_text)
        return ParsedInput(normalized=normalized, parsed=segment(normalized, self._heuristics))

    def parse_report(self, cv_text: str) -> ParseResponse:
        ensure_cv_text(cv_text)
        parsed_input = self.parse(cv_text)
        parsed = parsed_input.parsed
        return ParseResponse(
            parsed=parsed,
            experience=tokenize_experience(parsed.experience_text, self._heuristics),
            education=parse_education(parsed.education_text),
        )

    async def _build(self, request: ResumeRequest) -> CanonicalResume:
        parsed_input = self.parse(request.cv_text)
        target_title = (request.profile.target_title or "") if request.profile else ""
        aligned = await self._engine.align(
            parsed_input.parsed,
            request.job_description,
            source_text=parsed_input.normalized,
            target_title=target_title,
        )
        return merge_into_canonical(
            parsed_input.parsed,
            aligned,
            request,
            self._policy,
            source_text=parsed_input.normalized,
            heuristics=self._heuristics,
        )

    async def build(self, request: ResumeRequest) -> CanonicalResume:
        ensure_cv_text(request.cv_text)
        started = time.perf_counter()
        timeout_s = self._settings.request_timeout_s
        try:
            resume = await asyncio.wait_for(self._build(request), timeout=timeout_s)
        except asyncio.TimeoutError as exc:
            logger.warning("resume_pipeline_timeout timeout_s=%s", timeout_s)
            raise ServiceTimeoutError(
                f"Resume generation did not finish within {timeout_s:g}s. Please try again."
            ) from exc
        logger.info(
            "resume_pipeline_complete cv_len=%s jd_len=%s completion=%s roles=%s education=%s duration_ms=%s",
            len(request.cv_text),
            len(request.job_description),
            self._engine.capability_available,
            len(resume.experience),
            len(resume.education),
            int((time.perf_counter() - started) * 1000),
        )
        return resume

    async def build_blocks(self, request: ResumeRequest) -> list[DocumentBlock]:
        return assemble(await self.build(request))

    async def generate_document(self, request: ResumeRequest) -> bytes:
        blocks = await self.build_blocks(request)
        return await asyncio.to_thread(render_document, blocks)
