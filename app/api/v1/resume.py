from typing import NoReturn

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import Response

from app.core.config import settings
from app.core.errors import ResumePipelineError
from app.core.rate_limit import rate_limit
from app.parsing.parse import extract_text
from app.schemas.requests import OutputFormat, ParseRequest, ParseResponse, ResumeRequest
from app.schemas.resume import CanonicalResume
from app.services.rendering import DOCX_MEDIA_TYPE
from app.services.resume_pipeline import ResumePipeline, ensure_extracted_text

router = APIRouter()

_MAX_CV_CHARS = 60000


def get_pipeline(request: Request) -> ResumePipeline:
    client = getattr(request.app.state, "completion_client", None)
    return ResumePipeline(client, settings)


def _raise_pipeline_http_error(exc: ResumePipelineError) -> NoReturn:
    headers = {"Retry-After": "2"} if exc.retryable else None
    raise HTTPException(status_code=exc.status_code, detail=exc.to_detail(), headers=headers) from exc


def _docx_response(content: bytes) -> Response:
    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{settings.document_filename}"'},
    )


async def _generate(pipeline: ResumePipeline, payload: ResumeRequest, output_format: OutputFormat):
    try:
        if output_format == "json":
            resume: CanonicalResume = await pipeline.build(payload)
            return resume
        return _docx_response(await pipeline.generate_document(payload))
    except ResumePipelineError as exc:
        _raise_pipeline_http_error(exc)


@router.post("/resume/parse", response_model=ParseResponse)
@rate_limit()
async def resume_parse(
    request: Request,
    payload: ParseRequest,
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    _ = request
    try:
        return pipeline.parse_report(payload.cv_text)
    except ResumePipelineError as exc:
        _raise_pipeline_http_error(exc)


@router.post(
    "/resume/generate",
    response_model=None,
    responses={200: {"content": {DOCX_MEDIA_TYPE: {}, "application/json": {}}}},
)
@rate_limit()
async def resume_generate(
    request: Request,
    payload: ResumeRequest,
    output_format: OutputFormat = Query(default="docx", alias="format"),
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    _ = request
    return await _generate(pipeline, payload, output_format)


@router.post(
    "/resume/generate/upload",
    response_model=None,
    responses={200: {"content": {DOCX_MEDIA_TYPE: {}, "application/json": {}}}},
)
@rate_limit()
async def resume_generate_upload(
    request: Request,
    cv_file: UploadFile = File(..., alias="cvFile"),
    job_description: str = Form(default="", alias="jobDescription"),
    output_format: OutputFormat = Form(default="docx", alias="format"),
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    _ = request
    filename = cv_file.filename or "uploaded-cv"
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await cv_file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    try:
        extracted = extract_text(filename, b"".join(chunks), cv_file.content_type)
        cv_text = ensure_extracted_text(extracted, min_words=settings.min_upload_words)
    except ResumePipelineError as exc:
        _raise_pipeline_http_error(exc)

    payload = ResumeRequest(cv_text=cv_text[:_MAX_CV_CHARS], job_description=job_description[:20000])
    return await _generate(pipeline, payload, output_format)
