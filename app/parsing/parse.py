from __future__ import annotations

import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from app.core.errors import InputError

from .models import ExtractedDocument

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"txt", "pdf", "docx"}
ALLOWED_MIME_TYPES = {
    "text/plain",
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/octet-stream",
}
PDF_MAGIC = b"%PDF-"
ZIP_MAGIC = b"PK\x03\x04"


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def _parse_txt(content: bytes) -> tuple[str, int | None, list[str]]:
    if content.startswith((b"\xff\xfe", b"\xfe\xff")):
        return content.decode("utf-16"), None, []
    try:
        return content.decode("utf-8-sig"), None, []
    except UnicodeDecodeError:
        return content.decode("latin-1"), None, ["Text was not UTF-8; decoded as Latin-1."]


def _parse_pdf(content: bytes) -> tuple[str, int | None, list[str]]:
    if not content.startswith(PDF_MAGIC):
        raise InputError("The uploaded file is not a valid PDF.")
    warnings: list[str] = []
    reader = PdfReader(BytesIO(content))
    text_parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            text_parts.append(page_text)
    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), len(reader.pages), warnings


def _parse_docx(content: bytes) -> tuple[str, int | None, list[str]]:
    if not content.startswith(ZIP_MAGIC):
        raise InputError("The uploaded file is not a valid Word document.")
    warnings: list[str] = []
    document = Document(BytesIO(content))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                paragraphs.append(" | ".join(dict.fromkeys(cells)))
    if not paragraphs:
        warnings.append("No extractable text found in DOCX.")
    return "\n".join(paragraphs), None, warnings


_PARSERS = {
    "txt": _parse_txt,
    "pdf": _parse_pdf,
    "docx": _parse_docx,
}


def extract_text(filename: str, content: bytes, content_type: str | None = None) -> ExtractedDocument:
    extension = file_extension(filename)
    if extension == "doc":
        raise InputError("Legacy .doc is not supported. Convert to .docx.")
    if extension not in ALLOWED_EXTENSIONS:
        raise InputError("Unsupported file type. Please upload a .docx, .pdf or .txt résumé.")
    if content_type and content_type.split(";")[0].strip().lower() not in ALLOWED_MIME_TYPES:
        raise InputError("Unsupported file type. Please upload a .docx, .pdf or .txt résumé.")
    if not content:
        raise InputError("The uploaded file is empty.")

    try:
        text, page_count, warnings = _PARSERS[extension](content)
    except InputError:
        raise
    except Exception as exc:
        logger.warning("cv_extraction_failed extension=%s size=%s: %s", extension, len(content), exc)
        raise InputError(f"Unable to extract text from this {extension.upper()} file.") from exc

    return ExtractedDocument(
        filename=filename,
        source_type=extension,
        text=text,
        page_count=page_count,
        extraction_warnings=warnings,
    )
