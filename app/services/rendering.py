from __future__ import annotations

import logging
from io import BytesIO
from typing import Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from app.core.errors import RenderingError
from app.schemas.resume import DocumentBlock

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_HEADING_SIZES = {1: Pt(18), 2: Pt(12), 3: Pt(11)}


def _add_run_paragraph(document, text: str, *, bold: bool = False, size=None, center: bool = False):
    paragraph = document.add_paragraph()
    run = paragraph.add_run(text)
    run.bold = bold
    if size is not None:
        run.font.size = size
    if center:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    return paragraph


def _render_block(document, block: DocumentBlock) -> None:
    if block.kind == "heading":
        paragraph = _add_run_paragraph(
            document,
            block.text,
            bold=True,
            size=_HEADING_SIZES.get(block.level, Pt(11)),
            center=block.level <= 1,
        )
        paragraph.paragraph_format.space_after = Pt(4)
    elif block.kind == "centered_line":
        paragraph = _add_run_paragraph(document, block.text, center=True)
        paragraph.paragraph_format.space_after = Pt(10)
    elif block.kind == "label":
        paragraph = _add_run_paragraph(document, block.text, bold=True)
        paragraph.paragraph_format.space_before = Pt(12)
        paragraph.paragraph_format.space_after = Pt(6)
    elif block.kind == "bullet":
        document.add_paragraph(block.text, style="List Bullet")
    else:
        document.add_paragraph(block.text)


def render_document(blocks: Sequence[DocumentBlock]) -> bytes:
    """Serialize blocks into a .docx payload, preserving their order."""
    try:
        document = Document()
        for section in document.sections:
            section.top_margin = Inches(0.5)
            section.bottom_margin = Inches(0.5)
            section.left_margin = Inches(0.625)
            section.right_margin = Inches(0.625)
        for block in blocks:
            _render_block(document, block)
        buffer = BytesIO()
        document.save(buffer)
    except Exception as exc:
        logger.exception("resume_render_failed blocks=%s", len(blocks))
        raise RenderingError(f"Document rendering failed: {exc.__class__.__name__}") from exc
    return buffer.getvalue()
