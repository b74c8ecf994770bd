"""
Clean-up of raw CV text before segmentation.

Handles pasted HTML fragments and the usual extraction noise from PDF/DOCX
converters. The output keeps one logical line per row with no blank rows, which
is also a fixed point of :func:`normalize`.
"""
from __future__ import annotations

import re

from .utils import normalize_line

_BLOCK_BREAK_RE = re.compile(r"<\s*br\s*/?\s*>|<\s*/\s*(?:p|div|li|h[1-6]|tr)\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<\s*/?\s*[a-zA-Z][^<>]*>")
_DIGITS_ONLY_RE = re.compile(r"^\d+$")


def _strip_markup(text: str) -> str:
    # Repeat until stable so nested fragments like "<<b>p>" cannot survive one pass.
    while True:
        stripped = _TAG_RE.sub("", _BLOCK_BREAK_RE.sub("\n", text)).replace("&nbsp;", " ")
        if stripped == text:
            return stripped
        text = stripped


def normalize(raw: str) -> str:
    if not raw:
        return ""
    text = _strip_markup(raw)
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    lines: list[str] = []
    for raw_line in text.split("\n"):
        line = normalize_line(raw_line)
        if not line or _DIGITS_ONLY_RE.match(line):
            continue
        lines.append(line)
    return "\n".join(lines)
