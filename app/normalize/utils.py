from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪●○■□◆▶►-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*[{re.escape(_BULLET_CHARS)}]\s*")
YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")
EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"\+?\d[\d\s().-]{5,}\d")
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/[^\s,;|•]+", re.IGNORECASE)
_LONG_DIGIT_RUN_RE = re.compile(r"\d(?:[\s-]?\d){6,}")
_WORD_RE = re.compile(r"[a-z][a-z0-9+#&-]*")


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_bullet_like(line: str) -> bool:
    stripped = line.lstrip()
    if not stripped:
        return False
    # "-2019" style date fragments are not bullets.
    return bool(_BULLET_PATTERN.match(stripped)) and not stripped[1:2].isdigit()


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line, count=1).strip()


def contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def contains_token(text: str, tokens: tuple[str, ...]) -> bool:
    """Whole-word match; multi-word tokens match as a phrase."""
    words = set(word_tokens(text))
    lowered = text.lower()
    for token in tokens:
        if " " in token:
            if re.search(rf"\b{re.escape(token)}\b", lowered):
                return True
        elif token in words:
            return True
    return False


def word_tokens(text: str) -> list[str]:
    return [word.strip("&-") for word in _WORD_RE.findall(text.lower())]


def has_year(line: str) -> bool:
    return bool(YEAR_RE.search(line))


def has_long_digit_run(line: str) -> bool:
    return bool(_LONG_DIGIT_RUN_RE.search(line))


def truncate(text: str, limit: int) -> str:
    text = (text or "").strip()
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit].rstrip()
