from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    request_timeout_s: float
    summary_timeout_s: float
    experience_timeout_s: float
    skills_timeout_s: float
    retry_backoff_s: float
    summary_char_budget: int
    experience_char_budget: int
    skills_char_budget: int
    jd_char_budget: int
    structured_output: bool
    prefer_caller_fields: bool
    explicit_empty_overrides: bool
    extra_role_keywords: tuple[str, ...]
    extra_locality_keywords: tuple[str, ...]
    min_upload_words: int
    max_upload_bytes: int
    document_filename: str


def load_settings() -> Settings:
    return Settings(
        rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "https://hireedge.co.uk",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        request_timeout_s=_get_env_float("RESUME_REQUEST_TIMEOUT_S", 45.0),
        summary_timeout_s=_get_env_float("RESUME_SUMMARY_TIMEOUT_S", 15.0),
        experience_timeout_s=_get_env_float("RESUME_EXPERIENCE_TIMEOUT_S", 20.0),
        skills_timeout_s=_get_env_float("RESUME_SKILLS_TIMEOUT_S", 10.0),
        retry_backoff_s=_get_env_float("RESUME_RETRY_BACKOFF_S", 1.2),
        summary_char_budget=_get_env_int("RESUME_SUMMARY_CHAR_BUDGET", 900),
        experience_char_budget=_get_env_int("RESUME_EXPERIENCE_CHAR_BUDGET", 2500),
        skills_char_budget=_get_env_int("RESUME_SKILLS_CHAR_BUDGET", 2500),
        jd_char_budget=_get_env_int("RESUME_JD_CHAR_BUDGET", 1500),
        structured_output=_get_env_bool("RESUME_STRUCTURED_OUTPUT", False),
        prefer_caller_fields=_get_env_bool("RESUME_PREFER_CALLER_FIELDS", True),
        explicit_empty_overrides=_get_env_bool("RESUME_EXPLICIT_EMPTY_OVERRIDES", True),
        extra_role_keywords=_get_env_list("RESUME_EXTRA_ROLE_KEYWORDS", []),
        extra_locality_keywords=_get_env_list("RESUME_EXTRA_LOCALITY_KEYWORDS", []),
        min_upload_words=_get_env_int("RESUME_MIN_UPLOAD_WORDS", 30),
        max_upload_bytes=_get_env_int("RESUME_MAX_UPLOAD_BYTES", 8 * 1024 * 1024),
        document_filename=_get_env("RESUME_DOCUMENT_FILENAME", "Tailored_CV.docx") or "Tailored_CV.docx",
    )


settings = load_settings()

if settings.request_timeout_s <= 0:
    raise RuntimeError("RESUME_REQUEST_TIMEOUT_S must be greater than zero.")
