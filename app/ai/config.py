import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    api_key: str
    base_url: str | None
    timeout_s: float
    max_retries: int

    @property
    def configured(self) -> bool:
        return self.enabled and bool(self.api_key) and not _looks_like_placeholder(self.api_key)


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()
    return AIConfig(
        enabled=_env_bool("RESUME_LLM_ENABLED", True),
        provider=provider,
        model=model,
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "30")),
        # Retries on 429 are owned by the alignment engine.
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "0")),
    )
