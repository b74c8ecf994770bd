from __future__ import annotations

import logging
from typing import Optional, Sequence

import openai
from openai import AsyncOpenAI

from app.ai.types import ChatMessage, CompletionOptions
from app.core.errors import (
    UpstreamQuotaExceeded,
    UpstreamRateLimited,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

_QUOTA_MARKERS = ("insufficient_quota", "exceeded your current quota")


def _is_quota_error(exc: openai.APIError) -> bool:
    code = (getattr(exc, "code", None) or "").lower()
    if code == "insufficient_quota":
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _QUOTA_MARKERS)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
    ):
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def aclose(self) -> None:
        await self._client.close()

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        options: CompletionOptions,
    ) -> str:
        messages: Sequence[ChatMessage] = (
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        )
        create_kwargs = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        if options.json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except openai.RateLimitError as exc:
            if _is_quota_error(exc):
                raise UpstreamQuotaExceeded("OpenAI quota exceeded. Please check billing/limits.") from exc
            raise UpstreamRateLimited("OpenAI rate limit reached. Please retry shortly.") from exc
        except openai.APIError as exc:
            logger.warning("openai_completion_failed model=%s prompt_len=%s: %s", self._model, len(user_prompt), exc)
            raise UpstreamUnavailableError(f"Completion request failed: {exc.__class__.__name__}") from exc

        content = response.choices[0].message.content if response.choices else ""
        return (content or "").strip()
