"""OpenAI-compatible chat completions client and the summarizer built on it."""
from __future__ import annotations

import time
from typing import Any, Callable

from research_chat.config import settings
from research_chat.errors import MalformedUpstreamResponse
from research_chat.services import logger as log_service


def get_client() -> Any:
    """Create an AsyncOpenAI client from settings."""
    from openai import AsyncOpenAI

    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY is not configured")
    base_url = settings.openai_base_url.strip() or "https://api.openai.com/v1"
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=base_url,
    )


def get_model() -> str:
    return settings.summary_model


# Singleton
_client = None


def client() -> Any:
    """Get or create the LLM client."""
    global _client
    if _client is None:
        _client = get_client()
    return _client


class LLMSummarizer:
    """Single-turn system/user completions used for every summary.

    ``client_factory`` is called on first use so the app can start before
    credentials are available.
    """

    def __init__(
        self,
        client_factory: Callable[[], Any] = client,
        *,
        model: str | None = None,
        caller: str = "summarizer",
    ):
        self._client_factory = client_factory
        self._client: Any | None = None
        self.model = model or get_model()
        self.caller = caller

    @property
    def openai(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        started = time.monotonic()
        try:
            response = await self.openai.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except Exception as e:
            log_service.log_llm_call(
                model=self.model,
                caller=self.caller,
                duration_ms=int((time.monotonic() - started) * 1000),
                status="error",
                error=str(e),
            )
            raise

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise MalformedUpstreamResponse("chat completions", "response has no choices")

        usage = getattr(response, "usage", None)
        log_service.log_llm_call(
            model=self.model,
            caller=self.caller,
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return choices[0].message.content or ""
