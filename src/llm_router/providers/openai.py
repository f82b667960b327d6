"""ChatGPT provider: wraps the OpenAI chat completions API."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

from llm_router.config import ProviderSettings
from llm_router.exceptions import EmptyResponseError, ProviderInitError
from llm_router.providers.base import chat_role, vendor_retry
from llm_router.types import GenerationOptions, GenerationResult, Message, TokenUsage

try:
    from openai import AsyncOpenAI

    HAS_OPENAI = True
except ImportError:
    HAS_OPENAI = False

if not HAS_OPENAI:
    msg = (
        "ChatGPT provider requires the 'openai' package. "
        "Install with: pip install 'llm-router[openai]'"
    )
    raise ImportError(msg)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TOP_P = 1.0


class ChatGPTProvider:
    """LLM provider backed by the OpenAI API."""

    name = "chatgpt"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        max_retries: int = 1,
        timeout_seconds: float = 60.0,
    ) -> None:
        if not api_key:
            raise ProviderInitError(self.name, "API key not configured")
        self.model = model
        self._api_key = api_key
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=float(timeout_seconds),
        )
        self._max_retries = max_retries

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> ChatGPTProvider:
        """Factory method for the provider registry."""
        try:
            api_key = settings.get_api_key(cls.name)
        except ValueError as exc:
            raise ProviderInitError(cls.name, str(exc)) from exc
        return cls(
            api_key=api_key,
            model=settings.model or DEFAULT_MODEL,
            base_url=settings.base_url,
            max_retries=settings.max_retries,
            timeout_seconds=settings.timeout_seconds,
        )

    @staticmethod
    def prepare_messages(system_prompt: str, messages: Sequence[Message]) -> list[dict[str, str]]:
        """System message first, then the history."""
        formatted: list[dict[str, str]] = []
        if system_prompt:
            formatted.append({"role": "system", "content": system_prompt})
        formatted.extend({"role": chat_role(m), "content": m["content"]} for m in messages)
        return formatted

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Call chat completions and normalise the reply."""
        opts = options or GenerationOptions()
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": self.prepare_messages(system_prompt, messages),
            "temperature": opts.temperature,
            "max_tokens": opts.max_tokens,
            "top_p": opts.top_p if opts.top_p is not None else DEFAULT_TOP_P,
            "frequency_penalty": opts.frequency_penalty,
            "presence_penalty": opts.presence_penalty,
        }

        start = time.monotonic()

        @vendor_retry(self._max_retries)
        async def _do_call() -> Any:
            return await self._client.chat.completions.create(**payload)

        completion = await _do_call()
        latency_ms = (time.monotonic() - start) * 1000

        choices = getattr(completion, "choices", None) or []
        text = (choices[0].message.content or "").strip() if choices else ""
        if not text:
            raise EmptyResponseError(self.name)

        return GenerationResult(
            text=text,
            provider=self.name,
            model=self.model,
            usage=self._extract_usage(completion),
            raw=completion,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _extract_usage(completion: object) -> TokenUsage:
        usage = getattr(completion, "usage", None)
        if usage is None:
            return TokenUsage()
        return TokenUsage.of(
            getattr(usage, "prompt_tokens", 0) or 0,
            getattr(usage, "completion_tokens", 0) or 0,
            getattr(usage, "total_tokens", 0) or 0,
        )

    def info(self) -> dict[str, Any]:
        return {
            "name": "ChatGPT",
            "model": self.model,
            "configured": bool(self._api_key and self.model),
            "provider": self.name,
            "api": "OpenAI API",
        }

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
