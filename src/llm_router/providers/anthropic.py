"""Claude provider: wraps the Anthropic messages API."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

from llm_router.config import ProviderSettings
from llm_router.exceptions import EmptyResponseError, ProviderInitError
from llm_router.providers.base import chat_role, vendor_retry
from llm_router.types import GenerationOptions, GenerationResult, Message, TokenUsage

try:
    from anthropic import AsyncAnthropic

    HAS_ANTHROPIC = True
except ImportError:
    HAS_ANTHROPIC = False

if not HAS_ANTHROPIC:
    msg = (
        "Claude provider requires the 'anthropic' package. "
        "Install with: pip install 'llm-router[anthropic]'"
    )
    raise ImportError(msg)

DEFAULT_MODEL = "claude-sonnet-4-5"


class ClaudeProvider:
    """LLM provider backed by the Anthropic API."""

    name = "claude"

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
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=float(timeout_seconds),
        )
        self._max_retries = max_retries

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> ClaudeProvider:
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
    def prepare_messages(system_prompt: str, messages: Sequence[Message]) -> dict[str, Any]:
        """Claude takes the system prompt as a top-level field."""
        return {
            "system": system_prompt,
            "messages": [{"role": chat_role(m), "content": m["content"]} for m in messages],
        }

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Call the messages API and normalise the reply."""
        opts = options or GenerationOptions()
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": opts.max_tokens,
            "temperature": opts.temperature,
            **self.prepare_messages(system_prompt, messages),
        }
        # top_p defaults to 1.0, which is the API's behaviour when omitted
        if opts.top_p is not None:
            payload["top_p"] = opts.top_p

        start = time.monotonic()

        @vendor_retry(self._max_retries)
        async def _do_call() -> Any:
            return await self._client.messages.create(**payload)

        message = await _do_call()
        latency_ms = (time.monotonic() - start) * 1000

        text = "".join(
            getattr(block, "text", "") for block in message.content if getattr(block, "type", None) == "text"
        ).strip()
        if not text:
            raise EmptyResponseError(self.name)

        return GenerationResult(
            text=text,
            provider=self.name,
            model=self.model,
            usage=self._extract_usage(message),
            raw=message,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _extract_usage(message: object) -> TokenUsage:
        usage = getattr(message, "usage", None)
        if usage is None:
            return TokenUsage()
        input_tokens = getattr(usage, "input_tokens", 0) or 0
        output_tokens = getattr(usage, "output_tokens", 0) or 0
        return TokenUsage.of(input_tokens, output_tokens)

    def info(self) -> dict[str, Any]:
        return {
            "name": "Claude",
            "model": self.model,
            "configured": bool(self._api_key and self.model),
            "provider": self.name,
            "api": "Anthropic API",
        }

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
