"""Gemini provider: wraps the Google Gen AI SDK."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

from llm_router.config import ProviderSettings
from llm_router.exceptions import EmptyResponseError, ProviderInitError
from llm_router.providers.base import vendor_retry
from llm_router.types import GenerationOptions, GenerationResult, Message, TokenUsage

try:
    from google import genai
    from google.genai import types as genai_types

    HAS_GENAI = True
except ImportError:
    HAS_GENAI = False

if not HAS_GENAI:
    msg = (
        "Gemini provider requires the 'google-genai' package. "
        "Install with: pip install 'llm-router[gemini]'"
    )
    raise ImportError(msg)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TOP_P = 0.95
DEFAULT_TOP_K = 40


class GeminiProvider:
    """LLM provider backed by the Gemini API.

    Gemini gets no separate system turn here: the system prompt and the
    history are flattened into a single user message.
    """

    name = "gemini"

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
        self._base_url = base_url
        self._timeout_ms = int(timeout_seconds * 1000)
        self._max_retries = max_retries
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> GeminiProvider:
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

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=genai_types.HttpOptions(
                    base_url=self._base_url,
                    timeout=self._timeout_ms,
                ),
            )
        return self._client

    @staticmethod
    def prepare_messages(system_prompt: str, messages: Sequence[Message]) -> str:
        lines = [
            f"{'Assistant' if m.get('role') == 'assistant' else 'User'}: {m['content']}"
            for m in messages
        ]
        return f"{system_prompt}\n\nCONVERSATION:\n" + "\n".join(lines)

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Call generate_content and normalise the reply."""
        opts = options or GenerationOptions()
        prompt = self.prepare_messages(system_prompt, messages)
        config = genai_types.GenerateContentConfig(
            temperature=opts.temperature,
            top_p=opts.top_p if opts.top_p is not None else DEFAULT_TOP_P,
            top_k=opts.top_k if opts.top_k is not None else DEFAULT_TOP_K,
            max_output_tokens=opts.max_tokens,
        )
        client = self._get_client()

        start = time.monotonic()

        @vendor_retry(self._max_retries)
        async def _do_call() -> Any:
            return await client.aio.models.generate_content(
                model=self.model,
                contents=[{"role": "user", "parts": [{"text": prompt}]}],
                config=config,
            )

        response = await _do_call()
        latency_ms = (time.monotonic() - start) * 1000

        text = (response.text or "").strip()
        if not text:
            raise EmptyResponseError(self.name)

        return GenerationResult(
            text=text,
            provider=self.name,
            model=self.model,
            usage=self._extract_usage(response),
            raw=response,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _extract_usage(response: object) -> TokenUsage:
        metadata = getattr(response, "usage_metadata", None)
        if metadata is None:
            return TokenUsage()
        return TokenUsage.of(
            getattr(metadata, "prompt_token_count", 0) or 0,
            getattr(metadata, "candidates_token_count", 0) or 0,
            getattr(metadata, "total_token_count", 0) or 0,
        )

    def info(self) -> dict[str, Any]:
        return {
            "name": "Gemini",
            "model": self.model,
            "configured": bool(self._api_key and self.model),
            "provider": self.name,
            "api": "Google Gen AI",
        }

    async def close(self) -> None:
        """Close the async HTTP client if one was created."""
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None
