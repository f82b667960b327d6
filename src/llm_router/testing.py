"""Testing utilities shipped with llm-router.

Provides ``FakeProvider`` for consumers to use in their test suites
without reimplementing the LLMProvider Protocol.

Usage::

    from llm_router import ProviderManager, RouterConfig
    from llm_router.testing import FakeProvider

    primary = FakeProvider("gemini", fail_with=RuntimeError("quota"))
    backup = FakeProvider("chatgpt", text="hello")

    manager = ProviderManager(
        config=RouterConfig(default_provider="gemini"),
        providers={"gemini": primary, "chatgpt": backup},
    )
    result = await manager.generate("system", [{"role": "user", "content": "hi"}])
    assert result.fallback_used
    assert result.provider == "chatgpt"
    assert backup.call_count == 1
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from llm_router.types import GenerationOptions, GenerationResult, Message, TokenUsage


@dataclass
class FakeCall:
    """Record of a single ``FakeProvider.generate()`` invocation."""

    system_prompt: str
    messages: Sequence[Message]
    options: GenerationOptions | None


class FakeProvider:
    """Fake provider for testing. Implements the ``LLMProvider`` Protocol.

    Resolution order in ``generate()``:

    1. Next queued outcome from ``queue()`` (an exception is raised, a string
       is returned as text)
    2. ``fail_with`` exception, if set
    3. ``response_factory(system_prompt, messages)``, if provided
    4. The fixed ``text``
    """

    def __init__(
        self,
        name: str = "fake",
        text: str = "ok",
        model: str = "fake-model",
        fail_with: Exception | None = None,
        response_factory: Callable[[str, Sequence[Message]], str] | None = None,
        prompt_tokens: int = 100,
        completion_tokens: int = 50,
    ) -> None:
        self.name = name
        self.model = model
        self.text = text
        self.fail_with = fail_with
        self._response_factory = response_factory
        self._prompt_tokens = prompt_tokens
        self._completion_tokens = completion_tokens
        self._queued: list[str | Exception] = []
        self.calls: list[FakeCall] = []
        self.closed = False

    def queue(self, *outcomes: str | Exception) -> None:
        """Queue outcomes consumed one per call, before any fixed behaviour."""
        self._queued.extend(outcomes)

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Return a canned result or raise the configured error."""
        self.calls.append(FakeCall(system_prompt=system_prompt, messages=messages, options=options))

        if self._queued:
            outcome = self._queued.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            text = outcome
        elif self.fail_with is not None:
            raise self.fail_with
        elif self._response_factory is not None:
            text = self._response_factory(system_prompt, messages)
        else:
            text = self.text

        return GenerationResult(
            text=text.strip(),
            provider=self.name,
            model=self.model,
            usage=TokenUsage.of(self._prompt_tokens, self._completion_tokens),
            raw={"fake": True},
        )

    def info(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "model": self.model,
            "configured": True,
            "provider": self.name,
            "api": "fake",
        }

    @property
    def call_count(self) -> int:
        """Number of ``generate()`` calls recorded."""
        return len(self.calls)

    async def close(self) -> None:
        self.closed = True
