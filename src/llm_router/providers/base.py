"""LLM provider protocol: the contract every adapter must satisfy."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from tenacity import retry, stop_after_attempt, wait_exponential

from llm_router.types import GenerationOptions, GenerationResult, Message

PROBE_SYSTEM_PROMPT = "You are an assistant."
PROBE_MESSAGE = "Reply with: OK"


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol that all provider adapters must implement.

    Adapters translate the uniform request into one vendor's payload, call
    the vendor, and translate the reply into a :class:`GenerationResult`.
    Vendor exceptions propagate unchanged.
    """

    name: str
    model: str

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Generate a reply to *messages* under *system_prompt*.

        Args:
            system_prompt: System instruction.
            messages: Conversation history, oldest first.
            options: Sampling options. ``None`` means defaults.

        Returns:
            GenerationResult with trimmed text, usage and raw vendor payload.
        """
        ...

    def info(self) -> dict[str, Any]:
        """Return ``{name, model, configured, provider, api}``."""
        ...

    async def close(self) -> None:
        """Release vendor client resources."""
        ...


def chat_role(message: Message) -> str:
    """Vendor chat role for a history message: anything but assistant is user."""
    return "assistant" if message.get("role") == "assistant" else "user"


def vendor_retry(max_attempts: int) -> Callable[[Any], Any]:
    """Retry decorator for a single vendor call; re-raises the last error."""
    return retry(
        stop=stop_after_attempt(max(max_attempts, 1)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )


async def probe_connection(provider: LLMProvider) -> bool:
    """Send a trivial prompt; True when the provider answers with any text.

    Vendor errors propagate to the caller.
    """
    result = await provider.generate(
        PROBE_SYSTEM_PROMPT,
        [{"role": "user", "content": PROBE_MESSAGE}],
    )
    return bool(result.text)
