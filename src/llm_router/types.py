"""Core data types for llm-router."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Literal, TypedDict

_OPTION_ALIASES: dict[str, str] = {
    "maxTokens": "max_tokens",
    "topP": "top_p",
    "topK": "top_k",
    "frequencyPenalty": "frequency_penalty",
    "presencePenalty": "presence_penalty",
}


class Message(TypedDict):
    """A single turn of conversation history."""

    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling options for one generation.

    ``None`` for ``top_p``/``top_k`` means "use the vendor default".
    """

    temperature: float = 0.7
    max_tokens: int = 1000
    top_p: float | None = None
    top_k: int | None = None
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> GenerationOptions:
        """Build options from a plain mapping, dropping unrecognised keys."""
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported by a vendor for a single call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def of(cls, prompt_tokens: int, completion_tokens: int, total_tokens: int | None = None) -> TokenUsage:
        """Build usage, deriving the total when the vendor omits it."""
        if not total_tokens:
            total_tokens = prompt_tokens + completion_tokens
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
        )


@dataclass(frozen=True)
class SideEffectOutcome:
    """Outcome of a best-effort side effect attached to a generation."""

    name: str
    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class FailedAttempt:
    """One provider that did not produce a result during a generation."""

    provider: str
    error: str
    skipped: bool = False


@dataclass
class GenerationResult:
    """Uniform response returned by every adapter and by the manager."""

    text: str
    provider: str
    model: str
    usage: TokenUsage | None = None
    raw: Any = None
    cost: float = 0.0
    latency_ms: float = 0.0
    fallback_used: bool = False
    original_provider: str | None = None
    side_effects: tuple[SideEffectOutcome, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HealthRecord:
    """Last observed health verdict for a provider."""

    healthy: bool
    checked_at: float
