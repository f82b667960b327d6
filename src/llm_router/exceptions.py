"""Exception hierarchy for llm-router."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from llm_router.types import FailedAttempt


class RouterError(Exception):
    """Base exception for all llm-router errors."""


class ConfigurationError(RouterError):
    """Raised when the router cannot be built from its configuration."""


class NoProvidersConfiguredError(ConfigurationError):
    """Raised when no provider could be initialised."""

    def __init__(self) -> None:
        super().__init__(
            "No provider configured. Set at least one of GOOGLE_AI_API_KEY, "
            "OPENAI_API_KEY or CLAUDE_API_KEY, or pass provider settings explicitly."
        )


class ProviderNotFoundError(RouterError):
    """Raised when the requested provider is not registered."""

    def __init__(self, provider: str, available: Iterable[str] = ()) -> None:
        self.provider = provider
        self.available = tuple(available)
        listed = ", ".join(self.available) or "none"
        super().__init__(f"Provider '{provider}' is not registered. Available providers: {listed}.")


class ProviderInitError(RouterError):
    """Raised when a provider fails to initialize."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        super().__init__(f"Failed to initialize provider '{provider}': {reason}")


class ProviderError(RouterError):
    """Raised by an adapter when a vendor call produced no usable result."""

    def __init__(self, provider: str, original: Exception) -> None:
        self.provider = provider
        self.original = original
        super().__init__(f"Provider '{provider}' error: {original}")


class EmptyResponseError(ProviderError):
    """Raised when the vendor returned no text at all."""

    def __init__(self, provider: str) -> None:
        super().__init__(provider, ValueError("vendor returned an empty response"))


class AllProvidersFailedError(RouterError):
    """Raised when the primary provider and every fallback candidate failed."""

    def __init__(self, attempts: Sequence[FailedAttempt] = ()) -> None:
        self.attempts = tuple(attempts)
        tried = [a.provider for a in self.attempts if not a.skipped]
        detail = f" Tried: {', '.join(tried)}." if tried else ""
        super().__init__(f"All providers failed. Check provider configuration.{detail}")
