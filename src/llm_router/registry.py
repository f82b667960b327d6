"""Provider registry: maps provider names to factory functions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from llm_router.cost import LEDGER_SEPARATOR
from llm_router.exceptions import ProviderInitError, ProviderNotFoundError

if TYPE_CHECKING:
    from llm_router.config import ProviderSettings
    from llm_router.providers.base import LLMProvider

logger = logging.getLogger(__name__)

# Global registry: name → factory(settings) → provider instance
_PROVIDERS: dict[str, Callable[["ProviderSettings"], "LLMProvider"]] = {}


def register_provider(
    name: str,
    factory: Callable[["ProviderSettings"], "LLMProvider"],
) -> None:
    """Register a provider factory.

    Args:
        name: Provider name (e.g. "gemini", "chatgpt", "claude").
        factory: Callable that takes ProviderSettings and returns an LLMProvider.

    Raises:
        ValueError: If the name is empty or contains the cost ledger separator.
    """
    if not name or LEDGER_SEPARATOR in name:
        msg = f"Invalid provider name {name!r}: must be non-empty and not contain {LEDGER_SEPARATOR!r}"
        raise ValueError(msg)
    _PROVIDERS[name] = factory
    logger.debug("Registered LLM provider: %s", name)


def build_provider(name: str, settings: "ProviderSettings") -> "LLMProvider":
    """Build a provider instance from its settings.

    Triggers lazy registration of built-in providers on first call.

    Raises:
        ProviderNotFoundError: If the provider name is not registered.
        ProviderInitError: If the provider factory raises an error.
    """
    _ensure_builtins_registered()

    factory = _PROVIDERS.get(name)
    if factory is None:
        raise ProviderNotFoundError(name, _PROVIDERS)

    try:
        return factory(settings)
    except ProviderInitError:
        raise
    except Exception as exc:
        raise ProviderInitError(name, str(exc)) from exc


def list_providers() -> list[str]:
    """Return names of all registered providers."""
    _ensure_builtins_registered()
    return list(_PROVIDERS.keys())


# ── Lazy Registration ───────────────────────────────────────────

_builtins_registered = False


def _ensure_builtins_registered() -> None:
    """Lazily register built-in providers on first use.

    This avoids importing vendor SDKs at module load time. Providers whose
    SDK is not installed are simply not registered.
    """
    global _builtins_registered  # noqa: PLW0603
    if _builtins_registered:
        return
    _builtins_registered = True

    # Gemini
    try:
        from llm_router.providers.gemini import GeminiProvider

        register_provider("gemini", GeminiProvider.from_settings)
    except ImportError:
        logger.debug("gemini extras not installed, provider not available")

    # ChatGPT
    try:
        from llm_router.providers.openai import ChatGPTProvider

        register_provider("chatgpt", ChatGPTProvider.from_settings)
    except ImportError:
        logger.debug("openai extras not installed, provider not available")

    # Claude
    try:
        from llm_router.providers.anthropic import ClaudeProvider

        register_provider("claude", ClaudeProvider.from_settings)
    except ImportError:
        logger.debug("anthropic extras not installed, provider not available")
