"""llm-router: health-aware routing and fallback across hosted LLM providers.

Usage:
    from llm_router import ProviderManager, RouterConfig

    manager = ProviderManager()  # reads LLM_ROUTER_* and vendor env vars
    result = await manager.generate(system_prompt, messages)
"""

from __future__ import annotations

from llm_router.config import ProviderSettings, RouterConfig
from llm_router.cost import CostTracker, calculate_cost
from llm_router.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    EmptyResponseError,
    NoProvidersConfiguredError,
    ProviderError,
    ProviderInitError,
    ProviderNotFoundError,
    RouterError,
)
from llm_router.health import HealthTracker
from llm_router.manager import ProviderManager
from llm_router.pricing import PricingTable
from llm_router.providers.base import LLMProvider
from llm_router.registry import build_provider, list_providers, register_provider
from llm_router.types import (
    FailedAttempt,
    GenerationOptions,
    GenerationResult,
    Message,
    SideEffectOutcome,
    TokenUsage,
)

__all__ = [
    # Core
    "ProviderManager",
    "RouterConfig",
    "ProviderSettings",
    # Types
    "GenerationOptions",
    "GenerationResult",
    "Message",
    "TokenUsage",
    "FailedAttempt",
    "SideEffectOutcome",
    # Provider
    "LLMProvider",
    "register_provider",
    "build_provider",
    "list_providers",
    # Cost & health
    "CostTracker",
    "PricingTable",
    "calculate_cost",
    "HealthTracker",
    # Exceptions
    "RouterError",
    "ConfigurationError",
    "NoProvidersConfiguredError",
    "ProviderNotFoundError",
    "ProviderInitError",
    "ProviderError",
    "EmptyResponseError",
    "AllProvidersFailedError",
]
