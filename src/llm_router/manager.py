"""ProviderManager: the single class consumers import and use."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from llm_router.config import BUILTIN_PROVIDERS, RouterConfig
from llm_router.cost import LEDGER_SEPARATOR, CostTracker, UsageLike
from llm_router.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    NoProvidersConfiguredError,
    ProviderInitError,
    ProviderNotFoundError,
)
from llm_router.health import HealthTracker
from llm_router.observability.logging import configure_logging
from llm_router.observability.tracing import configure_tracing, traced_generation
from llm_router.pricing import PricingTable
from llm_router.providers.base import LLMProvider, probe_connection
from llm_router.registry import build_provider
from llm_router.stats import UsageStats
from llm_router.types import (
    FailedAttempt,
    GenerationOptions,
    GenerationResult,
    Message,
    SideEffectOutcome,
)

logger = logging.getLogger(__name__)


class ProviderManager:
    """Routes generations across providers with health-aware fallback.

    Usage:
        # Reads LLM_ROUTER_* and vendor env vars automatically
        manager = ProviderManager()

        # Or with explicit config
        manager = ProviderManager(config=RouterConfig(strategy="round-robin"))

        # Or with injected providers (for testing)
        manager = ProviderManager(providers={"gemini": fake})

        result = await manager.generate(
            "You are a helpful assistant.",
            [{"role": "user", "content": "Hello"}],
        )
        print(result.text, result.provider, result.fallback_used, result.cost)
    """

    def __init__(
        self,
        config: RouterConfig | None = None,
        providers: Mapping[str, LLMProvider] | None = None,
        cost_tracker: CostTracker | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RouterConfig()
        self.strategy = self._config.strategy
        self.fallback_order = list(dict.fromkeys(self._config.fallback_order))

        configure_logging(
            level=self._config.log_level,
            fmt=self._config.log_format,
        )
        if self._config.trace_enabled:
            configure_tracing(
                exporter=self._config.trace_exporter,
                endpoint=self._config.trace_endpoint,
                service_name=self._config.trace_service_name,
            )

        self._stats = UsageStats()
        self._health = HealthTracker(ttl_seconds=self._config.health_ttl_seconds, clock=clock)
        self._cost_tracker = cost_tracker or CostTracker(
            pricing=PricingTable(path=self._config.pricing_file),
            retention_days=self._config.cost_retention_days,
        )
        self._round_robin_cursor = 0

        if providers is not None:
            self._providers: dict[str, LLMProvider] = dict(providers)
            _check_names(self._providers)
        else:
            self._providers = self._initialize_providers()

        if not self._providers:
            raise NoProvidersConfiguredError()

        self.default_provider = self._resolve_default(self._config.default_provider)

        logger.info(
            "%d provider(s) available: %s",
            len(self._providers),
            ", ".join(self._providers),
            extra={"strategy": self.strategy, "default_provider": self.default_provider},
        )

    def _initialize_providers(self) -> dict[str, LLMProvider]:
        """Build every built-in provider that is enabled and has credentials."""
        providers: dict[str, LLMProvider] = {}
        for name in BUILTIN_PROVIDERS:
            settings = self._config.resolve_provider(name)
            if settings is None:
                continue
            try:
                providers[name] = build_provider(name, settings)
            except (ProviderInitError, ProviderNotFoundError) as exc:
                logger.warning("Provider %s not configured: %s", name, exc)
                continue
            logger.info("Provider %s initialized", name)
        return providers

    def _resolve_default(self, configured: str) -> str:
        if configured in self._providers:
            return configured
        candidates = [n for n in self.fallback_order if n in self._providers] or list(self._providers)
        logger.warning(
            "Default provider %s is not available, using %s",
            configured,
            candidates[0],
        )
        return candidates[0]

    # ── Generation ──────────────────────────────────────────────

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | Mapping[str, Any] | None = None,
        preferred_provider: str | None = None,
    ) -> GenerationResult:
        """Generate a reply, falling back across providers on failure.

        Args:
            system_prompt: System instruction.
            messages: Conversation history, oldest first.
            options: GenerationOptions or a plain mapping (unknown keys ignored).
            preferred_provider: Bypass the strategy and try this provider first.

        Returns:
            GenerationResult annotated with cost, ``fallback_used`` and
            ``original_provider``.

        Raises:
            ProviderNotFoundError: If ``preferred_provider`` is not registered.
            AllProvidersFailedError: If the target and every fallback failed.
        """
        self._stats.record_request()
        opts = options if isinstance(options, GenerationOptions) else GenerationOptions.from_mapping(options)

        target = preferred_provider or self._select_provider()
        provider = self._providers.get(target)
        if provider is None:
            raise ProviderNotFoundError(target, self._providers)

        if not self._health.is_healthy(target):
            logger.warning("Provider %s is unhealthy, using fallback", target)
            skipped = [FailedAttempt(target, "marked unhealthy", skipped=True)]
            return await self._generate_with_fallback(system_prompt, messages, opts, target, skipped)

        try:
            response, latency_ms = await self._call(target, provider, system_prompt, messages, opts)
        except Exception as exc:
            logger.warning(
                "Provider %s failed: %s",
                target,
                exc,
                extra={"provider": target, "error_type": type(exc).__name__},
            )
            self._record_failure(target)
            failed = [FailedAttempt(target, _describe(exc))]
            return await self._generate_with_fallback(
                system_prompt, messages, opts, target, failed, last_error=exc
            )
        return self._complete(target, response, latency_ms)

    async def _generate_with_fallback(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions,
        excluded: str,
        attempts: list[FailedAttempt],
        last_error: Exception | None = None,
    ) -> GenerationResult:
        """Try the fallback order one provider at a time, skipping *excluded*."""
        for name in self.fallback_candidates(excluded):
            provider = self._providers[name]
            if not self._health.is_healthy(name):
                attempts.append(FailedAttempt(name, "marked unhealthy", skipped=True))
                continue

            logger.info("Trying fallback provider %s", name, extra={"original_provider": excluded})
            try:
                response, latency_ms = await self._call(
                    name,
                    provider,
                    system_prompt,
                    messages,
                    options,
                    fallback_used=True,
                )
            except Exception as exc:
                logger.warning(
                    "Fallback provider %s failed: %s",
                    name,
                    exc,
                    extra={"provider": name, "error_type": type(exc).__name__},
                )
                self._record_failure(name)
                attempts.append(FailedAttempt(name, _describe(exc)))
                last_error = exc
            else:
                return self._complete(name, response, latency_ms, original_provider=excluded)

        logger.error(
            "All providers failed",
            extra={"attempts": [(a.provider, a.error, a.skipped) for a in attempts]},
        )
        raise AllProvidersFailedError(attempts) from last_error

    def fallback_candidates(self, excluded: str | None) -> list[str]:
        """Registered providers in fallback order, without *excluded*."""
        return [n for n in self.fallback_order if n != excluded and n in self._providers]

    async def _call(
        self,
        name: str,
        provider: LLMProvider,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions,
        fallback_used: bool = False,
    ) -> tuple[GenerationResult, float]:
        """One vendor call. Raises only what the adapter raised."""
        start = time.monotonic()
        async with traced_generation(name, provider.model, fallback=fallback_used) as span_data:
            response = await provider.generate(system_prompt, messages, options)
            latency_ms = (time.monotonic() - start) * 1000
            span_data["result"] = response
        return response, latency_ms

    def _complete(
        self,
        name: str,
        response: GenerationResult,
        latency_ms: float,
        original_provider: str | None = None,
    ) -> GenerationResult:
        """Account for a successful vendor call and annotate the result."""
        fallback_used = original_provider is not None
        self._health.mark_healthy(name)
        self._stats.record_success(name, latency_ms)

        cost = self._cost_tracker.calculate_cost(name, response.usage)
        side_effects = (self._record_cost(name, response.usage, cost),)

        result = replace(
            response,
            provider=name,
            cost=cost,
            latency_ms=latency_ms,
            fallback_used=fallback_used,
            original_provider=original_provider,
            side_effects=side_effects,
        )

        logger.info(
            "LLM generation completed",
            extra={
                "provider": name,
                "model": result.model,
                "prompt_tokens": result.usage.prompt_tokens if result.usage else 0,
                "completion_tokens": result.usage.completion_tokens if result.usage else 0,
                "cost_usd": cost,
                "latency_ms": round(latency_ms, 1),
                "fallback_used": fallback_used,
            },
        )
        return result

    def _record_cost(self, name: str, usage: UsageLike | None, cost: float) -> SideEffectOutcome:
        """Best-effort cost ledger write; failure never fails the generation."""
        if usage is None:
            return SideEffectOutcome(name="cost", ok=True)
        try:
            self._cost_tracker.record_cost(name, usage, cost)
        except Exception as exc:
            logger.warning("Cost recording failed for %s: %s", name, exc, exc_info=True)
            return SideEffectOutcome(name="cost", ok=False, error=_describe(exc))
        return SideEffectOutcome(name="cost", ok=True)

    def _record_failure(self, name: str) -> None:
        self._health.mark_unhealthy(name)
        self._stats.record_error(name)

    # ── Selection ───────────────────────────────────────────────

    def _select_provider(self) -> str:
        if self.strategy == "round-robin":
            return self._select_round_robin()
        if self.strategy == "best-performance":
            return self._select_best_performance()
        return self.default_provider

    def _select_round_robin(self) -> str:
        names = list(self._providers)
        name = names[self._round_robin_cursor % len(names)]
        self._round_robin_cursor += 1
        return name

    def _select_best_performance(self) -> str:
        """Highest score among healthy providers; the default wins ties."""
        best = self.default_provider
        best_score = (
            self._stats.performance_score(best) if self._health.is_healthy(best) else -1.0
        )
        for name in self._providers:
            if name == self.default_provider or not self._health.is_healthy(name):
                continue
            score = self._stats.performance_score(name)
            if score > best_score:
                best, best_score = name, score
        return best

    # ── Introspection ───────────────────────────────────────────

    def get_provider(self, name: str) -> LLMProvider | None:
        return self._providers.get(name)

    def list_providers(self) -> list[str]:
        """Names of the providers available to this manager."""
        return list(self._providers)

    def get_providers_info(self) -> dict[str, dict[str, Any]]:
        """Model, health and performance for every provider."""
        info: dict[str, dict[str, Any]] = {}
        for name, provider in self._providers.items():
            info[name] = {
                **provider.info(),
                "healthy": self._health.is_healthy(name),
                "health_state": self._health.state(name),
                "success_rate": self._stats.success_rate(name),
                "avg_latency_ms": self._stats.avg_latency_ms(name),
                "success_count": self._stats.success_count(name),
                "error_count": self._stats.error_count(name),
            }
        return info

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_requests": self._stats.total_requests,
            "providers": self.get_providers_info(),
        }

    def get_cost_stats(self) -> dict[str, Any]:
        """Summary, projection and per-period ledgers."""
        return {
            "summary": self._cost_tracker.get_summary(),
            "projected": self._cost_tracker.get_projected_monthly_cost(),
            "daily": self._cost_tracker.get_costs("daily"),
            "monthly": self._cost_tracker.get_costs("monthly"),
        }

    def reload_pricing(self) -> None:
        """Re-read the pricing file, if one is configured."""
        self._cost_tracker.pricing.reload()

    @property
    def cost_tracker(self) -> CostTracker:
        return self._cost_tracker

    @property
    def health(self) -> HealthTracker:
        return self._health

    # ── Diagnostics ─────────────────────────────────────────────

    async def test_all_providers(self) -> dict[str, dict[str, Any]]:
        """Probe every provider with a trivial prompt and record health.

        Returns:
            ``{name: {"healthy": bool, "error": str | None}}``
        """
        results: dict[str, dict[str, Any]] = {}
        for name, provider in self._providers.items():
            try:
                healthy = await probe_connection(provider)
                error = None if healthy else "empty response"
            except Exception as exc:
                logger.warning("Connectivity probe failed for %s: %s", name, exc)
                healthy, error = False, _describe(exc)

            if healthy:
                self._health.mark_healthy(name)
            else:
                self._health.mark_unhealthy(name)
            results[name] = {"healthy": healthy, "error": error}
        return results

    async def close(self) -> None:
        """Clean up provider resources."""
        for provider in self._providers.values():
            await provider.close()

    async def __aenter__(self) -> ProviderManager:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *exc: object) -> None:
        """Async context manager exit, closes providers."""
        await self.close()


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


def _check_names(providers: Mapping[str, LLMProvider]) -> None:
    """Injected providers follow the same naming rule as registered ones."""
    for name in providers:
        if not name or LEDGER_SEPARATOR in name:
            msg = f"Invalid provider name {name!r}: must be non-empty and not contain {LEDGER_SEPARATOR!r}"
            raise ConfigurationError(msg)
