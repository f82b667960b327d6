"""Per-provider usage counters."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProviderCounters:
    success_count: int = 0
    error_count: int = 0
    total_latency_ms: float = 0.0


class UsageStats:
    """Success/error counts and cumulative latency, kept for the process lifetime."""

    def __init__(self) -> None:
        self.total_requests = 0
        self._counters: dict[str, ProviderCounters] = {}

    def _for(self, provider: str) -> ProviderCounters:
        return self._counters.setdefault(provider, ProviderCounters())

    def record_request(self) -> int:
        self.total_requests += 1
        return self.total_requests

    def record_success(self, provider: str, latency_ms: float) -> None:
        counters = self._for(provider)
        counters.success_count += 1
        counters.total_latency_ms += latency_ms

    def record_error(self, provider: str) -> None:
        self._for(provider).error_count += 1

    def success_count(self, provider: str) -> int:
        return self._counters.get(provider, ProviderCounters()).success_count

    def error_count(self, provider: str) -> int:
        return self._counters.get(provider, ProviderCounters()).error_count

    def success_rate(self, provider: str) -> float:
        """Successes over attempts; 1.0 when the provider was never tried."""
        counters = self._counters.get(provider)
        if counters is None:
            return 1.0
        attempts = counters.success_count + counters.error_count
        return counters.success_count / attempts if attempts else 1.0

    def avg_latency_ms(self, provider: str) -> float:
        """Mean latency of successful calls; 0.0 with none."""
        counters = self._counters.get(provider)
        if counters is None or counters.success_count == 0:
            return 0.0
        return counters.total_latency_ms / counters.success_count

    def performance_score(self, provider: str) -> float:
        """``success_rate * (1 - min(avg_latency_ms / 5000, 0.5))``."""
        penalty = min(self.avg_latency_ms(provider) / 5000, 0.5)
        return self.success_rate(provider) * (1 - penalty)
