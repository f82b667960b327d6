"""Tests for HealthTracker and UsageStats."""

from __future__ import annotations

import pytest

from llm_router.health import HealthTracker
from llm_router.stats import UsageStats


@pytest.mark.unit
class TestHealthTracker:
    def test_unknown_is_healthy(self, clock) -> None:  # type: ignore[no-untyped-def]
        health = HealthTracker(clock=clock)
        assert health.is_healthy("gemini") is True
        assert health.state("gemini") == "unknown"

    def test_fresh_unhealthy(self, clock) -> None:  # type: ignore[no-untyped-def]
        health = HealthTracker(clock=clock)
        health.mark_unhealthy("gemini")
        clock.advance(299)
        assert health.is_healthy("gemini") is False
        assert health.state("gemini") == "unhealthy"

    def test_stale_unhealthy_reads_healthy(self, clock) -> None:  # type: ignore[no-untyped-def]
        health = HealthTracker(clock=clock)
        health.mark_unhealthy("gemini")
        clock.advance(5 * 60 + 0.001)
        assert health.is_healthy("gemini") is True
        assert health.state("gemini") == "healthy"
        assert health.get("gemini").healthy is False  # type: ignore[union-attr]

    def test_stale_healthy_stays_healthy(self, clock) -> None:  # type: ignore[no-untyped-def]
        health = HealthTracker(clock=clock)
        health.mark_healthy("claude")
        clock.advance(3600)
        assert health.is_healthy("claude") is True

    def test_recovery(self, clock) -> None:  # type: ignore[no-untyped-def]
        health = HealthTracker(clock=clock)
        health.mark_unhealthy("chatgpt")
        health.mark_healthy("chatgpt")
        assert health.is_healthy("chatgpt") is True

    def test_custom_ttl(self, clock) -> None:  # type: ignore[no-untyped-def]
        health = HealthTracker(ttl_seconds=10, clock=clock)
        health.mark_unhealthy("chatgpt")
        clock.advance(11)
        assert health.is_healthy("chatgpt") is True


@pytest.mark.unit
class TestUsageStats:
    def test_untried_provider(self) -> None:
        stats = UsageStats()
        assert stats.success_rate("gemini") == 1.0
        assert stats.avg_latency_ms("gemini") == 0.0
        assert stats.performance_score("gemini") == 1.0

    def test_rates_and_latency(self) -> None:
        stats = UsageStats()
        stats.record_success("gemini", 100.0)
        stats.record_success("gemini", 300.0)
        stats.record_error("gemini")
        stats.record_error("gemini")

        assert stats.success_count("gemini") == 2
        assert stats.error_count("gemini") == 2
        assert stats.success_rate("gemini") == pytest.approx(0.5)
        assert stats.avg_latency_ms("gemini") == pytest.approx(200.0)

    def test_latency_penalty_is_capped(self) -> None:
        stats = UsageStats()
        stats.record_success("claude", 60_000.0)
        assert stats.performance_score("claude") == pytest.approx(0.5)

    def test_request_counter(self) -> None:
        stats = UsageStats()
        stats.record_request()
        assert stats.record_request() == 2
        assert stats.total_requests == 2
