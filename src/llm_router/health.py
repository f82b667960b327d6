"""Per-provider health records with a staleness window."""

from __future__ import annotations

import time
from collections.abc import Callable

from llm_router.types import HealthRecord

DEFAULT_HEALTH_TTL_SECONDS = 5 * 60


class HealthTracker:
    """Caches the last healthy/unhealthy verdict for each provider.

    A provider without a record, or whose record is older than ``ttl_seconds``,
    reads as healthy so it gets retried.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_HEALTH_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._records: dict[str, HealthRecord] = {}

    def mark_healthy(self, provider: str) -> None:
        self._records[provider] = HealthRecord(healthy=True, checked_at=self._clock())

    def mark_unhealthy(self, provider: str) -> None:
        self._records[provider] = HealthRecord(healthy=False, checked_at=self._clock())

    def get(self, provider: str) -> HealthRecord | None:
        return self._records.get(provider)

    def is_stale(self, record: HealthRecord) -> bool:
        return self._clock() - record.checked_at > self._ttl

    def is_healthy(self, provider: str) -> bool:
        """Selection-time health: stored verdict if fresh, otherwise healthy."""
        record = self._records.get(provider)
        if record is None or self.is_stale(record):
            return True
        return record.healthy

    def state(self, provider: str) -> str:
        """Return ``"unknown"``, ``"healthy"`` or ``"unhealthy"``."""
        record = self._records.get(provider)
        if record is None:
            return "unknown"
        return "healthy" if record.healthy or self.is_stale(record) else "unhealthy"
