"""Cost calculation and per-provider cost ledgers."""

from __future__ import annotations

import calendar
import logging
import math
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from llm_router.pricing import PricingTable
from llm_router.types import TokenUsage

logger = logging.getLogger(__name__)

# Joins provider name and period in ledger keys. Provider names may not contain it.
LEDGER_SEPARATOR = ":"

_PROMPT_KEYS = ("prompt_tokens", "promptTokens", "input_tokens", "inputTokens")
_COMPLETION_KEYS = ("completion_tokens", "completionTokens", "output_tokens", "outputTokens")

_DEFAULT_PRICING = PricingTable()

UsageLike = TokenUsage | Mapping[str, Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_count(value: object) -> int:
    try:
        count = float(value or 0)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(count):
        return 0
    return max(int(count), 0)


def token_counts(usage: UsageLike | None) -> tuple[int, int]:
    """Return ``(input_tokens, output_tokens)`` from any supported usage shape."""
    if usage is None:
        return 0, 0
    if isinstance(usage, TokenUsage):
        return _as_count(usage.prompt_tokens), _as_count(usage.completion_tokens)
    if isinstance(usage, Mapping):
        prompt = next((usage[k] for k in _PROMPT_KEYS if usage.get(k)), 0)
        completion = next((usage[k] for k in _COMPLETION_KEYS if usage.get(k)), 0)
        return _as_count(prompt), _as_count(completion)
    return 0, 0


def calculate_cost(
    provider: str,
    usage: UsageLike | None,
    pricing: PricingTable | None = None,
) -> float:
    """Calculate USD cost of a single call.

    Returns 0.0 when the provider has no pricing entry or usage is missing.
    Never raises.
    """
    table = pricing or _DEFAULT_PRICING
    price = table.get(provider)
    if price is None or usage is None:
        return 0.0
    input_tokens, output_tokens = token_counts(usage)
    input_cost = input_tokens / 1_000_000 * price.input
    output_cost = output_tokens / 1_000_000 * price.output
    return input_cost + output_cost


def ledger_key(provider: str, period: str) -> str:
    return f"{provider}{LEDGER_SEPARATOR}{period}"


def split_ledger_key(key: str) -> tuple[str, str]:
    """Split a ledger key on the first separator only."""
    provider, _, period = key.partition(LEDGER_SEPARATOR)
    return provider, period


class CostTracker:
    """Accumulates cost per provider by UTC day, UTC month and all-time.

    State lives in memory only and is lost on restart.
    """

    def __init__(
        self,
        pricing: PricingTable | None = None,
        retention_days: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.pricing = pricing or PricingTable()
        self._retention_days = retention_days
        self._clock = clock
        self._daily: dict[str, float] = {}
        self._monthly: dict[str, float] = {}
        self._total: dict[str, float] = {}

    def calculate_cost(self, provider: str, usage: UsageLike | None) -> float:
        """Calculate cost against this tracker's pricing table."""
        return calculate_cost(provider, usage, self.pricing)

    def record_cost(self, provider: str, usage: UsageLike | None, cost: float) -> None:
        """Add *cost* to today's, this month's and the all-time ledger."""
        date = self._today()
        month = date[:7]

        daily_key = ledger_key(provider, date)
        self._daily[daily_key] = self._daily.get(daily_key, 0.0) + cost

        monthly_key = ledger_key(provider, month)
        self._monthly[monthly_key] = self._monthly.get(monthly_key, 0.0) + cost

        self._total[provider] = self._total.get(provider, 0.0) + cost

        if self._retention_days is not None:
            self._prune_daily()

        logger.debug(
            "Cost recorded",
            extra={
                "provider": provider,
                "cost_usd": cost,
                "input_tokens": token_counts(usage)[0],
                "output_tokens": token_counts(usage)[1],
            },
        )

    def _today(self) -> str:
        return self._clock().astimezone(timezone.utc).date().isoformat()

    def _prune_daily(self) -> None:
        today = self._clock().astimezone(timezone.utc).date()
        cutoff = (today - timedelta(days=self._retention_days or 0)).isoformat()
        for key in [k for k in self._daily if split_ledger_key(k)[1] < cutoff]:
            del self._daily[key]

    def get_costs(self, period: str = "daily") -> dict[str, list[dict[str, Any]]]:
        """Return ``{provider: [{"date": period, "cost": usd}, ...]}``.

        ``period`` is ``"daily"`` or ``"monthly"``; anything else yields ``{}``.
        """
        ledger = {"daily": self._daily, "monthly": self._monthly}.get(period, {})
        costs: dict[str, list[dict[str, Any]]] = {}
        for key, value in ledger.items():
            provider, date = split_ledger_key(key)
            costs.setdefault(provider, []).append({"date": date, "cost": value})
        return costs

    def get_summary(self) -> dict[str, dict[str, float]]:
        """Return total, today and this-month cost per provider."""
        today = self._today()
        this_month = today[:7]

        summary: dict[str, dict[str, float]] = {
            "total": dict(self._total),
            "today": {},
            "this_month": {},
        }
        for key, cost in self._daily.items():
            provider, date = split_ledger_key(key)
            if date == today:
                summary["today"][provider] = cost
        for key, cost in self._monthly.items():
            provider, month = split_ledger_key(key)
            if month == this_month:
                summary["this_month"][provider] = cost
        return summary

    def get_projected_monthly_cost(self) -> dict[str, float]:
        """Linear projection of this month's cost from today's spend.

        ``today / day_of_month * days_in_month`` for every provider that
        spent something today.
        """
        now = self._clock().astimezone(timezone.utc)
        days_in_month = calendar.monthrange(now.year, now.month)[1]

        projected: dict[str, float] = {}
        for provider, today_cost in self.get_summary()["today"].items():
            if today_cost > 0:
                projected[provider] = today_cost / now.day * days_in_month
        return projected

    def get_pricing(self) -> dict[str, dict[str, float]]:
        """Return the pricing table in use."""
        return self.pricing.as_dict()

    def update_pricing(self, provider: str, input_per_1m: float, output_per_1m: float) -> None:
        """Change one provider's pricing at runtime."""
        self.pricing.update(provider, input_per_1m, output_per_1m)
