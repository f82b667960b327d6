"""Per-provider token pricing, loadable from a JSON file."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

logger = logging.getLogger(__name__)


class ProviderPricing(BaseModel):
    """USD per 1 million tokens."""

    input: float = Field(ge=0)
    output: float = Field(ge=0)


_PRICING_FILE = TypeAdapter(dict[str, ProviderPricing])

# ── Built-in defaults (USD per 1 million tokens) ───────────────
DEFAULT_PRICING: dict[str, ProviderPricing] = {
    "gemini": ProviderPricing(input=0.125, output=0.375),
    "chatgpt": ProviderPricing(input=0.150, output=0.600),
    "claude": ProviderPricing(input=0.300, output=1.500),
}


class PricingTable:
    """Pricing lookup used by cost calculation.

    Starts from :data:`DEFAULT_PRICING`. When a ``path`` is given, its
    entries are layered on top and :meth:`reload` re-reads the file so
    vendor price changes do not need a redeploy.

    File format::

        {"gemini": {"input": 0.1, "output": 0.4}, "claude": {...}}
    """

    def __init__(
        self,
        prices: dict[str, ProviderPricing] | None = None,
        path: Path | str | None = None,
    ) -> None:
        self._base = dict(DEFAULT_PRICING if prices is None else prices)
        self._path = Path(path) if path is not None else None
        self._prices = dict(self._base)
        if self._path is not None:
            self.reload()

    @property
    def path(self) -> Path | None:
        return self._path

    def reload(self) -> None:
        """Re-read the pricing file, replacing previously loaded entries.

        Raises:
            FileNotFoundError: If the configured file does not exist.
            pydantic.ValidationError: If the file content is malformed.
        """
        if self._path is None:
            return
        loaded = _PRICING_FILE.validate_json(self._path.read_bytes())
        self._prices = {**self._base, **loaded}
        logger.info(
            "Pricing table loaded",
            extra={"path": str(self._path), "providers": sorted(self._prices)},
        )

    def get(self, provider: str) -> ProviderPricing | None:
        """Return pricing for a provider, or None if unknown."""
        return self._prices.get(provider)

    def update(self, provider: str, input_per_1m: float, output_per_1m: float) -> None:
        """Register or update pricing for one provider."""
        self._prices[provider] = ProviderPricing(input=input_per_1m, output=output_per_1m)

    def as_dict(self) -> dict[str, dict[str, float]]:
        """Return a plain copy of the table."""
        return {name: price.model_dump() for name, price in self._prices.items()}
