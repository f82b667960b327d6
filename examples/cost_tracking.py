"""Demonstrates cost tracking and externalized pricing."""

import asyncio
import json
import tempfile
from pathlib import Path

from llm_router import ProviderManager, RouterConfig


async def main() -> None:
    # Override one vendor's prices; the rest keep the built-in defaults
    pricing_file = Path(tempfile.gettempdir()) / "llm-router-pricing.json"
    pricing_file.write_text(json.dumps({"gemini": {"input": 0.10, "output": 0.40}}))

    config = RouterConfig(pricing_file=pricing_file)
    async with ProviderManager(config=config) as manager:
        print("Pricing (USD per 1M tokens):")
        for provider, prices in manager.cost_tracker.get_pricing().items():
            print(f"  {provider}: in {prices['input']}, out {prices['output']}")

        for question in ("What is 2+2?", "Name a colour.", "Spell 'cat' backwards."):
            result = await manager.generate(
                "Answer in a single word.",
                [{"role": "user", "content": question}],
            )
            print(f"{result.provider}: {result.text!r} cost ${result.cost:.8f}")

        stats = manager.get_cost_stats()
        print(f"Total by provider: {stats['summary']['total']}")
        print(f"Today: {stats['summary']['today']}")
        print(f"Projected this month: {stats['projected']}")
        print(f"Daily ledger: {stats['daily']}")

        # Prices changed at the vendor: edit the file and reload, no restart
        pricing_file.write_text(json.dumps({"gemini": {"input": 0.075, "output": 0.30}}))
        manager.reload_pricing()
        print(f"Reloaded gemini pricing: {manager.cost_tracker.get_pricing()['gemini']}")


if __name__ == "__main__":
    asyncio.run(main())
