"""Connectivity check for every configured provider.

    python examples/check_providers.py
"""

import asyncio
import sys

from llm_router import NoProvidersConfiguredError, ProviderManager


async def main() -> int:
    try:
        manager = ProviderManager()
    except NoProvidersConfiguredError as exc:
        print(exc)
        return 1

    async with manager:
        results = await manager.test_all_providers()

    for name, outcome in results.items():
        mark = "ok" if outcome["healthy"] else f"FAILED ({outcome['error']})"
        print(f"{name:10s} {mark}")
    return 0 if all(o["healthy"] for o in results.values()) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
