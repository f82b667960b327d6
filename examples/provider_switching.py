"""Demonstrates strategies, preferred providers and fallback.

Switch strategy without code changes:

    LLM_ROUTER_STRATEGY=round-robin python examples/provider_switching.py
    LLM_ROUTER_FALLBACK_ORDER='["claude","gemini","chatgpt"]' python examples/provider_switching.py
"""

import asyncio

from llm_router import AllProvidersFailedError, ProviderManager, RouterConfig

SYSTEM_PROMPT = "You are a concise assistant."
MESSAGES = [{"role": "user", "content": "Name one prime number greater than 10."}]


async def main() -> None:
    config = RouterConfig(strategy="round-robin")
    async with ProviderManager(config=config) as manager:
        print(f"Available: {', '.join(manager.list_providers())}")

        for _ in range(len(manager.list_providers())):
            result = await manager.generate(SYSTEM_PROMPT, MESSAGES)  # type: ignore[arg-type]
            note = f" (fallback from {result.original_provider})" if result.fallback_used else ""
            print(f"[{result.provider}]{note} {result.text}")

        # Bypass the strategy for one request
        preferred = manager.list_providers()[-1]
        result = await manager.generate(
            SYSTEM_PROMPT,
            MESSAGES,  # type: ignore[arg-type]
            preferred_provider=preferred,
        )
        print(f"[preferred {preferred}] served by {result.provider}")

        try:
            await manager.generate(SYSTEM_PROMPT, MESSAGES)  # type: ignore[arg-type]
        except AllProvidersFailedError as exc:
            for attempt in exc.attempts:
                status = "skipped" if attempt.skipped else "failed"
                print(f"  {attempt.provider}: {status} ({attempt.error})")

        for name, info in manager.get_providers_info().items():
            print(
                f"{name}: {info['health_state']}, "
                f"success rate {info['success_rate']:.0%}, "
                f"avg {info['avg_latency_ms']:.0f}ms"
            )


if __name__ == "__main__":
    asyncio.run(main())
