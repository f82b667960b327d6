"""Basic usage of llm-router."""

import asyncio

from llm_router import ProviderManager


async def main() -> None:
    """Demonstrate a single routed generation."""
    # ProviderManager reads GOOGLE_AI_API_KEY / OPENAI_API_KEY / CLAUDE_API_KEY
    # and LLM_ROUTER_* env vars automatically
    async with ProviderManager() as manager:
        result = await manager.generate(
            "You are a helpful assistant. Answer in one sentence.",
            [{"role": "user", "content": "What is the capital of France?"}],
            {"temperature": 0.2, "maxTokens": 100},
        )
        print(f"Answer: {result.text}")
        print(f"Provider: {result.provider} ({result.model})")
        if result.usage is not None:
            print(f"Tokens: {result.usage.total_tokens}")
        print(f"Cost: ${result.cost:.6f}")
        print(f"Latency: {result.latency_ms:.0f}ms")


if __name__ == "__main__":
    asyncio.run(main())
