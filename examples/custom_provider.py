"""Demonstrates registering a custom provider."""

import asyncio
from collections.abc import Sequence
from typing import Any

from llm_router import (
    GenerationOptions,
    GenerationResult,
    ProviderManager,
    ProviderSettings,
    RouterConfig,
    TokenUsage,
    build_provider,
    register_provider,
)
from llm_router.types import Message


class EchoProvider:
    """A demo provider that echoes back the last user message."""

    name = "echo"

    def __init__(self, model: str = "echo-1") -> None:
        self.model = model

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> "EchoProvider":
        return cls(model=settings.model or "echo-1")

    async def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        last_msg = messages[-1]["content"] if messages else "empty"
        return GenerationResult(
            text=f"Echo: {last_msg}",
            provider=self.name,
            model=self.model,
            usage=TokenUsage.of(len(system_prompt.split()), len(last_msg.split())),
        )

    def info(self) -> dict[str, Any]:
        return {"name": "Echo", "model": self.model, "configured": True, "provider": self.name, "api": "local"}

    async def close(self) -> None:
        pass


async def main() -> None:
    # Register the custom provider so it can be built by name
    register_provider("echo", EchoProvider.from_settings)
    echo = build_provider("echo", ProviderSettings(model="echo-2"))

    # Hand it to the manager alongside (or instead of) the built-ins
    config = RouterConfig(default_provider="echo", fallback_order=["echo"])
    async with ProviderManager(config=config, providers={"echo": echo}) as manager:
        result = await manager.generate(
            "Repeat the user.",
            [{"role": "user", "content": "Hello from a custom provider!"}],
        )
        print(f"Response: {result.text}")
        print(f"Provider: {result.provider} ({result.model})")
        # No pricing registered for "echo", so the call is free
        print(f"Cost: ${result.cost:.6f}")


if __name__ == "__main__":
    asyncio.run(main())
