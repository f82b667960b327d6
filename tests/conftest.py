"""Shared test fixtures for llm-router."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator

import pytest

import llm_router.observability.logging as log_mod
from llm_router.config import RouterConfig
from llm_router.manager import ProviderManager
from llm_router.testing import FakeProvider

_VENDOR_ENV = (
    "GOOGLE_AI_API_KEY",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "CLAUDE_API_KEY",
    "ANTHROPIC_API_KEY",
    "CLAUDE_MODEL",
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolated_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials and router settings out of unit tests."""
    if request.node.get_closest_marker("integration"):
        return
    for name in _VENDOR_ENV:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("LLM_ROUTER_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _keep_pytest_log_handlers() -> Iterator[None]:
    """ProviderManager configures root logging once; skip it under pytest."""
    original = log_mod._CONFIGURED
    log_mod._CONFIGURED = True
    yield
    log_mod._CONFIGURED = original


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fakes() -> dict[str, FakeProvider]:
    """One fake per built-in provider name, all succeeding by default."""
    return {
        "gemini": FakeProvider("gemini", text="from gemini", model="gemini-test"),
        "chatgpt": FakeProvider("chatgpt", text="from chatgpt", model="gpt-test"),
        "claude": FakeProvider("claude", text="from claude", model="claude-test"),
    }


@pytest.fixture
def make_manager(
    fakes: dict[str, FakeProvider], clock: FakeClock
) -> Callable[..., ProviderManager]:
    """Build a ProviderManager over the fakes with config overrides."""

    def _make(**overrides: object) -> ProviderManager:
        config = RouterConfig(**overrides)  # type: ignore[arg-type]
        return ProviderManager(config=config, providers=fakes, clock=clock)

    return _make
