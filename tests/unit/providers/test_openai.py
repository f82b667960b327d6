"""Tests for ChatGPTProvider."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

pytest.importorskip("openai")

from llm_router.config import ProviderSettings  # noqa: E402
from llm_router.exceptions import EmptyResponseError  # noqa: E402
from llm_router.providers.openai import ChatGPTProvider  # noqa: E402
from llm_router.types import GenerationOptions  # noqa: E402


def _completion(text: str | None, usage: SimpleNamespace | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=usage,
    )


@pytest.mark.unit
class TestChatGPTProvider:
    async def test_generate_returns_result(self) -> None:
        usage = SimpleNamespace(prompt_tokens=30, completion_tokens=5, total_tokens=35)
        with patch("llm_router.providers.openai.AsyncOpenAI") as mock_cls:
            create = AsyncMock(return_value=_completion(" Brasília. ", usage))
            mock_cls.return_value.chat.completions.create = create
            provider = ChatGPTProvider(api_key="sk-test")

            result = await provider.generate(
                "You are helpful.",
                [{"role": "user", "content": "Capital of Brazil?"}],
            )

        assert result.text == "Brasília."
        assert result.provider == "chatgpt"
        assert result.model == "gpt-4o-mini"
        assert result.usage is not None
        assert (result.usage.prompt_tokens, result.usage.completion_tokens) == (30, 5)
        assert result.usage.total_tokens == 35

        kwargs = create.await_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are helpful."},
            {"role": "user", "content": "Capital of Brazil?"},
        ]
        assert kwargs["top_p"] == 1.0
        assert kwargs["frequency_penalty"] == 0.0
        assert kwargs["presence_penalty"] == 0.0

    async def test_options_translated(self) -> None:
        with patch("llm_router.providers.openai.AsyncOpenAI") as mock_cls:
            create = AsyncMock(return_value=_completion("ok"))
            mock_cls.return_value.chat.completions.create = create
            provider = ChatGPTProvider(api_key="sk-test")

            result = await provider.generate(
                "",
                [{"role": "user", "content": "x"}],
                GenerationOptions(max_tokens=5, top_p=0.3, presence_penalty=0.5, top_k=9),
            )

        kwargs = create.await_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "x"}]
        assert kwargs["max_tokens"] == 5
        assert kwargs["top_p"] == 0.3
        assert kwargs["presence_penalty"] == 0.5
        assert "top_k" not in kwargs
        assert result.usage is not None
        assert result.usage.total_tokens == 0

    async def test_none_content_raises(self) -> None:
        with patch("llm_router.providers.openai.AsyncOpenAI") as mock_cls:
            mock_cls.return_value.chat.completions.create = AsyncMock(return_value=_completion(None))
            provider = ChatGPTProvider(api_key="sk-test")

            with pytest.raises(EmptyResponseError):
                await provider.generate("s", [{"role": "user", "content": "x"}])

    async def test_vendor_error_propagates_unchanged(self) -> None:
        error = ConnectionError("reset by peer")
        with patch("llm_router.providers.openai.AsyncOpenAI") as mock_cls:
            mock_cls.return_value.chat.completions.create = AsyncMock(side_effect=error)
            provider = ChatGPTProvider(api_key="sk-test")

            with pytest.raises(ConnectionError) as exc_info:
                await provider.generate("s", [{"role": "user", "content": "x"}])

        assert exc_info.value is error

    def test_from_settings(self) -> None:
        with patch("llm_router.providers.openai.AsyncOpenAI") as mock_cls:
            provider = ChatGPTProvider.from_settings(
                ProviderSettings(api_key="k", base_url="http://proxy/v1", timeout_seconds=5)  # type: ignore[arg-type]
            )
        mock_cls.assert_called_once_with(api_key="k", base_url="http://proxy/v1", timeout=5.0)
        assert provider.info()["model"] == "gpt-4o-mini"
