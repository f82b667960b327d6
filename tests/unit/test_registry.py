"""Tests for the provider registry."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from llm_router.config import ProviderSettings
from llm_router.exceptions import ProviderInitError, ProviderNotFoundError
from llm_router.registry import (
    _PROVIDERS,
    build_provider,
    list_providers,
    register_provider,
)


@pytest.mark.unit
class TestRegistry:
    def test_register_and_build(self) -> None:
        mock_provider = MagicMock()
        factory = MagicMock(return_value=mock_provider)
        settings = ProviderSettings(api_key="k")  # type: ignore[arg-type]

        register_provider("test_provider", factory)
        try:
            result = build_provider("test_provider", settings)
        finally:
            _PROVIDERS.pop("test_provider", None)

        factory.assert_called_once_with(settings)
        assert result is mock_provider

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ProviderNotFoundError, match="nonexistent_xyz_999"):
            build_provider("nonexistent_xyz_999", ProviderSettings())

    def test_list_providers_includes_builtins(self) -> None:
        pytest.importorskip("openai")
        pytest.importorskip("anthropic")
        pytest.importorskip("google.genai")
        assert {"gemini", "chatgpt", "claude"} <= set(list_providers())

    def test_factory_error_raises_provider_init_error(self) -> None:
        def bad_factory(settings: ProviderSettings) -> None:
            raise RuntimeError("factory exploded")

        register_provider("broken_provider", bad_factory)  # type: ignore[arg-type]
        try:
            with pytest.raises(ProviderInitError, match="broken_provider"):
                build_provider("broken_provider", ProviderSettings())
        finally:
            _PROVIDERS.pop("broken_provider", None)

    def test_builtin_without_key_raises_init_error(self) -> None:
        pytest.importorskip("anthropic")
        with pytest.raises(ProviderInitError, match="claude"):
            build_provider("claude", ProviderSettings())

    @pytest.mark.parametrize("name", ["", "bad:name"])
    def test_invalid_names_rejected(self, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid provider name"):
            register_provider(name, MagicMock())
