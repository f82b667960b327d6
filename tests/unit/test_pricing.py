"""Tests for the pricing table."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from llm_router.pricing import DEFAULT_PRICING, PricingTable


@pytest.mark.unit
class TestPricingTable:
    def test_defaults(self) -> None:
        table = PricingTable()
        assert table.as_dict() == {
            "gemini": {"input": 0.125, "output": 0.375},
            "chatgpt": {"input": 0.150, "output": 0.600},
            "claude": {"input": 0.300, "output": 1.500},
        }
        assert table.path is None

    def test_unknown_provider(self) -> None:
        assert PricingTable().get("mistral") is None

    def test_file_overrides_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "pricing.json"
        path.write_text(json.dumps({"claude": {"input": 3.0, "output": 15.0}}))

        table = PricingTable(path=path)

        assert table.get("claude").input == 3.0  # type: ignore[union-attr]
        assert table.get("gemini") == DEFAULT_PRICING["gemini"]

    def test_reload_picks_up_changes(self, tmp_path: Path) -> None:
        path = tmp_path / "pricing.json"
        path.write_text(json.dumps({"local": {"input": 1.0, "output": 1.0}}))
        table = PricingTable(path=path)

        path.write_text(json.dumps({"claude": {"input": 9.0, "output": 9.0}}))
        table.reload()

        assert table.get("local") is None
        assert table.get("claude").output == 9.0  # type: ignore[union-attr]

    def test_malformed_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "pricing.json"
        path.write_text(json.dumps({"claude": {"input": -1}}))
        with pytest.raises(ValidationError):
            PricingTable(path=path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            PricingTable(path=tmp_path / "absent.json")
