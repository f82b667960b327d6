"""Router configuration via environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

Strategy = Literal["fallback", "round-robin", "best-performance"]

BUILTIN_PROVIDERS: tuple[str, ...] = ("gemini", "chatgpt", "claude")

# Vendor env vars consulted when a provider's settings leave them unset.
_API_KEY_ENV: dict[str, tuple[str, ...]] = {
    "gemini": ("GOOGLE_AI_API_KEY", "GEMINI_API_KEY"),
    "chatgpt": ("OPENAI_API_KEY",),
    "claude": ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
}
_MODEL_ENV: dict[str, str] = {
    "gemini": "GEMINI_MODEL",
    "chatgpt": "OPENAI_MODEL",
    "claude": "CLAUDE_MODEL",
}


class ProviderSettings(BaseModel):
    """Per-provider settings. Unset fields fall back to vendor env vars."""

    api_key: SecretStr | None = None
    model: str | None = None
    base_url: str | None = None
    timeout_seconds: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=1, ge=1, description="Attempts per call inside the adapter.")

    def get_api_key(self, provider: str) -> str:
        """Return the credential as a plain string.

        Raises:
            ValueError: If no credential is configured.
        """
        if self.api_key is None or not self.api_key.get_secret_value():
            msg = f"No API key configured for provider '{provider}'."
            raise ValueError(msg)
        return self.api_key.get_secret_value()


class RouterConfig(BaseSettings):
    """LLM router configuration.

    All fields are read from environment variables with the ``LLM_ROUTER_``
    prefix. Example: ``LLM_ROUTER_STRATEGY=round-robin``. Nested provider
    fields use ``__``: ``LLM_ROUTER_GEMINI__MODEL=gemini-2.0-flash``.
    ``LLM_ROUTER_CLAUDE=false`` disables Claude even if ``CLAUDE_API_KEY``
    is set.
    """

    model_config = {
        "env_prefix": "LLM_ROUTER_",
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    # ── Routing ─────────────────────────────────────────────────
    default_provider: str = Field(default="gemini")
    fallback_order: list[str] = Field(default_factory=lambda: list(BUILTIN_PROVIDERS))
    strategy: Strategy = Field(default="fallback")

    # ── Providers ───────────────────────────────────────────────
    gemini: ProviderSettings | bool | None = None
    chatgpt: ProviderSettings | bool | None = None
    claude: ProviderSettings | bool | None = None

    # ── Health & cost ───────────────────────────────────────────
    health_ttl_seconds: float = Field(default=300.0, gt=0)
    pricing_file: Path | None = Field(
        default=None,
        description="JSON file with per-provider pricing (USD per 1M tokens).",
    )
    cost_retention_days: int | None = Field(
        default=90,
        ge=1,
        description="Days of daily cost ledger kept in memory. None = unbounded.",
    )

    # ── Observability ───────────────────────────────────────────
    trace_enabled: bool = Field(default=False)
    trace_exporter: str = Field(
        default="none",
        description="Trace exporter: 'none', 'console', 'otlp'.",
    )
    trace_endpoint: str = Field(default="http://localhost:4317")
    trace_service_name: str = Field(default="llm-router")

    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="json",
        description="Log format: 'json' or 'console'.",
    )

    @field_validator("fallback_order")
    @classmethod
    def _strip_fallback_order(cls, value: list[str]) -> list[str]:
        return [name.strip() for name in value if name.strip()]

    def resolve_provider(self, name: str) -> ProviderSettings | None:
        """Return effective settings for *name*, or ``None`` if it is disabled.

        A provider left unset is enabled only when one of its credential env
        vars is present. Explicit settings are completed from the vendor env
        vars (credential and model).
        """
        value = getattr(self, name, None)
        if value is False:
            return None

        env_key = _first_env(_API_KEY_ENV.get(name, ()))
        env_model = os.environ.get(_MODEL_ENV.get(name, ""), "") or None

        if value is None:
            if env_key is None:
                return None
            return ProviderSettings(api_key=SecretStr(env_key), model=env_model)

        settings = ProviderSettings() if value is True else value
        updates: dict[str, object] = {}
        if settings.api_key is None and env_key is not None:
            updates["api_key"] = SecretStr(env_key)
        if settings.model is None and env_model is not None:
            updates["model"] = env_model
        return settings.model_copy(update=updates) if updates else settings


def _first_env(names: tuple[str, ...]) -> str | None:
    for env_var in names:
        value = os.environ.get(env_var)
        if value:
            return value
    return None
