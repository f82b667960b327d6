"""OpenTelemetry tracing for provider calls."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from llm_router.types import GenerationResult

logger = logging.getLogger(__name__)

try:
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter,
    )

    HAS_OTLP = True
except ImportError:
    HAS_OTLP = False


# Module-level tracer, None while tracing is disabled
_tracer: Any = None


def configure_tracing(
    exporter: str = "none",
    endpoint: str = "http://localhost:4317",
    service_name: str = "llm-router",
) -> None:
    """Configure OpenTelemetry tracing.

    Args:
        exporter: One of "none", "console", "otlp".
        endpoint: OTLP collector endpoint (only used when exporter="otlp").
        service_name: Service name for spans.
    """
    global _tracer

    if exporter == "none":
        _tracer = None
        return

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if exporter == "console":
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    elif exporter == "otlp":
        if not HAS_OTLP:
            logger.warning("OTLP exporter requested but opentelemetry-exporter-otlp not installed")
            _tracer = None
            return
        provider.add_span_processor(
            SimpleSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )
    else:
        logger.warning("Unknown trace exporter %r, tracing disabled", exporter)
        _tracer = None
        return

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer("llm_router")
    logger.info("OTEL tracing configured: exporter=%s, service=%s", exporter, service_name)


def get_tracer() -> Any:
    """Return the configured tracer, or None if tracing is disabled."""
    return _tracer


def disable_tracing() -> None:
    """Disable tracing (useful for tests)."""
    global _tracer
    _tracer = None


@asynccontextmanager
async def traced_generation(
    provider: str,
    model: str | None,
    fallback: bool = False,
    operation: str = "llm.generate",
) -> AsyncGenerator[dict[str, Any], None]:
    """Context manager that opens an OTEL span for one provider attempt.

    Usage:
        async with traced_generation("gemini", "gemini-2.0-flash") as span_data:
            result = await provider.generate(...)
            span_data["result"] = result

    The span records llm.provider, llm.model, llm.fallback and, when a
    result is attached, token counts and latency. Exceptions mark the
    span as errored and propagate.
    """
    span_data: dict[str, Any] = {}

    if _tracer is None:
        yield span_data
        return

    with _tracer.start_as_current_span(operation) as span:
        span.set_attribute("llm.provider", provider)
        span.set_attribute("llm.model", model or "provider-default")
        span.set_attribute("llm.fallback", fallback)

        try:
            yield span_data
        except Exception as exc:
            span.set_status(trace.StatusCode.ERROR, str(exc))
            span.record_exception(exc)
            raise
        else:
            result = span_data.get("result")
            if isinstance(result, GenerationResult):
                if result.usage is not None:
                    span.set_attribute("llm.prompt_tokens", result.usage.prompt_tokens)
                    span.set_attribute("llm.completion_tokens", result.usage.completion_tokens)
                    span.set_attribute("llm.total_tokens", result.usage.total_tokens)
                span.set_attribute("llm.latency_ms", result.latency_ms)
