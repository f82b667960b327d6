"""Observability sub-package: tracing and logging."""

from llm_router.observability.logging import configure_logging
from llm_router.observability.tracing import (
    configure_tracing,
    disable_tracing,
    get_tracer,
    traced_generation,
)

__all__ = [
    "configure_logging",
    "configure_tracing",
    "disable_tracing",
    "get_tracer",
    "traced_generation",
]
