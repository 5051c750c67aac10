"""
Persona Context - Observability Module

Single observability adapter for the runtime.
All metrics and structured logs go through this module.

Usage:
    from persona_context.observability import get_observability

    obs = get_observability()
    obs.increment("tools.compress_context")
    obs.histogram("compression.ratio", 42)

    with obs.trace("compress"):
        # timed code here
        pass
"""

from .monitoring import (
    JSONFormatter,
    ObservabilityAdapter,
    configure_logging,
    get_observability,
    initialize_observability,
)

__all__ = [
    "ObservabilityAdapter",
    "JSONFormatter",
    "configure_logging",
    "get_observability",
    "initialize_observability",
]
