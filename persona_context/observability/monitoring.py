"""
Persona Context - Observability Monitoring

In-memory metrics collection and structured JSON logging.
Nothing is persisted: counters live for the process lifetime only.
"""

import contextvars
import json
import logging
import threading
import time
from collections import defaultdict
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

# Trace ID context variable for correlating log lines of one tool call
_trace_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)

_RESERVED_RECORD_KEYS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class ObservabilityAdapter:
    """
    Simple in-memory observability adapter.

    Provides:
    - Metrics (counters, gauges, histograms) kept in process memory
    - Trace IDs via context variables
    - Span timing through trace()
    """

    def __init__(self, enable_metrics: bool = True):
        """
        Initialize observability adapter.

        Args:
            enable_metrics: Enable metrics collection
        """
        self.enable_metrics = enable_metrics
        self.logger = logging.getLogger("persona_context.observability")

        self._lock = threading.Lock()
        self._counters: dict[str, float] = defaultdict(float)
        self._gauges: dict[str, float] = {}
        self._histograms: dict[str, list[float]] = defaultdict(list)

    @staticmethod
    def _key(metric: str, tags: dict[str, str] | None) -> str:
        if not tags:
            return metric
        labels = ",".join(f"{k}={v}" for k, v in sorted(tags.items()))
        return f"{metric}{{{labels}}}"

    def increment(
        self,
        metric: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        Args:
            metric: Metric name (e.g., "tools.compress_context")
            value: Value to increment by
            tags: Optional metric tags/labels
        """
        if not self.enable_metrics:
            return
        with self._lock:
            self._counters[self._key(metric, tags)] += value

    def gauge(
        self,
        metric: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to its current value."""
        if not self.enable_metrics:
            return
        with self._lock:
            self._gauges[self._key(metric, tags)] = value

    def histogram(
        self,
        metric: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """
        Record a histogram metric (for latencies, ratios, sizes).

        Args:
            metric: Metric name
            value: Value to record
            tags: Optional metric tags
        """
        if not self.enable_metrics:
            return
        with self._lock:
            self._histograms[self._key(metric, tags)].append(value)

    def event(self, name: str, payload: dict[str, Any]) -> None:
        """
        Record an event as a structured log line.

        Args:
            name: Event name
            payload: Event data
        """
        self.logger.info(
            f"Event: {name}",
            extra={
                "event_name": name,
                "event_payload": payload,
                "trace_id": self.get_trace_id(),
            },
        )

    @contextmanager
    def trace(self, span_name: str, tags: dict[str, str] | None = None) -> Generator[None, None, None]:
        """
        Context manager for timing a span.

        Example:
            with observability.trace("compress"):
                result = engine.compress(text, "balanced")
        """
        start_time = time.perf_counter()
        trace_id = self.get_trace_id()
        tags = tags or {}

        try:
            yield
        except Exception as e:
            self.logger.error(
                f"Span error: {span_name}",
                extra={
                    "span_name": span_name,
                    "trace_id": trace_id,
                    "error": str(e),
                    "tags": tags,
                },
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.histogram("span.duration_ms", duration_ms, tags={"span_name": span_name, **tags})
            self.logger.debug(
                f"Span completed: {span_name}",
                extra={
                    "span_name": span_name,
                    "trace_id": trace_id,
                    "duration_ms": round(duration_ms, 2),
                },
            )

    def get_trace_id(self) -> str | None:
        """Get current trace ID from context."""
        return _trace_id_ctx.get()

    def generate_trace_id(self) -> str:
        """Generate a new trace ID and set it in context."""
        trace_id = str(uuid4())
        _trace_id_ctx.set(trace_id)
        return trace_id

    def get_metrics(self) -> dict[str, Any]:
        """
        Snapshot of all collected metrics.

        Histograms are summarized as count/min/max/avg.
        """
        with self._lock:
            histograms = {
                name: {
                    "count": len(values),
                    "min": min(values),
                    "max": max(values),
                    "avg": sum(values) / len(values),
                }
                for name, values in self._histograms.items()
                if values
            }
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "histograms": histograms,
            }

    def clear_metrics(self) -> None:
        """Clear all metrics (testing/reset)."""
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._histograms.clear()


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        trace_id = _trace_id_ctx.get()
        if trace_id:
            log_data["trace_id"] = trace_id

        # Fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name
        fmt: "json" for structured output, "text" for plain lines

    Returns:
        The configured "persona_context" logger
    """
    logger = logging.getLogger("persona_context")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False

    return logger


# Global observability adapter instance (singleton)
_observability_adapter: ObservabilityAdapter | None = None


def get_observability() -> ObservabilityAdapter:
    """
    Get the global observability adapter instance.

    All modules use this function rather than creating their own adapters.

    Returns:
        Global ObservabilityAdapter instance
    """
    global _observability_adapter

    if _observability_adapter is None:
        from ..config import get_config

        config = get_config().observability
        _observability_adapter = ObservabilityAdapter(enable_metrics=config.enable_metrics)

    return _observability_adapter


def initialize_observability(enable_metrics: bool = True) -> ObservabilityAdapter:
    """
    Initialize the global observability adapter.

    Args:
        enable_metrics: Enable metrics collection

    Returns:
        Initialized ObservabilityAdapter instance
    """
    global _observability_adapter

    _observability_adapter = ObservabilityAdapter(enable_metrics=enable_metrics)

    return _observability_adapter
