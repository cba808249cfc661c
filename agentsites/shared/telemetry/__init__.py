"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from agentsites.shared.telemetry.logging import get_logger, setup_logging
from agentsites.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    get_tracer,
    set_telemetry,
)
from agentsites.shared.telemetry.tracing import (
    add_span_attributes,
    get_trace_id,
    set_span_error,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "get_tracer",
    "add_span_attributes",
    "set_span_error",
    "get_trace_id",
]
