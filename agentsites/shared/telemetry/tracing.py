"""Span helpers for the propagation pipeline and error reporting."""

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

AttributeValue = str | int | float | bool


def add_span_attributes(
    prefix: str | None = None, **attributes: AttributeValue | None
) -> None:
    """Set attributes on the current span, as "<prefix>.<key>" when prefix is given.

    None values are skipped.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return
    for key, value in attributes.items():
        if value is None:
            continue
        span.set_attribute(f"{prefix}.{key}" if prefix else key, value)


def set_span_error(exception: BaseException) -> None:
    """Mark the current span as failed and record the exception on it."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_status(Status(StatusCode.ERROR, f"{type(exception).__name__}: {exception}"))
        span.record_exception(exception)


def get_trace_id() -> str | None:
    """Current trace id as 32-char hex, or None outside a sampled span."""
    ctx = trace.get_current_span().get_span_context()
    return format(ctx.trace_id, "032x") if ctx.is_valid else None
