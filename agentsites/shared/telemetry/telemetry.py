"""OpenTelemetry tracing for the API, the database, and propagation fan-out.

Exporters: "console" for development, "otlp" (gRPC) for a collector, or
"none" to keep spans in-process (trace ids still appear in logs).
"""

import logging
import threading
from dataclasses import dataclass, field

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from agentsites.core.config import Settings

logger = logging.getLogger(__name__)

# Liveness probe path; not traced.
EXCLUDED_URLS = "/api/v1/health"


def _build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    match exporter_type:
        case "none":
            return None
        case "otlp" if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        case "otlp":
            logger.warning("TELEMETRY_EXPORTER=otlp without an endpoint; using console")
            return ConsoleSpanExporter()
        case "console":
            return ConsoleSpanExporter()
        case _:
            logger.warning("Unknown exporter type '%s', using console", exporter_type)
            return ConsoleSpanExporter()


@dataclass
class TelemetryConfig:
    """Tracer provider plus the instrumentations applied to it."""

    service_name: str
    service_version: str
    environment: str = "development"
    exporter_type: str = "console"
    otlp_endpoint: str | None = None
    sample_rate: float = 1.0
    tracer_provider: TracerProvider | None = field(default=None, init=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def setup(self) -> TracerProvider | None:
        """Create the tracer provider and install it globally.

        Returns None and leaves the no-op provider in place if setup fails.
        """
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=ParentBased(TraceIdRatioBased(self.sample_rate)),
            )
            exporter = _build_exporter(self.exporter_type, self.otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Failed to initialize telemetry")
            return None
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s version=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.service_version,
            self.exporter_type,
            self.sample_rate,
        )
        return provider

    def instrument(self, app: FastAPI, engine: AsyncEngine | None) -> None:
        """Instrument request handling, SQL statements, and log records."""
        if self.tracer_provider is None:
            return
        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=self.tracer_provider, excluded_urls=EXCLUDED_URLS
        )
        if engine is not None:
            SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine,
                tracer_provider=self.tracer_provider,
                enable_commenter=True,
            )
        # Adds otelTraceID / otelSpanID to records without replacing our format.
        LoggingInstrumentor().instrument(
            tracer_provider=self.tracer_provider, set_logging_format=False
        )
        logger.info(
            "Instrumentation enabled: fastapi, logging%s",
            ", sqlalchemy" if engine is not None else "",
        )

    def shutdown(self) -> None:
        """Flush pending spans and shut the provider down."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Error during telemetry shutdown")
        else:
            logger.info("Telemetry shutdown complete")


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the global telemetry instance (set at startup)."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or clear) the global telemetry instance."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer for custom spans (e.g. get_tracer(__name__))."""
    return trace.get_tracer(name)
