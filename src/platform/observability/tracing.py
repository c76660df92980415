"""
OpenTelemetry tracing for the booking API and the reminder job.

Spans are opened in use cases through ``trace.get_tracer(__name__)``; this
module only installs the provider and the FastAPI / SQLAlchemy
auto-instrumentation. Without an OTLP endpoint or console export the
provider records nothing.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from src.platform.config.core_setting import settings


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig(service_name='lab-booking-api')
        tracing.setup()
        ...
        tracing.shutdown()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool | None = None,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.enable_console = (
            settings.OTEL_CONSOLE_EXPORT if enable_console is None else enable_console
        )
        self._provider: TracerProvider | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.otlp_endpoint) or self.enable_console

    def setup(self) -> None:
        """Install the global tracer provider (call once per process)"""
        resource = Resource(attributes={SERVICE_NAME: self.service_name})
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )
        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine wraps a sync engine; the instrumentor hooks the latter
        SQLAlchemyInstrumentor().instrument(engine=getattr(engine, 'sync_engine', engine))

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()
            self._provider = None
