"""
OpenTelemetry tracing

Use cases open their own spans through `trace.get_tracer(__name__)`; this
module owns the provider, its exporters and the FastAPI/SQLAlchemy
auto-instrumentation.
"""

from typing import Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from sqlalchemy.ext.asyncio import AsyncEngine

from src.platform.config.core_setting import settings


class TracingConfig:
    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: Optional[str] = None,
        console_export: Optional[bool] = None,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.console_export = (
            settings.OTEL_CONSOLE_EXPORT if console_export is None else console_export
        )
        self._provider: Optional[TracerProvider] = None

    def setup(self) -> None:
        """Install the global tracer provider. Without exporters spans are recorded and dropped."""
        self._provider = TracerProvider(
            resource=Resource.create(
                {SERVICE_NAME: self.service_name, SERVICE_VERSION: settings.VERSION}
            )
        )
        for processor in self._span_processors():
            self._provider.add_span_processor(processor)
        trace.set_tracer_provider(self._provider)

    def _span_processors(self) -> list[SpanProcessor]:
        processors: list[SpanProcessor] = []
        if self.otlp_endpoint:
            processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint)))
        if self.console_export:
            processors.append(BatchSpanProcessor(ConsoleSpanExporter()))
        return processors

    @staticmethod
    def instrument_fastapi(*, app: FastAPI) -> None:
        # Metric scrapes and health checks would drown the booking spans
        FastAPIInstrumentor.instrument_app(app, excluded_urls='health,metrics')

    @staticmethod
    def instrument_sqlalchemy(*, engine: AsyncEngine) -> None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)

    def shutdown(self) -> None:
        if self._provider is not None:
            self._provider.shutdown()
