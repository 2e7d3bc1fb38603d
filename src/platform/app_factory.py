"""
FastAPI app factory shared by the service entrypoint and the test app.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.box_office.driving_adapter.http_controller import (
    booking_controller,
    check_in_controller,
    event_controller,
    report_controller,
)


# (router, prefix, tag)
BOX_OFFICE_ROUTERS: list[tuple[APIRouter, str, str]] = [
    (event_controller.router, '/api/event', 'event'),
    (booking_controller.router, '/api/booking', 'booking'),
    (check_in_controller.router, '/api/check_in', 'check_in'),
    (report_controller.router, '/api/report', 'report'),
]


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Event inventory, bookings and door check-in',
    service_name: str = 'box-office-service',
) -> FastAPI:
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrument before routes are mounted so every route gets a server span
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    for router, prefix, tag in BOX_OFFICE_ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])

    @app.get('/health', tags=['ops'])
    async def health_check() -> dict[str, str]:
        return {
            'status': 'healthy',
            'service': service_name,
            'version': settings.VERSION,
            'store': settings.STORE_BACKEND,
        }

    @app.get('/metrics', tags=['ops'])
    async def get_metrics() -> PlainTextResponse:
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
