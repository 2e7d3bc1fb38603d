"""
Production FastAPI Application

Box office API over the store selected by STORE_BACKEND.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_engine,
)
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Box Office] Starting up...')

    tracing = TracingConfig(service_name='box-office-service')
    tracing.setup()
    Logger.base.info('📊 [Box Office] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Box Office] Dependency injection wired')

    if settings.STORE_BACKEND == 'postgres':
        tracing.instrument_sqlalchemy(engine=get_engine())
        await create_db_and_tables()
        Logger.base.info('🗄️  [Box Office] Database engine ready + instrumented')
    else:
        Logger.base.info('🧠 [Box Office] Using in-memory store')

    Logger.base.info('✅ [Box Office] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Box Office] Shutting down...')

    if settings.STORE_BACKEND == 'postgres':
        await dispose_engine()
        Logger.base.info('🗄️  [Box Office] Database engine disposed')

    # Flush remaining spans
    tracing.shutdown()

    container.unwire()
    cleanup()

    Logger.base.info('👋 [Box Office] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
