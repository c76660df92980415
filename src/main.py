"""
Production FastAPI Application

Wires the DI container, opens the background task group used for
after-commit e-mail, and releases the database engine on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Lab Booking] Starting up...')

    tracing = TracingConfig(service_name='lab-booking-api')
    if tracing.enabled:
        tracing.setup()
        tracing.instrument_sqlalchemy(engine=get_engine())
        Logger.base.info('📊 [Lab Booking] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Lab Booking] Dependency injection wired')

    get_engine()
    Logger.base.info('🗄️  [Lab Booking] Database engine ready')

    async with anyio.create_task_group() as tg:
        container.task_group.override(tg)
        Logger.base.info('✅ [Lab Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Lab Booking] Shutting down...')
        # E-mail after this point is sent inline; the task group drains the rest
        container.task_group.reset_override()

    await dispose_engine()
    Logger.base.info('🗄️  [Lab Booking] Database engine disposed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Lab Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
