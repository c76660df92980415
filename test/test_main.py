"""
Test-specific FastAPI Application

No background task group: after-commit e-mail is sent inline so tests can
inspect the in-memory outbox. Uses the shared app factory for common setup.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine
from src.platform.logging.loguru_io import Logger
from test.conftest import reset_schema


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')

    await reset_schema()
    Logger.base.info('🗄️  [Test App] Database schema reset')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Test App] Dependency injection wired')

    yield

    container.unwire()
    await dispose_engine()
    Logger.base.info('👋 [Test App] Shutdown complete')


app = create_app(lifespan=lifespan_for_tests, title_suffix=' (Test)')
